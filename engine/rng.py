import numpy as np

class DRNG:
    """Deterministic Random Number Generator wrapper."""

    def __init__(self, seed: int):
        self.g = np.random.Generator(np.random.PCG64(seed))

    def bernoulli(self, p: float) -> bool:
        """Return True with probability p."""
        return bool(self.g.random() < p)

    def uniform(self, a: float, b: float) -> float:
        """Return a random float in [a, b)."""
        return float(self.g.uniform(a, b))

    def integer(self, a: int, b: int) -> int:
        """Return a random integer in [a, b], both ends inclusive."""
        return int(self.g.integers(a, b, endpoint=True))

    def coin(self) -> int:
        """Return 0 or 1 with equal probability."""
        return self.integer(0, 1)
