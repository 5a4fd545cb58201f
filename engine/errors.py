from typing import Any, Tuple


class ValidationError(ValueError):
    """A firing input fell outside its allowed range.

    Recoverable: the match state is left untouched and the caller re-prompts.
    """

    def __init__(self, field: str, value: Any, bounds: Tuple[float, float]):
        self.field = field
        self.value = value
        self.bounds = bounds
        lo, hi = bounds
        super().__init__(f"Invalid {field} {value!r}: enter a value between {lo:g} and {hi:g}")

    def to_dict(self) -> dict:
        return {"field": self.field, "value": self.value, "bounds": list(self.bounds)}


class MatchStateError(RuntimeError):
    """An operation was requested in a phase that does not accept it."""
