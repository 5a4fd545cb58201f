from typing import Tuple

import numpy as np

from .config import MatchConfig
from .model import Emplacement, Heightmap
from .rng import DRNG


def resting_elevation(heightmap: Heightmap, x: float, width: float, height: float,
                      margin_y: float = 0.0) -> float:
    """Top y for a base whose footprint is [x, x + width].

    Uses the lowest ground under the footprint so the whole base sits on or
    above the surface, even on a slope.
    """
    lo = max(int(np.floor(x)), 0)
    hi = min(int(np.ceil(x + width)), len(heightmap) - 1)
    ground = float(np.max(heightmap[lo:hi + 1]))
    return ground - height - margin_y


def place_emplacements(heightmap: Heightmap, config: MatchConfig,
                       rng: DRNG) -> Tuple[Emplacement, Emplacement]:
    """Random left/right bases, at least 2 * half_separation apart."""
    left_x = rng.integer(*config.left_x_range)
    right_x = rng.integer(*config.right_x_range)

    def _at(x: int) -> Emplacement:
        y = resting_elevation(heightmap, x, config.emplacement_width,
                              config.emplacement_height, config.margin_y)
        return Emplacement(x=float(x), y=y, width=float(config.emplacement_width),
                           height=float(config.emplacement_height))

    return _at(left_x), _at(right_x)
