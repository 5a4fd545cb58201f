import logging
import math
from typing import List, Tuple

import numpy as np

from .config import MatchConfig
from .model import Heightmap, Point
from .rng import DRNG

logger = logging.getLogger(__name__)


def _control_elevation(config: MatchConfig, rng: DRNG) -> int:
    """Elevation for one control point: normal band, or an extreme dip/hill."""
    if rng.bernoulli(config.extreme_probability):
        if rng.bernoulli(0.5):
            return rng.integer(config.terrain_floor, config.terrain_min_y - 1)
        return rng.integer(config.terrain_max_y + 1, config.height)
    return rng.integer(config.terrain_min_y, config.terrain_max_y)


def control_points(width: int, config: MatchConfig, rng: DRNG) -> List[Tuple[float, int]]:
    """Evenly spaced anchors spanning [0, width]; the last sits exactly on width."""
    n = rng.integer(config.min_control_points, config.max_control_points)
    segment = width / (n - 1)
    points = [(i * segment, _control_elevation(config, rng)) for i in range(n)]
    points[-1] = (float(width), points[-1][1])
    return points


def generate_terrain(width: int, config: MatchConfig, rng: DRNG) -> Heightmap:
    """Cosine-interpolated heightmap of length `width`."""
    points = control_points(width, config, rng)
    terrain = np.full(width, np.nan, dtype=np.float64)

    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        start = int(math.floor(x0))
        end = min(int(math.floor(x1)), width)
        if start >= end:
            continue
        xs = np.arange(start, end, dtype=np.float64)
        t = (xs - x0) / (x1 - x0)
        t2 = (1.0 - np.cos(t * np.pi)) / 2.0
        terrain[start:end] = y0 * (1.0 - t2) + y1 * t2

    # Rounding can leave trailing gaps
    gaps = np.isnan(terrain)
    if gaps.any():
        filled = terrain[~gaps]
        terrain[gaps] = filled[-1]

    logger.debug("Generated terrain: width=%d control_points=%d", width, len(points))
    return terrain


def elevation_at(heightmap: Heightmap, x: float, floor_y: float) -> float:
    """Surface y at a fractional x, linearly interpolated between samples.

    Anything left of 0 or at/after the last sample is open space down to
    `floor_y`.
    """
    if x < 0 or x >= len(heightmap) - 1:
        return float(floor_y)
    x0 = int(math.floor(x))
    y0 = float(heightmap[x0])
    y1 = float(heightmap[x0 + 1])
    return y0 + (y1 - y0) * (x - x0)


def carve_crater(heightmap: Heightmap, center: Point, radius: float, floor_y: float) -> Heightmap:
    """Return a copy of `heightmap` with a conical crater dug at `center`.

    Depth falls off linearly from `radius` at the center to zero at the rim,
    and the surface never sinks below `floor_y`.
    """
    carved = heightmap.copy()
    if radius <= 0:
        return carved
    cx = center[0]
    lo = max(int(math.ceil(cx - radius)), 0)
    hi = min(int(math.floor(cx + radius)), len(carved) - 1)
    if lo > hi:
        return carved

    xs = np.arange(lo, hi + 1, dtype=np.float64)
    d = np.abs(xs - cx)
    inside = d < radius
    idx = xs[inside].astype(np.int64)
    depth = radius * (1.0 - d[inside] / radius)
    carved[idx] = np.minimum(carved[idx] + depth, floor_y)
    return carved
