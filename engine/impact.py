import math
from typing import Optional

from .config import MatchConfig
from .model import Emplacement, Heightmap, ImpactOutcome, OutcomeKind, Point, Side
from .terrain import elevation_at


def distance_2d(pos1: Point, pos2: Point) -> float:
    """Calculate Euclidean distance between two 2D positions."""
    dx = pos2[0] - pos1[0]
    dy = pos2[1] - pos1[1]
    return math.sqrt(dx * dx + dy * dy)


def out_of_bounds(pos: Point, config: MatchConfig) -> bool:
    """Left, right and bottom edges end a flight; the top edge only if configured."""
    x, y = pos
    if x < 0 or x >= config.width or y >= config.height:
        return True
    return config.top_edge_terminates and y < 0


def check_impact(pos: Point, heightmap: Heightmap, target: Emplacement,
                 config: MatchConfig, target_side: Optional[Side] = None) -> Optional[ImpactOutcome]:
    """Classify `pos` for the current tick, or None if the flight continues.

    Only the opposing base is tested; a shot can pass through its own.
    A position inside the target counts as a direct hit even when it also
    touches the ground.
    """
    if out_of_bounds(pos, config):
        return ImpactOutcome(OutcomeKind.OUT_OF_BOUNDS)
    if target.contains(pos):
        return ImpactOutcome(OutcomeKind.DIRECT_HIT, position=pos, target_side=target_side)
    if pos[1] >= elevation_at(heightmap, pos[0], config.height):
        return ImpactOutcome(OutcomeKind.TERRAIN_HIT, position=pos)
    return None


def is_lethal(explosion: Point, target: Emplacement, radius: float) -> bool:
    """Splash check against the target's geometric center."""
    return distance_2d(explosion, target.center) <= radius
