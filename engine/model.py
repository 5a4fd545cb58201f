from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple
from enum import Enum
import math

import numpy as np

Side = Literal[0, 1]  # 0 = left player, 1 = right player
Point = Tuple[float, float]  # (x, y) in pixels, y grows downward
Heightmap = np.ndarray  # float64[width], surface y per integer x

LEFT: Side = 0
RIGHT: Side = 1

class Phase(Enum):
    """Match controller state"""
    AWAITING_ANGLE = "awaiting_angle"
    AWAITING_POWER = "awaiting_power"
    FIRING = "firing"
    ROUND_OVER = "round_over"

class OutcomeKind(Enum):
    """How a flight ended"""
    TERRAIN_HIT = "terrain_hit"
    DIRECT_HIT = "direct_hit"
    OUT_OF_BOUNDS = "out_of_bounds"

@dataclass(frozen=True)
class Emplacement:
    """A player's base: axis-aligned rectangle with its top-left corner at (x, y)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def contains(self, pos: Point) -> bool:
        """Inclusive rectangle test."""
        px, py = pos
        return (self.x <= px <= self.x + self.width and
                self.y <= py <= self.y + self.height)

    def faces_left(self, playfield_width: float) -> bool:
        """Bases right of the midpoint aim toward negative x."""
        return self.x > playfield_width / 2

    def muzzle(self, angle_deg: float, barrel_length: float, playfield_width: float) -> Point:
        """Tip of the barrel, pivoting on the top-center of the base."""
        aim_deg = 180.0 - angle_deg if self.faces_left(playfield_width) else angle_deg
        rad = math.radians(aim_deg)
        base_x = self.x + self.width / 2
        base_y = self.y
        return (base_x + barrel_length * math.cos(rad),
                base_y - barrel_length * math.sin(rad))

@dataclass
class FiringParameters:
    angle: float  # degrees above horizontal, aimed toward the opponent
    power: float

@dataclass(frozen=True)
class Projectile:
    start: Point
    angle_rad: float  # already mirrored for the firing side
    velocity: float
    elapsed: float = 0.0
    pos: Point = (0.0, 0.0)

@dataclass(frozen=True)
class ImpactOutcome:
    kind: OutcomeKind
    position: Optional[Point] = None  # None for OUT_OF_BOUNDS
    target_side: Optional[Side] = None  # set for DIRECT_HIT

    @property
    def explodes(self) -> bool:
        return self.kind is not OutcomeKind.OUT_OF_BOUNDS

@dataclass
class Event:
    kind: str
    ts_ms: int
    data: Dict

@dataclass
class MatchState:
    heightmap: Heightmap
    emplacements: Tuple[Emplacement, Emplacement]
    current_player: Side = LEFT
    phase: Phase = Phase.AWAITING_ANGLE
    settings: List[FiringParameters] = field(default_factory=list)
    projectile: Optional[Projectile] = None
    last_outcome: Optional[ImpactOutcome] = None
    winner: Optional[Side] = None
    ts_ms: int = 0

    @property
    def game_over(self) -> bool:
        return self.phase is Phase.ROUND_OVER

    @property
    def shooter(self) -> Emplacement:
        return self.emplacements[self.current_player]

    @property
    def target(self) -> Emplacement:
        return self.emplacements[1 - self.current_player]

    @property
    def width(self) -> int:
        return int(self.heightmap.shape[0])
