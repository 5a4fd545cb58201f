from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class MatchConfig:
    """Tunable constants for one match. Screen coordinates: y grows downward."""

    # Playfield
    width: int = 800
    height: int = 600

    # Physics
    gravity: float = 100.0  # px/s^2
    dt: float = 0.05  # simulation time step (s)
    velocity_scale: float = 0.5  # power -> launch speed
    top_edge_terminates: bool = False  # shots may arc above the top edge

    # Explosions
    explosion_radius: float = 20.0
    crater_radius: Optional[float] = None  # None -> explosion_radius

    # Terrain generation
    terrain_min_y: int = 300
    terrain_max_y: int = 500
    terrain_floor: int = 50
    extreme_probability: float = 0.3
    min_control_points: int = 2
    max_control_points: int = 21

    # Emplacements
    emplacement_width: int = 30
    emplacement_height: int = 15
    margin_x: int = 50
    margin_y: float = 0.0
    half_separation: int = 150
    barrel_length: float = 30.0

    # Firing input
    angle_range: Tuple[float, float] = (0.0, 90.0)
    power_range: Tuple[float, float] = (0.0, 500.0)
    default_angle: float = 45.0
    default_power: float = 250.0

    def __post_init__(self) -> None:
        if self.width <= 1 or self.height <= 0:
            raise ValueError(f"playfield must be at least 2x1, got {self.width}x{self.height}")
        if self.dt <= 0:
            raise ValueError(f"dt must be positive, got {self.dt}")
        if self.gravity <= 0:
            raise ValueError(f"gravity must be positive, got {self.gravity}")
        if not (self.terrain_floor <= self.terrain_min_y <= self.terrain_max_y <= self.height):
            raise ValueError(
                "terrain bands must satisfy floor <= min_y <= max_y <= height, got "
                f"{self.terrain_floor}, {self.terrain_min_y}, {self.terrain_max_y}, {self.height}"
            )
        if not 0.0 <= self.extreme_probability <= 1.0:
            raise ValueError(f"extreme_probability must be in [0, 1], got {self.extreme_probability}")
        if not 2 <= self.min_control_points <= self.max_control_points:
            raise ValueError(
                f"control point range invalid: [{self.min_control_points}, {self.max_control_points}]"
            )
        left_lo, left_hi = self.left_x_range
        right_lo, right_hi = self.right_x_range
        if left_lo > left_hi or right_lo > right_hi:
            raise ValueError(
                f"playfield width {self.width} too narrow for emplacements "
                f"(left {left_lo}..{left_hi}, right {right_lo}..{right_hi})"
            )
        for name, (lo, hi) in (("angle_range", self.angle_range), ("power_range", self.power_range)):
            if lo > hi:
                raise ValueError(f"{name} is inverted: {lo} > {hi}")

    @property
    def effective_crater_radius(self) -> float:
        return self.explosion_radius if self.crater_radius is None else self.crater_radius

    @property
    def left_x_range(self) -> Tuple[int, int]:
        """Inclusive range of x positions for the left emplacement."""
        return self.margin_x, self.width // 2 - self.half_separation

    @property
    def right_x_range(self) -> Tuple[int, int]:
        """Inclusive range of x positions for the right emplacement."""
        return self.width // 2 + self.half_separation, self.width - self.margin_x - self.emplacement_width
