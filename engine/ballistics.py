import math

from .config import MatchConfig
from .model import Emplacement, FiringParameters, Point, Projectile


def position_at(start: Point, angle_rad: float, velocity: float, t: float, gravity: float) -> Point:
    """Closed-form projectile position after t seconds.

    Evaluated directly from t rather than by accumulating velocity, so long
    flights do not drift.
    """
    x0, y0 = start
    x = x0 + velocity * math.cos(angle_rad) * t
    y = y0 - velocity * math.sin(angle_rad) * t + 0.5 * gravity * t * t
    return (x, y)


def launch(emplacement: Emplacement, firing: FiringParameters, config: MatchConfig) -> Projectile:
    """Projectile at t=0, leaving the muzzle of `emplacement`."""
    aim_deg = 180.0 - firing.angle if emplacement.faces_left(config.width) else firing.angle
    start = emplacement.muzzle(firing.angle, config.barrel_length, config.width)
    return Projectile(
        start=start,
        angle_rad=math.radians(aim_deg),
        velocity=firing.power * config.velocity_scale,
        elapsed=0.0,
        pos=start,
    )


def step(projectile: Projectile, dt: float, gravity: float) -> Projectile:
    """Advance the flight clock by dt and re-evaluate the position."""
    t = projectile.elapsed + dt
    return Projectile(
        start=projectile.start,
        angle_rad=projectile.angle_rad,
        velocity=projectile.velocity,
        elapsed=t,
        pos=position_at(projectile.start, projectile.angle_rad, projectile.velocity, t, gravity),
    )
