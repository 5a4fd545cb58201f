"""Test closed-form trajectory evaluation."""
import math

import pytest

from engine.ballistics import launch, position_at, step
from engine.config import MatchConfig
from engine.model import Emplacement, FiringParameters


LEFT_BASE = Emplacement(x=100, y=385, width=30, height=15)
RIGHT_BASE = Emplacement(x=700, y=385, width=30, height=15)


def test_zero_power_falls_straight_down():
    """power=0: x never changes and y(t) = y0 + g*t^2/2."""
    cfg = MatchConfig()
    proj = launch(LEFT_BASE, FiringParameters(angle=45, power=0), cfg)
    x0, y0 = proj.start

    for _ in range(30):
        proj = step(proj, cfg.dt, cfg.gravity)
        x, y = proj.pos
        assert x == x0
        assert y == pytest.approx(y0 + 0.5 * cfg.gravity * proj.elapsed ** 2)


def test_step_matches_closed_form_exactly():
    """Stepping re-evaluates the closed form, so there is no accumulated drift."""
    cfg = MatchConfig()
    proj = launch(LEFT_BASE, FiringParameters(angle=60, power=400), cfg)
    for _ in range(200):
        proj = step(proj, cfg.dt, cfg.gravity)
    assert proj.pos == position_at(proj.start, proj.angle_rad, proj.velocity, proj.elapsed, cfg.gravity)


def test_position_at_formula():
    x, y = position_at((10.0, 300.0), math.radians(30), 100.0, 2.0, 100.0)
    assert x == pytest.approx(10.0 + 100.0 * math.cos(math.radians(30)) * 2.0)
    assert y == pytest.approx(300.0 - 100.0 * 0.5 * 2.0 + 0.5 * 100.0 * 4.0)


def test_launch_from_muzzle_with_scaled_velocity():
    cfg = MatchConfig()
    proj = launch(LEFT_BASE, FiringParameters(angle=90, power=300), cfg)

    assert proj.start[0] == pytest.approx(115.0)
    assert proj.start[1] == pytest.approx(355.0)
    assert proj.pos == proj.start
    assert proj.elapsed == 0.0
    assert proj.velocity == pytest.approx(150.0)


def test_right_side_aims_mirrored():
    """Both players use 0-90 degrees pointing toward the opponent."""
    cfg = MatchConfig()
    left = launch(LEFT_BASE, FiringParameters(angle=45, power=300), cfg)
    right = launch(RIGHT_BASE, FiringParameters(angle=45, power=300), cfg)

    assert left.angle_rad == pytest.approx(math.radians(45))
    assert right.angle_rad == pytest.approx(math.radians(135))
    # Right muzzle sits left of its base center
    assert right.start[0] < RIGHT_BASE.center[0]

    lp = step(left, 0.5, cfg.gravity).pos
    rp = step(right, 0.5, cfg.gravity).pos
    assert lp[0] > left.start[0]
    assert rp[0] < right.start[0]
    assert lp[1] == pytest.approx(rp[1])


def test_x_strictly_increases_for_rightward_shot():
    cfg = MatchConfig()
    proj = launch(LEFT_BASE, FiringParameters(angle=45, power=300), cfg)
    last_x = proj.pos[0]
    for _ in range(50):
        proj = step(proj, cfg.dt, cfg.gravity)
        assert proj.pos[0] > last_x
        last_x = proj.pos[0]
