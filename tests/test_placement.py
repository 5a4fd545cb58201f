"""Test emplacement placement on a heightmap."""
import numpy as np
import pytest

from engine.config import MatchConfig
from engine.placement import place_emplacements, resting_elevation
from engine.rng import DRNG
from engine.terrain import generate_terrain


def test_flat_ground_places_bases_on_surface():
    cfg = MatchConfig()
    flat = np.full(800, 400.0)
    left, right = place_emplacements(flat, cfg, DRNG(1))

    assert left.y == 385.0
    assert right.y == 385.0
    assert (left.width, left.height) == (30.0, 15.0)


def test_placement_ranges_and_separation():
    cfg = MatchConfig()
    flat = np.full(800, 400.0)
    for seed in range(50):
        left, right = place_emplacements(flat, cfg, DRNG(seed))
        assert 50 <= left.x <= 250
        assert 550 <= right.x <= 720
        assert right.x - left.x >= 300


def test_slope_uses_lowest_ground_under_footprint():
    """On a slope the base rests on the lowest point so nothing is buried."""
    slope = 300.0 + np.arange(800) * 0.1  # ground drops toward the right
    assert resting_elevation(slope, 100, 30, 15) == pytest.approx(313.0 - 15)

    hill = 500.0 - np.arange(800) * 0.1  # ground rises toward the right
    assert resting_elevation(hill, 100, 30, 15) == pytest.approx(490.0 - 15)


def test_safety_margin_lifts_base():
    flat = np.full(800, 400.0)
    assert resting_elevation(flat, 100, 30, 15, margin_y=2.0) == 383.0


def test_base_bottom_matches_deepest_footprint_sample():
    cfg = MatchConfig()
    for seed in range(20):
        rng = DRNG(seed)
        terrain = generate_terrain(cfg.width, cfg, rng)
        for base in place_emplacements(terrain, cfg, rng):
            lo, hi = int(base.x), int(base.x + base.width)
            assert base.y + base.height == pytest.approx(terrain[lo:hi + 1].max())


def test_too_narrow_playfield_rejected():
    with pytest.raises(ValueError):
        MatchConfig(width=400)
