"""
Tests for coordinate helpers.

Run with: python -m pytest tests/test_geo.py
"""

import random

from logic.geo import (
    ViewBounds,
    is_valid_coordinate,
    jitter_point,
    normalise_bounds,
    wrap_longitude,
)


def test_is_valid_coordinate():
    assert is_valid_coordinate(0, 0)
    assert is_valid_coordinate(90, 180)
    assert is_valid_coordinate(-90, -180)
    assert not is_valid_coordinate(90.1, 0)
    assert not is_valid_coordinate(0, 180.1)


def test_wrap_longitude():
    assert wrap_longitude(10) == 10
    assert wrap_longitude(180) == 180
    assert wrap_longitude(190) == -170
    assert wrap_longitude(-190) == 170
    assert wrap_longitude(540) == -180


def test_normalise_plain_view():
    bounds = normalise_bounds(north=50, south=40, east=10, west=-5)
    assert bounds == ViewBounds(north=50, south=40, east=10, west=-5)
    assert not bounds.crosses_antimeridian


def test_normalise_view_over_antimeridian():
    bounds = normalise_bounds(north=10, south=-10, east=-170, west=-200)
    assert bounds.west == 160
    assert bounds.east == -170
    assert bounds.crosses_antimeridian


def test_normalise_whole_world():
    bounds = normalise_bounds(north=85, south=-85, east=400, west=-300)
    assert bounds.west == -180
    assert bounds.east == 180


def test_contains():
    plain = ViewBounds(north=10, south=-10, east=10, west=-10)
    assert plain.contains(0, 0)
    assert not plain.contains(0, 11)
    assert not plain.contains(11, 0)

    wrapped = ViewBounds(north=10, south=-10, east=-170, west=170)
    assert wrapped.contains(0, 175)
    assert wrapped.contains(0, -175)
    assert not wrapped.contains(0, 0)


class TestJitterPoint:
    """Test jitter_point."""

    def test_stays_within_half_width(self):
        rng = random.Random(42)
        for _ in range(200):
            lat, lng = jitter_point(48.85, 2.35, 0.1, rng)
            assert abs(lat - 48.85) <= 0.05 + 1e-9
            assert abs(lng - 2.35) <= 0.05 + 1e-9

    def test_moves_the_point(self):
        rng = random.Random(7)
        points = {jitter_point(10.0, 10.0, 0.1, rng) for _ in range(10)}
        assert len(points) > 1

    def test_zero_width_is_exact(self):
        assert jitter_point(10.0, 20.0, 0.0) == (10.0, 20.0)

    def test_clamped_near_pole_and_wrapped_near_antimeridian(self):
        rng = random.Random(1)
        for _ in range(100):
            lat, lng = jitter_point(90.0, 180.0, 0.1, rng)
            assert -90 <= lat <= 90
            assert -180 <= lng <= 180
