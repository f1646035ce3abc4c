"""Tests for geospatial utility functions."""

import pytest

from terrain_analyzer.utils.geo import (
    elevation_gain,
    haversine_distance,
    path_length,
    sinuosity,
    slope_percent,
)


MUNICH = (48.1351, 11.5820)
VIENNA = (48.2082, 16.3738)


class TestGeoUtils:
    """Test geospatial utility functions."""

    def test_haversine_distance_same_point(self):
        """Distance from a point to itself should be 0."""
        assert haversine_distance(*MUNICH, *MUNICH) == 0

    def test_haversine_distance_is_symmetric(self):
        assert haversine_distance(*MUNICH, *VIENNA) == pytest.approx(
            haversine_distance(*VIENNA, *MUNICH)
        )

    def test_haversine_distance_known_route(self):
        """Munich to Vienna is roughly 355 km in a straight line."""
        dist = haversine_distance(*MUNICH, *VIENNA)
        assert 300_000 < dist < 450_000

    def test_haversine_distance_one_degree_latitude(self):
        """One degree of latitude is about 111.2 km on a 6371 km sphere."""
        assert haversine_distance(0, 0, 1, 0) == pytest.approx(111_195, rel=1e-3)

    def test_slope_percent(self):
        assert slope_percent(10, 100) == pytest.approx(10.0)
        assert slope_percent(-25, 100) == pytest.approx(-25.0)

    def test_slope_percent_zero_distance(self):
        """Coincident points give a zero slope instead of raising."""
        assert slope_percent(50, 0) == 0.0

    def test_path_length(self):
        points = [(0, 0), (0, 1), (1, 1)]
        expected = haversine_distance(0, 0, 0, 1) + haversine_distance(0, 1, 1, 1)
        assert path_length(points) == pytest.approx(expected)

    def test_path_length_single_point(self):
        assert path_length([(10, 10)]) == 0

    def test_sinuosity(self):
        assert sinuosity(1500, 1000) == pytest.approx(1.5)

    def test_sinuosity_loop_is_undefined(self):
        assert sinuosity(1500, 0) is None

    def test_elevation_gain_counts_only_ascent(self):
        assert elevation_gain([100, 150, 120, 200, 200]) == 130

    def test_elevation_gain_flat(self):
        assert elevation_gain([100, 100]) == 0
