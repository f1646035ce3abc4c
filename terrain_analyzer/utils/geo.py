"""Geospatial utility functions."""

from math import radians, sin, cos, sqrt, atan2
from typing import Sequence


EARTH_RADIUS_M = 6371000  # Earth's radius in meters


def haversine_distance(
    lat1: float, lon1: float,
    lat2: float, lon2: float,
) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        lat1, lon1: First point coordinates in degrees
        lat2, lon2: Second point coordinates in degrees

    Returns:
        Distance in meters
    """
    lat1_rad, lon1_rad = radians(lat1), radians(lon1)
    lat2_rad, lon2_rad = radians(lat2), radians(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = sin(dlat/2)**2 + cos(lat1_rad) * cos(lat2_rad) * sin(dlon/2)**2
    c = 2 * atan2(sqrt(a), sqrt(1-a))

    return EARTH_RADIUS_M * c


def slope_percent(elevation_delta: float, horizontal_distance: float) -> float:
    """
    Slope between two points as a percentage.

    Returns 0.0 when the horizontal distance is zero, so coincident
    points never raise.
    """
    if horizontal_distance <= 0:
        return 0.0
    return (elevation_delta / horizontal_distance) * 100


def path_length(coordinates: Sequence[tuple[float, float]]) -> float:
    """Total length of a (lat, lon) polyline in meters."""
    total = 0.0
    for prev, curr in zip(coordinates, coordinates[1:]):
        total += haversine_distance(prev[0], prev[1], curr[0], curr[1])
    return total


def sinuosity(path_distance: float, straight_distance: float) -> float | None:
    """
    Ratio of the travelled path to the straight line between the endpoints.

    Returns None for closed loops (straight distance of zero); callers
    decide how to present that.
    """
    if straight_distance <= 0:
        return None
    return path_distance / straight_distance


def elevation_gain(elevations: Sequence[float]) -> int:
    """Cumulative positive elevation change in whole meters."""
    gain = 0.0
    for prev, curr in zip(elevations, elevations[1:]):
        delta = curr - prev
        if delta > 0:
            gain += delta
    return round(gain)
