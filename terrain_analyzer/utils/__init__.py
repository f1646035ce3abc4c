"""Utility functions for route analysis."""

from .geo import (
    haversine_distance,
    slope_percent,
    path_length,
    sinuosity,
    elevation_gain,
)

__all__ = [
    "haversine_distance",
    "slope_percent",
    "path_length",
    "sinuosity",
    "elevation_gain",
]
