"""Pure route analysis: terrain, geometry and itinerary."""

from .geometry import analyze_route_geometry
from .itinerary import build_daily_segments, count_days
from .terrain import classify_terrain, determine_terrain_type

__all__ = [
    "analyze_route_geometry",
    "build_daily_segments",
    "count_days",
    "classify_terrain",
    "determine_terrain_type",
]
