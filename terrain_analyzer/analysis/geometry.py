"""Aggregate slope and shape statistics over a route."""

import logging
from typing import Sequence

from terrain_analyzer.config import TerrainThresholds
from terrain_analyzer.models import RouteGeometryStats
from terrain_analyzer.utils.geo import haversine_distance, slope_percent, sinuosity


logger = logging.getLogger(__name__)


def classify_relief(elevation_range: float, thresholds: TerrainThresholds | None = None) -> str:
    """Coarse four-bucket relief class based on elevation range only."""
    t = thresholds or TerrainThresholds()
    if elevation_range > t.mountainous_range_m:
        return "mountainous"
    if elevation_range > t.hilly_range_m:
        return "hilly"
    if elevation_range > t.rugged_range_m:
        return "rugged"
    return "flat"


def analyze_route_geometry(
    coordinates: Sequence[tuple[float, float]],
    elevations: Sequence[float],
    thresholds: TerrainThresholds | None = None,
) -> RouteGeometryStats:
    """
    Compute slope and sinuosity statistics in a single pass.

    Args:
        coordinates: Route points as (lat, lon)
        elevations: Elevation per point in meters, same length as coordinates
        thresholds: Cut-off values, defaults to TerrainThresholds()

    Returns:
        RouteGeometryStats; a zero-valued "insufficient data" result
        for routes shorter than two points
    """
    if not coordinates or len(coordinates) < 2:
        return RouteGeometryStats()

    t = thresholds or TerrainThresholds()

    total_distance = 0.0
    total_slope = 0.0
    max_slope = 0.0
    steep_sections = 0
    segments = len(coordinates) - 1

    for i in range(1, len(coordinates)):
        prev, curr = coordinates[i - 1], coordinates[i]
        distance = haversine_distance(prev[0], prev[1], curr[0], curr[1])
        total_distance += distance

        if i < len(elevations):
            slope = abs(slope_percent(elevations[i] - elevations[i - 1], distance))
            total_slope += slope
            max_slope = max(max_slope, slope)
            if slope > t.steep_slope_percent:
                steep_sections += 1

    first, last = coordinates[0], coordinates[-1]
    straight = haversine_distance(first[0], first[1], last[0], last[1])
    route_sinuosity = sinuosity(total_distance, straight)
    if route_sinuosity is None:
        logger.info("Route endpoints coincide, sinuosity is undefined")

    min_elevation = min(elevations) if elevations else 0
    max_elevation = max(elevations) if elevations else 0

    return RouteGeometryStats(
        avg_slope=round(total_slope / segments, 1) if segments else 0,
        max_slope=round(max_slope, 1),
        steep_sections=steep_sections,
        sinuosity=round(route_sinuosity, 3) if route_sinuosity is not None else None,
        min_elevation=min_elevation,
        max_elevation=max_elevation,
        terrain_class=classify_relief(max_elevation - min_elevation, t),
    )
