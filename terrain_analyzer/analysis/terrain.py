"""Terrain classification from elevation and slope statistics."""

from typing import Sequence

from terrain_analyzer.config import TerrainThresholds
from terrain_analyzer.models import UNKNOWN
from terrain_analyzer.utils.geo import haversine_distance, slope_percent


MOUNTAINOUS = "mountainous"
HILLY = "hilly"
RUGGED = "rugged"
UNDULATING_PLAIN = "undulating plain"
LOWLAND = "lowland"
UPLAND = "upland"
FLAT_PLAIN = "flat plain"

TERRAIN_TYPES = (
    MOUNTAINOUS,
    HILLY,
    RUGGED,
    UNDULATING_PLAIN,
    LOWLAND,
    UPLAND,
    FLAT_PLAIN,
)


def classify_terrain(
    elevation_range: float,
    avg_slope: float,
    avg_elevation: float,
    thresholds: TerrainThresholds | None = None,
) -> str:
    """
    Map route statistics to a terrain category.

    Checks run in a fixed order and the first match wins: relief first,
    then average steepness, then base altitude.

    Args:
        elevation_range: Highest minus lowest elevation in meters
        avg_slope: Mean absolute slope in percent
        avg_elevation: Mean elevation in meters
        thresholds: Cut-off values, defaults to TerrainThresholds()

    Returns:
        One of TERRAIN_TYPES
    """
    t = thresholds or TerrainThresholds()

    if elevation_range > t.mountainous_range_m:
        return MOUNTAINOUS
    if elevation_range > t.hilly_range_m:
        return HILLY
    if elevation_range > t.rugged_range_m:
        return RUGGED
    if avg_slope > t.undulating_slope_percent:
        return UNDULATING_PLAIN
    if avg_elevation < t.lowland_elevation_m:
        return LOWLAND
    if avg_elevation > t.upland_elevation_m:
        return UPLAND
    return FLAT_PLAIN


def determine_terrain_type(
    coordinates: Sequence[tuple[float, float]] | None,
    elevations: Sequence[float] | None,
    thresholds: TerrainThresholds | None = None,
) -> str:
    """
    Classify the terrain of a route from its points and elevation profile.

    Returns "unknown" when there are fewer than two points or no elevations.
    """
    if not coordinates or not elevations or len(coordinates) < 2:
        return UNKNOWN

    elevation_range = max(elevations) - min(elevations)
    avg_elevation = sum(elevations) / len(elevations)

    total_slope = 0.0
    for i in range(1, min(len(coordinates), len(elevations))):
        prev, curr = coordinates[i - 1], coordinates[i]
        distance = haversine_distance(prev[0], prev[1], curr[0], curr[1])
        if distance > 0:
            total_slope += abs(slope_percent(elevations[i] - elevations[i - 1], distance))

    avg_slope = total_slope / (len(coordinates) - 1)

    return classify_terrain(elevation_range, avg_slope, avg_elevation, thresholds)
