"""Data models for route analysis."""

from .request import RouteAnalysisRequest, TourismType
from .response import (
    UNKNOWN,
    DailySegment,
    DailyWeather,
    ElevationSample,
    GeographicContext,
    GeographicLocation,
    Location,
    RouteAnalysisResponse,
    RouteGeometryStats,
    Temperature,
)

__all__ = [
    "RouteAnalysisRequest",
    "TourismType",
    "UNKNOWN",
    "DailySegment",
    "DailyWeather",
    "ElevationSample",
    "GeographicContext",
    "GeographicLocation",
    "Location",
    "RouteAnalysisResponse",
    "RouteGeometryStats",
    "Temperature",
]
