"""External data sources: elevation providers and reverse geocoding."""

from .elevation import (
    ElevationProvider,
    OpenElevationProvider,
    OpenTopoDataProvider,
    default_providers,
    fetch_elevation_profile,
    fetch_elevations,
)
from .geocoding import (
    format_geographic_context,
    get_geographic_context,
    sample_route_points,
)

__all__ = [
    "ElevationProvider",
    "OpenElevationProvider",
    "OpenTopoDataProvider",
    "default_providers",
    "fetch_elevation_profile",
    "fetch_elevations",
    "format_geographic_context",
    "get_geographic_context",
    "sample_route_points",
]
