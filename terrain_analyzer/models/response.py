"""Output models for route analysis responses."""

import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


UNKNOWN = "unknown"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Location(CamelModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class ElevationSample(CamelModel):
    """One elevation value normalized from any provider."""
    elevation: float | None
    location: Location


class GeographicLocation(CamelModel):
    """Administrative names resolved for one sampled route point."""
    point: tuple[float, float]
    country: str = UNKNOWN
    region: str = UNKNOWN
    area: str = UNKNOWN
    locality: str = UNKNOWN
    type: str = UNKNOWN


class GeographicContext(CamelModel):
    """Administrative areas a route passes through."""

    countries: list[str] = Field(default_factory=list)
    regions: list[str] = Field(default_factory=list)
    areas: list[str] = Field(default_factory=list)
    localities: list[str] = Field(default_factory=list)
    multi_region: bool = False
    multi_country: bool = False
    total_points_analyzed: int = 0

    @classmethod
    def unknown(cls) -> "GeographicContext":
        """Context used when no sampled point could be resolved."""
        return cls(
            countries=[UNKNOWN],
            regions=[UNKNOWN],
            areas=[UNKNOWN],
            localities=[UNKNOWN],
        )

    @property
    def is_unknown(self) -> bool:
        return not self.countries or self.countries[0] == UNKNOWN


class RouteGeometryStats(CamelModel):
    """Aggregate slope and shape statistics for a route."""

    avg_slope: float = 0
    max_slope: float = 0
    steep_sections: int = 0
    sinuosity: float | None = Field(
        default=0,
        description="Path length over straight-line distance; null for loops"
    )
    min_elevation: float = 0
    max_elevation: float = 0
    terrain_class: str = "insufficient data"

    @property
    def elevation_range(self) -> float:
        return self.max_elevation - self.min_elevation


class Temperature(CamelModel):
    min: float
    max: float


class DailyWeather(CamelModel):
    """Simulated weather for one day. Not a forecast."""

    date: datetime.date
    temperature: Temperature
    conditions: str
    precipitation: float = Field(..., ge=0, description="Millimeters")
    wind_speed: float = Field(..., ge=0, description="km/h")
    description: str


class DailySegment(CamelModel):
    """A single day's share of the route."""

    day: int = Field(..., ge=1)
    date: datetime.date
    distance: float = Field(..., ge=0, description="Kilometers")
    elevation_gain: int = Field(default=0, ge=0)
    description: str
    weather: DailyWeather
    recommendations: list[str] = Field(default_factory=list)


class RouteAnalysisResponse(CamelModel):
    """Complete route analysis output."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "analysis": "{\"summary\": {\"difficultyScore\": 6}}",
                "analysisStructured": {"summary": {"difficultyScore": 6}},
                "stats": {
                    "avgSlope": 14.2,
                    "maxSlope": 31.5,
                    "steepSections": 4,
                    "sinuosity": 1.18,
                    "minElevation": 2061,
                    "maxElevation": 2970,
                    "terrainClass": "hilly",
                },
                "terrainType": "hilly",
                "geographicContext": {
                    "countries": ["Switzerland"],
                    "regions": ["Bern"],
                    "areas": ["Interlaken-Oberhasli"],
                    "localities": ["Lauterbrunnen"],
                    "multiRegion": False,
                    "multiCountry": False,
                    "totalPointsAnalyzed": 3,
                },
                "formattedGeoContext": "Country: Switzerland. Region: Bern. ",
                "dailyRoutes": [],
                "totalDays": 2,
            }
        },
    )

    analysis: str
    analysis_structured: dict[str, Any] | None = None
    stats: RouteGeometryStats
    terrain_type: str
    geographic_context: GeographicContext
    formatted_geo_context: str
    daily_routes: list[DailySegment] = Field(default_factory=list)
    total_days: int = Field(..., ge=1)
