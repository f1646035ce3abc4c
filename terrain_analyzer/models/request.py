"""Input models for route analysis requests."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class TourismType(str, Enum):
    """Kinds of trips a route can be analyzed for."""
    FOOT = "foot"
    BIKE = "bike"
    WATER = "water"
    MOUNTAIN = "mountain"
    SKI = "ski"
    CAR = "car"
    AIR = "air"
    MOTORBIKE = "motorbike"


# Common spellings sent by clients
TOURISM_TYPE_ALIASES = {
    "hiking": TourismType.FOOT,
    "walking": TourismType.FOOT,
    "trekking": TourismType.FOOT,
    "cycling": TourismType.BIKE,
    "bicycle": TourismType.BIKE,
    "boat": TourismType.WATER,
    "kayak": TourismType.WATER,
    "canoe": TourismType.WATER,
    "mountaineering": TourismType.MOUNTAIN,
    "alpine": TourismType.MOUNTAIN,
    "skiing": TourismType.SKI,
    "auto": TourismType.CAR,
    "driving": TourismType.CAR,
    "plane": TourismType.AIR,
    "flight": TourismType.AIR,
    "paragliding": TourismType.AIR,
    "moto": TourismType.MOTORBIKE,
    "motorcycle": TourismType.MOTORBIKE,
}


class RouteAnalysisRequest(BaseModel):
    """Request model for analyzing a drawn route."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "coordinates": [[46.5547, 7.9800], [46.5660, 7.9620], [46.5772, 7.9567]],
                "elevationData": [2061, 2345, 2970],
                "lengthKm": 3.1,
                "elevationGain": 909,
                "tourismType": "mountain",
                "startDate": "2025-07-14",
                "endDate": "2025-07-15",
            }
        },
    )

    coordinates: list[tuple[float, float]] = Field(
        default_factory=list,
        description="Route points as (latitude, longitude), in travel order"
    )
    elevation_data: list[float] | None = Field(
        default=None,
        description="Optional elevation per coordinate in meters"
    )
    length_km: float | None = Field(
        default=None,
        ge=0,
        description="Optional route length; derived from geometry when missing"
    )
    elevation_gain: float | None = Field(
        default=None,
        description="Client-side gain estimate; recomputed from the profile"
    )
    tourism_type: TourismType = TourismType.FOOT
    start_date: date = Field(default_factory=date.today)
    end_date: date = Field(default_factory=date.today)

    @model_validator(mode="before")
    @classmethod
    def _accept_points(cls, data):
        # Map clients send points: [{lat, lng}] instead of coordinates
        if isinstance(data, dict) and not data.get("coordinates") and data.get("points"):
            data = dict(data)
            points = data.pop("points")
            if not isinstance(points, list):
                raise ValueError("points must be a list of {lat, lng} objects")
            coordinates = []
            for index, point in enumerate(points):
                lon = point.get("lng", point.get("lon")) if isinstance(point, dict) else None
                if lon is None or point.get("lat") is None:
                    raise ValueError(f"point {index} must have lat and lng: {point!r}")
                coordinates.append((point["lat"], lon))
            data["coordinates"] = coordinates
        return data

    @field_validator("coordinates")
    @classmethod
    def _check_ranges(cls, coordinates: list[tuple[float, float]]) -> list[tuple[float, float]]:
        for index, (lat, lon) in enumerate(coordinates):
            if not -90 <= lat <= 90:
                raise ValueError(f"latitude out of range at point {index}: {lat}")
            if not -180 <= lon <= 180:
                raise ValueError(f"longitude out of range at point {index}: {lon}")
        return coordinates

    @field_validator("tourism_type", mode="before")
    @classmethod
    def _normalize_tourism_type(cls, value):
        if isinstance(value, str):
            key = value.strip().lower()
            return TOURISM_TYPE_ALIASES.get(key, key)
        return value

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _strip_time(cls, value):
        # Browsers send ISO datetimes ("2025-07-14T00:00:00.000Z")
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value
