"""Configuration management."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field


# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


class TerrainThresholds(BaseModel):
    """Hand-tuned cut-offs used by terrain classification and slope analysis."""

    mountainous_range_m: float = 1000.0
    hilly_range_m: float = 500.0
    rugged_range_m: float = 200.0
    undulating_slope_percent: float = 8.0
    lowland_elevation_m: float = 50.0
    upland_elevation_m: float = 500.0
    steep_slope_percent: float = 15.0


class WeatherThresholds(BaseModel):
    """Cut-offs that turn simulated weather into daily advisories."""

    rain_gear_precipitation_mm: float = 5.0
    frost_temperature_c: float = 0.0
    wind_caution_kmh: float = 30.0
    water_wind_kmh: float = 15.0
    road_precipitation_mm: float = 2.0
    road_crosswind_kmh: float = 25.0
    air_wind_kmh: float = 20.0
    air_precipitation_mm: float = 1.0
    snow_softening_temperature_c: float = 5.0


class Settings(BaseModel):
    """Application settings."""

    # Reasoning service (OpenRouter, OpenAI-compatible API)
    openrouter_api_key: str | None = Field(
        default_factory=lambda: os.getenv("OPENROUTER_API_KEY")
    )
    openrouter_model: str = Field(
        default_factory=lambda: os.getenv("OPENROUTER_MODEL", "openai/gpt-4o-mini")
    )
    openrouter_base_url: str = Field(
        default_factory=lambda: os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
    )
    reasoning_max_tokens: int = 4000
    reasoning_temperature: float = 0.4
    reasoning_timeout_s: float = 60.0
    app_referer: str = "http://localhost:5173"
    app_title: str = "Route Terrain Analyzer"

    # Reverse geocoding (Nominatim); the public instance allows ~1 request/s
    nominatim_url: str = Field(
        default_factory=lambda: os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
    )
    geocode_user_agent: str = "RouteTerrainAnalyzer/1.0"
    geocode_language: str = Field(
        default_factory=lambda: os.getenv("GEOCODE_LANGUAGE", "en")
    )
    geocode_zoom: int = 8
    geocode_delay_s: float = 1.0
    geocode_max_samples: int = 5
    geocode_timeout_s: float = 30.0

    # Elevation providers
    elevation_timeout_s: float = 30.0
    elevation_batch_size: int = 100

    # Analysis thresholds
    terrain: TerrainThresholds = Field(default_factory=TerrainThresholds)
    weather: WeatherThresholds = Field(default_factory=WeatherThresholds)

    log_level: str = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "INFO")
    )

    def validate_required(self) -> list[str]:
        """Check for missing required configuration."""
        missing = []

        if not self.openrouter_api_key:
            missing.append("OPENROUTER_API_KEY")

        return missing


# Global settings instance
settings = Settings()
