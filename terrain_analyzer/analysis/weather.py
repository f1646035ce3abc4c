"""Simulated daily weather and the advisories derived from it.

Nothing here is a forecast. Values are drawn at random around a climate
baseline picked from latitude and month, so that itineraries have plausible
conditions to plan against. Pass a seeded ``random.Random`` to get
repeatable output.
"""

import datetime
import random

from terrain_analyzer.config import WeatherThresholds
from terrain_analyzer.models import DailyWeather, Temperature, TourismType


# Base temperature (C) by absolute latitude, checked top to bottom
LATITUDE_BASE_TEMPERATURES = [
    (60, 2.0),    # cold
    (45, 10.0),   # temperate
    (30, 18.0),   # warm
]
TROPICAL_BASE_TEMPERATURE = 26.0  # hot

# Offset from the base by month, northern hemisphere
SEASONAL_OFFSETS = {
    1: -10, 2: -8, 3: -4, 4: 1, 5: 6, 6: 10,
    7: 12, 8: 11, 9: 6, 10: 1, 11: -5, 12: -9,
}

TEMPERATURE_SPREAD = (3.0, 7.0)

# condition -> (weight, precipitation mm range, wind km/h range)
CONDITIONS = {
    "clear": (30, (0.0, 0.0), (0.0, 15.0)),
    "partly cloudy": (30, (0.0, 1.0), (5.0, 20.0)),
    "overcast": (20, (0.0, 3.0), (5.0, 25.0)),
    "rain": (15, (3.0, 20.0), (10.0, 35.0)),
    "thunderstorm": (5, (10.0, 40.0), (25.0, 60.0)),
}

CONDITION_DESCRIPTIONS = {
    "clear": "Clear skies",
    "partly cloudy": "Partly cloudy",
    "overcast": "Overcast",
    "rain": "Rain expected",
    "thunderstorm": "Thunderstorms likely",
    "snow": "Snowfall expected",
}


def base_temperature(latitude: float) -> float:
    """Climate baseline for a latitude, ignoring season."""
    abs_lat = abs(latitude)
    for limit, temperature in LATITUDE_BASE_TEMPERATURES:
        if abs_lat > limit:
            return temperature
    return TROPICAL_BASE_TEMPERATURE


def seasonal_offset(month: int, latitude: float) -> int:
    """Temperature offset for a month; seasons flip south of the equator."""
    if latitude < 0:
        month = (month + 5) % 12 + 1
    return SEASONAL_OFFSETS[month]


def generate_daily_weather(
    day: datetime.date,
    latitude: float,
    rng: random.Random | None = None,
) -> DailyWeather:
    """
    Simulate one day of weather.

    Args:
        day: Calendar date
        latitude: Representative latitude of the route
        rng: Random source, an unseeded one when omitted

    Returns:
        DailyWeather with a condition-consistent precipitation and wind
    """
    rng = rng or random.Random()

    mean = base_temperature(latitude) + seasonal_offset(day.month, latitude)
    t_min = round(mean - rng.uniform(*TEMPERATURE_SPREAD), 1)
    t_max = round(mean + rng.uniform(*TEMPERATURE_SPREAD), 1)

    names = list(CONDITIONS)
    weights = [CONDITIONS[name][0] for name in names]
    conditions = rng.choices(names, weights=weights, k=1)[0]
    _, precipitation_range, wind_range = CONDITIONS[conditions]

    precipitation = round(rng.uniform(*precipitation_range), 1)
    wind_speed = round(rng.uniform(*wind_range), 1)

    if conditions == "rain" and mean <= 0:
        conditions = "snow"

    description = (
        f"{CONDITION_DESCRIPTIONS[conditions]}, {t_min:.0f}..{t_max:.0f} C, "
        f"wind {wind_speed:.0f} km/h (simulated)"
    )

    return DailyWeather(
        date=day,
        temperature=Temperature(min=t_min, max=t_max),
        conditions=conditions,
        precipitation=precipitation,
        wind_speed=wind_speed,
        description=description,
    )


def build_advisories(
    day_index: int,
    weather: DailyWeather,
    tourism_type: TourismType,
    thresholds: WeatherThresholds | None = None,
) -> list[str]:
    """Rule-based advisories for one day of the itinerary."""
    t = thresholds or WeatherThresholds()
    advisories = []

    if weather.precipitation > t.rain_gear_precipitation_mm:
        advisories.append("Pack rain gear and waterproof bags for electronics and documents.")
    if weather.temperature.min < t.frost_temperature_c:
        advisories.append("Frost expected overnight: bring insulating layers and watch for ice.")
    if weather.wind_speed > t.wind_caution_kmh:
        advisories.append("Strong wind: avoid exposed ridges and secure loose gear.")

    if tourism_type == TourismType.WATER:
        if weather.wind_speed > t.water_wind_kmh:
            advisories.append("Wind on open water: keep close to shore and consider delaying crossings.")
    elif tourism_type in (TourismType.BIKE, TourismType.MOTORBIKE):
        if weather.precipitation > t.road_precipitation_mm:
            advisories.append("Wet road surface: reduce speed and allow longer braking distances.")
        if weather.wind_speed > t.road_crosswind_kmh:
            advisories.append("Gusty crosswinds on open stretches: keep a firm grip and ride defensively.")
    elif tourism_type == TourismType.AIR:
        if weather.wind_speed > t.air_wind_kmh or weather.precipitation > t.air_precipitation_mm:
            advisories.append("Marginal flying conditions: check the aviation forecast before departure.")
    elif tourism_type == TourismType.SKI:
        if weather.temperature.max > t.snow_softening_temperature_c:
            advisories.append("Snow softening in the afternoon: start early and check avalanche bulletins.")
    elif tourism_type == TourismType.MOUNTAIN:
        if weather.conditions == "thunderstorm":
            advisories.append("Afternoon thunderstorms: be off summits and ridges by midday.")
        if weather.temperature.max > t.snow_softening_temperature_c and weather.temperature.min < t.frost_temperature_c:
            advisories.append("Freeze-thaw cycle: watch for rockfall in gullies.")

    if day_index == 1:
        advisories.append("Check your equipment and first aid kit before setting off.")

    return advisories
