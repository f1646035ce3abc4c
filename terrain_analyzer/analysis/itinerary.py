"""Split a route into daily segments over a date range.

Distance and elevation gain are divided evenly between days. Where the
climbing actually concentrates along the route is not taken into account.
"""

import datetime
import logging
import random

from terrain_analyzer.config import WeatherThresholds
from terrain_analyzer.errors import RouteValidationError
from terrain_analyzer.models import DailySegment, TourismType

from .weather import build_advisories, generate_daily_weather


logger = logging.getLogger(__name__)


# (first day, middle day, last day, single day) phrasing per trip type
DAY_TEMPLATES = {
    TourismType.FOOT: (
        "Set off on foot and settle into a steady walking rhythm.",
        "Continue the trek, pacing yourself for the days ahead.",
        "Final stage of the walk to the finish.",
        "A one-day hike covering the whole route.",
    ),
    TourismType.BIKE: (
        "First day in the saddle: ease into the ride and check the bike setup.",
        "Keep a sustainable cadence through the middle stage of the ride.",
        "Last ride of the tour into the finish.",
        "A single-day ride over the full route.",
    ),
    TourismType.WATER: (
        "Launch and paddle the opening stretch while getting used to the boat.",
        "Continue downstream, planning landings and rest stops.",
        "Final paddling stage to the take-out point.",
        "A one-day paddle along the whole route.",
    ),
    TourismType.MOUNTAIN: (
        "Approach day: gain height gradually to help acclimatisation.",
        "Mountain stage: start early and keep an eye on the weather.",
        "Descent and exit from the mountains.",
        "A single-day mountain outing: start at dawn.",
    ),
    TourismType.SKI: (
        "First ski day: check bindings and snow conditions before leaving.",
        "Ski touring stage across the snowfields.",
        "Final run out to the trailhead.",
        "A one-day ski tour over the full route.",
    ),
    TourismType.CAR: (
        "Start of the road trip: check tyres, fluids and documents.",
        "Drive the next leg, with rest stops every two hours.",
        "Final drive to the destination.",
        "A single-day drive along the full route.",
    ),
    TourismType.AIR: (
        "First flight leg: complete pre-flight checks and file the plan.",
        "Next flight leg, re-checking weather at each stop.",
        "Final leg and landing at the destination.",
        "A single flight covering the whole route.",
    ),
    TourismType.MOTORBIKE: (
        "First day on the motorbike: check chain, tyres and lights.",
        "Ride the next leg, taking breaks to stay alert.",
        "Final ride to the destination.",
        "A one-day motorbike ride over the full route.",
    ),
}


def describe_day(day_index: int, total_days: int, tourism_type: TourismType) -> str:
    """Templated description distinguishing first, middle and last days."""
    first, middle, last, single = DAY_TEMPLATES[tourism_type]
    if total_days == 1:
        return single
    if day_index == 1:
        return first
    if day_index == total_days:
        return last
    return f"Day {day_index} of {total_days}. {middle}"


def count_days(start_date: datetime.date, end_date: datetime.date) -> int:
    """Inclusive number of days between two dates."""
    if end_date < start_date:
        raise RouteValidationError(
            f"endDate {end_date.isoformat()} is before startDate {start_date.isoformat()}"
        )
    return (end_date - start_date).days + 1


def build_daily_segments(
    total_distance_km: float,
    total_elevation_gain: float,
    tourism_type: TourismType,
    start_date: datetime.date,
    end_date: datetime.date,
    latitude: float,
    rng: random.Random | None = None,
    thresholds: WeatherThresholds | None = None,
) -> list[DailySegment]:
    """
    Partition route totals evenly across an inclusive date range.

    Args:
        total_distance_km: Route length in kilometers
        total_elevation_gain: Cumulative ascent in meters
        tourism_type: Kind of trip, selects descriptions and advisories
        start_date: First day of the trip
        end_date: Last day of the trip (inclusive)
        latitude: Representative latitude for the simulated weather
        rng: Random source for the weather, seed it for repeatable output
        thresholds: Advisory cut-offs

    Returns:
        One DailySegment per day
    """
    days = count_days(start_date, end_date)
    rng = rng or random.Random()

    distance_per_day = total_distance_km / days
    gain_per_day = total_elevation_gain / days

    logger.debug(
        "Splitting %.2f km / %.0f m over %d days", total_distance_km, total_elevation_gain, days
    )

    segments = []
    for day_index in range(1, days + 1):
        day = start_date + datetime.timedelta(days=day_index - 1)
        weather = generate_daily_weather(day, latitude, rng)
        segments.append(DailySegment(
            day=day_index,
            date=day,
            distance=round(distance_per_day, 2),
            elevation_gain=round(gain_per_day),
            description=describe_day(day_index, days, tourism_type),
            weather=weather,
            recommendations=build_advisories(day_index, weather, tourism_type, thresholds),
        ))

    return segments
