"""Geographic context for a route via Nominatim reverse geocoding.

Only a handful of points along the route are looked up, one at a time and
spaced out in time, to stay inside the public Nominatim usage policy.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

import httpx

from terrain_analyzer.config import Settings
from terrain_analyzer.models import UNKNOWN, GeographicContext, GeographicLocation

from ._http import client_scope


logger = logging.getLogger(__name__)

# Address keys tried in order for each administrative level
ADDRESS_FIELDS = {
    "country": ("country",),
    "region": ("state", "region", "province"),
    "area": ("county", "district"),
    "locality": ("city", "town", "village"),
}

MAX_LISTED_LOCALITIES = 3


def sample_route_points(
    coordinates: Sequence[tuple[float, float]],
    max_samples: int = 5,
) -> list[tuple[float, float]]:
    """
    Pick evenly spaced points plus both endpoints, without duplicates.

    Returns at most max_samples + 2 points in route order of first appearance.
    """
    if not coordinates:
        return []

    step = max(1, len(coordinates) // max_samples)
    samples = []
    for i in range(0, len(coordinates), step):
        if len(samples) >= max_samples:
            break
        samples.append(tuple(coordinates[i]))

    samples.append(tuple(coordinates[0]))
    samples.append(tuple(coordinates[-1]))

    # dict preserves insertion order
    return list(dict.fromkeys(samples))


def _first_field(address: dict, keys: Sequence[str]) -> str:
    for key in keys:
        value = address.get(key)
        if value:
            return value
    return UNKNOWN


async def reverse_geocode(
    client: httpx.AsyncClient,
    point: tuple[float, float],
    settings: Settings,
) -> GeographicLocation | None:
    """
    Resolve administrative names for one point.

    Returns None when Nominatim has no address for the point. Transport and
    HTTP errors propagate to the caller.
    """
    response = await client.get(
        f"{settings.nominatim_url}/reverse",
        params={
            "format": "json",
            "lat": point[0],
            "lon": point[1],
            "zoom": settings.geocode_zoom,
            "accept-language": settings.geocode_language,
        },
        headers={"User-Agent": settings.geocode_user_agent},
        timeout=settings.geocode_timeout_s,
    )
    response.raise_for_status()
    data = response.json()

    address = data.get("address") if isinstance(data, dict) else None
    if not address:
        return None
    if not isinstance(address, dict):
        raise ValueError(f"malformed address: {address!r}")

    return GeographicLocation(
        point=point,
        type=data.get("addresstype") or UNKNOWN,
        **{level: _first_field(address, keys) for level, keys in ADDRESS_FIELDS.items()},
    )


def aggregate_locations(locations: Sequence[GeographicLocation]) -> GeographicContext:
    """Merge resolved points into unique administrative name lists."""
    countries, regions, areas, localities = {}, {}, {}, {}

    for loc in locations:
        for bucket, value in (
            (countries, loc.country),
            (regions, loc.region),
            (areas, loc.area),
            (localities, loc.locality),
        ):
            if value != UNKNOWN:
                bucket[value] = None

    return GeographicContext(
        countries=list(countries),
        regions=list(regions),
        areas=list(areas),
        localities=list(localities),
        multi_region=len(regions) > 1,
        multi_country=len(countries) > 1,
        total_points_analyzed=len(locations),
    )


async def get_geographic_context(
    coordinates: Sequence[tuple[float, float]],
    settings: Settings,
    client: httpx.AsyncClient | None = None,
    sleep: Callable[[float], Awaitable[None]] | None = None,
) -> GeographicContext:
    """
    Countries, regions, areas and localities a route passes through.

    Sampled points are geocoded sequentially: the call for sample i starts
    no earlier than i * geocode_delay_s after the first one. A failing point
    is logged and skipped. If no point resolves, the "unknown" context is
    returned instead of raising.

    Args:
        coordinates: Route points as (lat, lon)
        settings: Nominatim endpoint, pacing and sampling configuration
        client: Optional shared httpx client
        sleep: Awaitable sleep, asyncio.sleep by default (injectable for tests)
    """
    sleep = sleep or asyncio.sleep
    points = sample_route_points(coordinates, settings.geocode_max_samples)
    logger.info("Reverse geocoding %d of %d route points", len(points), len(coordinates))

    locations = []
    try:
        async with client_scope(client) as http:
            loop = asyncio.get_running_loop()
            started = loop.time()

            for index, point in enumerate(points):
                wait = started + index * settings.geocode_delay_s - loop.time()
                if wait > 0:
                    await sleep(wait)

                try:
                    location = await reverse_geocode(http, point, settings)
                except Exception as e:  # one bad point never drops the others
                    logger.warning("Geocoding failed for point %d %s: %s", index, point, e)
                    continue

                if location is None:
                    logger.warning("No address for point %d %s", index, point)
                    continue
                locations.append(location)
    except Exception as e:  # context is optional enrichment, never fatal
        logger.warning("Geographic context unavailable: %s", e)
        return GeographicContext.unknown()

    if not locations:
        logger.warning("None of %d sampled points could be geocoded", len(points))
        return GeographicContext.unknown()

    context = aggregate_locations(locations)
    logger.info(
        "Geographic context: %d countries, %d regions, %d areas, %d localities",
        len(context.countries), len(context.regions), len(context.areas), len(context.localities),
    )
    return context


def format_geographic_context(context: GeographicContext) -> str:
    """Human readable one-paragraph summary of a geographic context."""
    if context.is_unknown:
        return "geographic location could not be determined"

    parts = []

    if context.multi_country:
        parts.append(f"The route crosses several countries: {', '.join(context.countries)}.")
    else:
        parts.append(f"Country: {context.countries[0]}.")

    if context.multi_region:
        parts.append(f"Regions: {', '.join(context.regions)}.")
    elif context.regions:
        parts.append(f"Region: {context.regions[0]}.")

    if context.areas:
        parts.append(f"Areas: {', '.join(context.areas)}.")

    if context.localities:
        listed = ", ".join(context.localities[:MAX_LISTED_LOCALITIES])
        extra = len(context.localities) - MAX_LISTED_LOCALITIES
        if extra > 0:
            parts.append(f"Localities: {listed} and {extra} more.")
        else:
            parts.append(f"Localities: {listed}.")

    return " ".join(parts)
