"""Elevation lookup across several public providers with fallback.

Providers are tried one after another in priority order. A provider is
skipped on transport errors, non-2xx responses, and also on successful
responses whose values are not plausible terrain elevations.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Sequence

import httpx

from terrain_analyzer.errors import (
    ElevationAcquisitionError,
    ElevationProviderError,
    RouteValidationError,
)
from terrain_analyzer.models import ElevationSample, Location

from ._http import client_scope


logger = logging.getLogger(__name__)

OPENTOPODATA_BASE_URL = "https://api.opentopodata.org/v1"
OPEN_ELEVATION_URL = "https://api.open-elevation.com/api/v1/lookup"

# Public providers accept at most 100 locations per request
MAX_LOCATIONS_PER_REQUEST = 100

# Plausible terrain elevations in meters (Dead Sea shore to above Everest)
MIN_ELEVATION_M = -500
MAX_ELEVATION_M = 10000


class ElevationProvider(ABC):
    """Interface for one elevation source adapted to the common ElevationSample shape."""

    name = "provider"

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    @abstractmethod
    async def fetch(
        self,
        client: httpx.AsyncClient,
        coordinates: Sequence[tuple[float, float]],
    ) -> list[ElevationSample]:
        """Request elevations for the coordinates; raise ElevationProviderError on failure."""

    def _check_response(self, response: httpx.Response) -> dict:
        if response.status_code != 200:
            raise ElevationProviderError(
                self.name, f"HTTP {response.status_code}", status_code=response.status_code
            )
        try:
            return response.json()
        except ValueError as e:
            raise ElevationProviderError(self.name, f"invalid JSON: {e}") from e


class OpenTopoDataProvider(ElevationProvider):
    """OpenTopoData public API, one dataset (e.g. srtm90m, aster30m)."""

    def __init__(self, dataset: str = "srtm90m", base_url: str = OPENTOPODATA_BASE_URL, timeout: float = 30.0):
        super().__init__(timeout)
        self.dataset = dataset
        self.base_url = base_url
        self.name = f"OpenTopoData {dataset}"

    async def fetch(self, client, coordinates):
        # OpenTopoData expects lat,lon pairs separated by |
        locations = "|".join(f"{lat},{lon}" for lat, lon in coordinates)
        response = await client.get(
            f"{self.base_url}/{self.dataset}",
            params={"locations": locations},
            timeout=self.timeout,
        )
        data = self._check_response(response)

        results = data.get("results")
        if not isinstance(results, list):
            raise ElevationProviderError(self.name, f"unexpected payload, status={data.get('status')}")

        samples = []
        for result in results:
            location = result.get("location") or {}
            samples.append(ElevationSample(
                elevation=result.get("elevation"),
                location=Location(lat=location.get("lat"), lng=location.get("lng")),
            ))
        return samples


class OpenElevationProvider(ElevationProvider):
    """Open-Elevation lookup API (POST)."""

    name = "OpenElevation"

    def __init__(self, url: str = OPEN_ELEVATION_URL, timeout: float = 30.0):
        super().__init__(timeout)
        self.url = url

    async def fetch(self, client, coordinates):
        response = await client.post(
            self.url,
            json={
                "locations": [
                    {"latitude": lat, "longitude": lon} for lat, lon in coordinates
                ]
            },
            timeout=self.timeout,
        )
        data = self._check_response(response)

        results = data.get("results")
        if not isinstance(results, list):
            raise ElevationProviderError(self.name, "unexpected payload, no results list")

        # Locations come back as latitude/longitude; reuse the request order
        return [
            ElevationSample(
                elevation=result.get("elevation"),
                location=Location(lat=lat, lng=lon),
            )
            for result, (lat, lon) in zip(results, coordinates)
        ]


def default_providers(timeout: float = 30.0) -> list[ElevationProvider]:
    """Provider chain in priority order."""
    return [
        OpenTopoDataProvider("srtm90m", timeout=timeout),
        OpenTopoDataProvider("aster30m", timeout=timeout),
        OpenElevationProvider(timeout=timeout),
    ]


def validate_samples(samples: Sequence[ElevationSample], expected_count: int) -> str | None:
    """
    Check that provider data looks like real terrain.

    Returns:
        None when the samples are acceptable, otherwise the reason for rejection
    """
    return check_profile([sample.elevation for sample in samples], expected_count)


def check_profile(elevations: Sequence[float | None], expected_count: int) -> str | None:
    """Same plausibility rule as validate_samples, for a bare list of meters."""
    if not elevations:
        return "no samples"
    if len(elevations) != expected_count:
        return f"{len(elevations)} samples for {expected_count} coordinates"
    for index, value in enumerate(elevations):
        if value is None or not math.isfinite(value):
            return f"missing elevation at point {index}"
        if not MIN_ELEVATION_M <= value <= MAX_ELEVATION_M:
            return f"implausible elevation {value} m at point {index}"
    return None


async def fetch_elevations(
    coordinates: Sequence[tuple[float, float]],
    providers: Sequence[ElevationProvider] | None = None,
    client: httpx.AsyncClient | None = None,
) -> list[ElevationSample]:
    """
    Get one elevation per coordinate from the first provider that delivers valid data.

    Args:
        coordinates: Up to 100 (lat, lon) pairs
        providers: Provider chain, defaults to default_providers()
        client: Optional shared httpx client

    Returns:
        Normalized samples, one per coordinate, in input order

    Raises:
        RouteValidationError: No coordinates, or more than 100
        ElevationAcquisitionError: Every provider failed
    """
    if not coordinates:
        raise RouteValidationError("no coordinates to look up elevations for")
    if len(coordinates) > MAX_LOCATIONS_PER_REQUEST:
        raise RouteValidationError(
            f"at most {MAX_LOCATIONS_PER_REQUEST} coordinates per elevation request, got {len(coordinates)}"
        )

    async with client_scope(client) as http:
        _, samples = await _first_valid(http, coordinates, providers)
    return samples


async def _first_valid(
    http: httpx.AsyncClient,
    coordinates: Sequence[tuple[float, float]],
    providers: Sequence[ElevationProvider] | None,
) -> tuple[ElevationProvider, list[ElevationSample]]:
    """Walk the provider chain; return the first provider with valid samples."""
    providers = default_providers() if providers is None else providers
    logger.info("Requesting elevations for %d points", len(coordinates))

    for provider in providers:
        logger.debug("Trying %s", provider.name)
        try:
            samples = await provider.fetch(http, coordinates)
        except ElevationProviderError as e:
            logger.warning("Elevation provider failed: %s", e)
            continue
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Elevation provider %s failed: %s", provider.name, e)
            continue

        problem = validate_samples(samples, len(coordinates))
        if problem:
            logger.warning("Elevation provider %s returned invalid data: %s", provider.name, problem)
            continue

        elevations = [s.elevation for s in samples]
        logger.info(
            "Elevations from %s: min=%sm, max=%sm, count=%d",
            provider.name, min(elevations), max(elevations), len(elevations),
        )
        return provider, samples

    logger.error("All %d elevation providers failed for %d points", len(providers), len(coordinates))
    raise ElevationAcquisitionError("no elevation source available")


async def fetch_elevation_profile(
    coordinates: Sequence[tuple[float, float]],
    providers: Sequence[ElevationProvider] | None = None,
    client: httpx.AsyncClient | None = None,
    batch_size: int = MAX_LOCATIONS_PER_REQUEST,
) -> list[float]:
    """
    Elevation profile for a route of any length, from a single provider.

    The route is split into provider-sized batches. The first batch walks the
    fallback chain and pins the provider that answered; later batches only use
    that provider. If the pinned provider fails mid-route, the whole profile
    is fetched again starting from the next provider in the chain.
    """
    batch_size = min(batch_size, MAX_LOCATIONS_PER_REQUEST)
    remaining = list(default_providers() if providers is None else providers)

    async with client_scope(client) as http:
        while remaining:
            pinned = None
            profile: list[float] = []
            try:
                for start in range(0, len(coordinates), batch_size):
                    batch = coordinates[start:start + batch_size]
                    chain = [pinned] if pinned else remaining
                    pinned, samples = await _first_valid(http, batch, chain)
                    profile.extend(float(s.elevation) for s in samples)
                return profile
            except ElevationAcquisitionError:
                if pinned is None:
                    raise
                logger.warning("%s failed mid-route, refetching the whole profile", pinned.name)
                remaining = remaining[remaining.index(pinned) + 1:]

    raise ElevationAcquisitionError("no elevation source available")
