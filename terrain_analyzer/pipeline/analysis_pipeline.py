"""Deterministic route analysis pipeline.

Pipeline steps:
1. Validate the request
2. Acquire elevations if the client profile is missing or mismatched
3. Classify terrain and compute geometry statistics
4. Reverse geocode a sample of points for geographic context
5. Split the trip into daily segments with simulated weather
6. Ask the reasoning service for the narrative analysis
"""

import logging
import random
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import httpx
from pydantic import ValidationError
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from terrain_analyzer.agents.route_analyst import RouteAnalyst, build_analysis_prompt
from terrain_analyzer.analysis.geometry import analyze_route_geometry
from terrain_analyzer.analysis.itinerary import build_daily_segments, count_days
from terrain_analyzer.analysis.terrain import determine_terrain_type
from terrain_analyzer.config import Settings
from terrain_analyzer.errors import ElevationAcquisitionError, RouteValidationError
from terrain_analyzer.models import RouteAnalysisRequest, RouteAnalysisResponse
from terrain_analyzer.tools._http import client_scope
from terrain_analyzer.tools.elevation import (
    ElevationProvider,
    check_profile,
    default_providers,
    fetch_elevation_profile,
)
from terrain_analyzer.tools.geocoding import format_geographic_context, get_geographic_context
from terrain_analyzer.utils.geo import elevation_gain, path_length


console = Console()
logger = logging.getLogger(__name__)


def parse_request(payload: RouteAnalysisRequest | dict[str, Any]) -> RouteAnalysisRequest:
    """
    Turn a raw payload into a validated request.

    Raises:
        RouteValidationError: Malformed payload or fewer than two coordinates
    """
    if isinstance(payload, RouteAnalysisRequest):
        request = payload
    else:
        try:
            request = RouteAnalysisRequest.model_validate(payload)
        except ValidationError as e:
            raise RouteValidationError(f"Invalid route request: {e}") from e

    if len(request.coordinates) < 2:
        raise RouteValidationError(
            f"At least 2 route points are required, got {len(request.coordinates)}"
        )
    if request.end_date < request.start_date:
        raise RouteValidationError("endDate must not be before startDate")

    return request


class RouteAnalysisPipeline:
    """
    Composes elevation, geometry, geography, itinerary and reasoning steps.

    All collaborators are passed in at construction; nothing is read from
    global state while a request runs.
    """

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        analyst: RouteAnalyst | None = None,
        providers: list[ElevationProvider] | None = None,
        rng: random.Random | None = None,
        show_progress: bool = False,
    ):
        self.settings = settings
        self.client = client
        self.analyst = analyst or RouteAnalyst(settings)
        self.providers = providers or default_providers(settings.elevation_timeout_s)
        self.rng = rng
        self.show_progress = show_progress
        self._progress: Optional[Progress] = None

    @contextmanager
    def _step(self, description: str) -> Iterator[None]:
        """Show a spinner for one step when progress display is enabled."""
        if self._progress is None:
            yield
            return
        task = self._progress.add_task(description, total=None)
        try:
            yield
        finally:
            self._progress.remove_task(task)

    async def analyze(self, payload: RouteAnalysisRequest | dict[str, Any]) -> RouteAnalysisResponse:
        """
        Run the full analysis for one request.

        Raises:
            RouteValidationError: Request rejected before any network call
            ElevationAcquisitionError: No usable elevation data
            UpstreamAuthError: Reasoning service credential problem
            UpstreamServiceError: Reasoning service failure
        """
        request = parse_request(payload)

        if not self.show_progress:
            return await self._execute(request)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            self._progress = progress
            try:
                return await self._execute(request)
            finally:
                self._progress = None

    async def _execute(self, request: RouteAnalysisRequest) -> RouteAnalysisResponse:
        coordinates = request.coordinates
        thresholds = self.settings.terrain

        if request.length_km is None:
            request = request.model_copy(
                update={"length_km": round(path_length(coordinates) / 1000, 2)}
            )

        logger.info(
            "Analyzing route: %d points, %.2f km, %s, %s -> %s",
            len(coordinates), request.length_km, request.tourism_type.value,
            request.start_date, request.end_date,
        )

        async with client_scope(self.client) as http:
            with self._step("⛰️ Getting elevation data..."):
                elevations = await self._elevations(request, http)

            gain = elevation_gain(elevations)
            if request.elevation_gain is not None and round(request.elevation_gain) != gain:
                logger.info("Client elevation gain %s m replaced by %d m", request.elevation_gain, gain)

            with self._step("🧭 Analyzing terrain..."):
                terrain_type = determine_terrain_type(coordinates, elevations, thresholds)
                stats = analyze_route_geometry(coordinates, elevations, thresholds)
            logger.info("Terrain: %s, avg slope %.1f%%, max slope %.1f%%",
                        terrain_type, stats.avg_slope, stats.max_slope)

            with self._step("🌍 Resolving regions along the route..."):
                context = await get_geographic_context(coordinates, self.settings, client=http)
                formatted_context = format_geographic_context(context)

        with self._step("📅 Planning daily segments..."):
            total_days = count_days(request.start_date, request.end_date)
            mean_latitude = sum(lat for lat, _ in coordinates) / len(coordinates)
            daily_routes = build_daily_segments(
                request.length_km,
                gain,
                request.tourism_type,
                request.start_date,
                request.end_date,
                mean_latitude,
                rng=self.rng,
                thresholds=self.settings.weather,
            )

        with self._step("🤖 Requesting analysis..."):
            prompt = build_analysis_prompt(
                request, gain, terrain_type, context, formatted_context, stats, total_days
            )
            reply = await self.analyst.analyze(prompt)

        return RouteAnalysisResponse(
            analysis=reply.text,
            analysis_structured=reply.data,
            stats=stats,
            terrain_type=terrain_type,
            geographic_context=context,
            formatted_geo_context=formatted_context,
            daily_routes=daily_routes,
            total_days=total_days,
        )

    async def _elevations(self, request: RouteAnalysisRequest, http: httpx.AsyncClient) -> list[float]:
        """Client profile when it is complete and plausible, otherwise a fresh lookup."""
        count = len(request.coordinates)
        supplied = request.elevation_data or []
        problem = check_profile(supplied, count)
        if problem is None:
            return list(supplied)

        logger.info("Client elevation data rejected (%s), fetching", problem)
        elevations = await fetch_elevation_profile(
            request.coordinates,
            self.providers,
            client=http,
            batch_size=self.settings.elevation_batch_size,
        )
        if len(elevations) != count:
            raise ElevationAcquisitionError(
                f"Got {len(elevations)} elevations for {count} points"
            )
        return elevations
