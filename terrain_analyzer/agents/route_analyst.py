"""Route difficulty narrative from an LLM behind an OpenAI-compatible API."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from terrain_analyzer.config import Settings
from terrain_analyzer.errors import UpstreamAuthError, UpstreamServiceError
from terrain_analyzer.models import GeographicContext, RouteAnalysisRequest, RouteGeometryStats


logger = logging.getLogger(__name__)


SYSTEM_INSTRUCTIONS = "You are an expert trip planner. Reply with strictly valid JSON and no text outside it."

RESPONSE_SCHEMA = {
    "summary": {
        "difficultyScore": "number (1-10)",
        "difficultyReasoning": "string",
    },
    "stats": {
        "distanceKm": "number",
        "elevationGainM": "number",
        "minElevationM": "number",
        "maxElevationM": "number",
        "avgSlopePercent": "number",
        "maxSlopePercent": "number",
        "sinuosity": "number",
    },
    "geography": {
        "terrainType": "string",
        "countries": "string[]",
        "regions": "string[]",
        "areas": "string[]",
        "localities": "string[]",
        "notes": "string",
    },
    "days": [
        {
            "day": "number",
            "date": "string",
            "distanceKm": "number",
            "elevationGainM": "number",
            "keyPoints": "string[]",
            "weather": {
                "temperatureMin": "number",
                "temperatureMax": "number",
                "conditions": "string",
                "windSpeed": "number",
                "precipitation": "number",
            },
            "description": "string",
            "recommendations": "string[]",
        }
    ],
    "recommendations": "string[]",
    "warnings": "string[]",
}

ANALYSIS_PROMPT = """You are a hiking and expedition expert. Return ONLY JSON, with no text before or after it.
No comments, explanations or markdown. If some data is missing use null or empty fields, but keep the shape.

JSON schema (example types):
{schema}

DATA:
- Geographic context: {formatted_context}
- Multiple regions: {multi_region}
- Multiple countries: {multi_country}
- Length: {length_km} km
- Elevation gain: {elevation_gain} m
- Terrain type: {terrain_type}
- Points: {point_count}
- Tourism type: {tourism_type}
- Dates: {start_date} - {end_date} ({total_days} days)
- Slope avg: {avg_slope:.1f}%, max: {max_slope:.1f}%, steep sections: {steep_sections}
- Sinuosity: {sinuosity}
- Elevations: min {min_elevation}m, max {max_elevation}m, range {elevation_range}m

Return ONLY valid JSON following the schema above."""


@dataclass
class AnalystReply:
    """Raw model text plus the parsed JSON object, if any."""
    text: str
    data: Optional[dict[str, Any]] = None


def build_analysis_prompt(
    request: RouteAnalysisRequest,
    elevation_gain: float,
    terrain_type: str,
    context: GeographicContext,
    formatted_context: str,
    stats: RouteGeometryStats,
    total_days: int,
) -> str:
    """Fill the analysis prompt with everything computed for the route."""
    sinuosity = f"{stats.sinuosity:.2f}" if stats.sinuosity is not None else "n/a (loop route)"
    return ANALYSIS_PROMPT.format(
        schema=json.dumps(RESPONSE_SCHEMA, indent=2),
        formatted_context=formatted_context,
        multi_region=context.multi_region,
        multi_country=context.multi_country,
        length_km=request.length_km,
        elevation_gain=elevation_gain,
        terrain_type=terrain_type,
        point_count=len(request.coordinates),
        tourism_type=request.tourism_type.value,
        start_date=request.start_date.isoformat(),
        end_date=request.end_date.isoformat(),
        total_days=total_days,
        avg_slope=stats.avg_slope,
        max_slope=stats.max_slope,
        steep_sections=stats.steep_sections,
        sinuosity=sinuosity,
        min_elevation=stats.min_elevation,
        max_elevation=stats.max_elevation,
        elevation_range=stats.elevation_range,
    )


def parse_analysis_json(text: str) -> Optional[dict[str, Any]]:
    """
    Parse the model reply as a JSON object.

    Models sometimes wrap the object in markdown fences or prose, so the
    outermost {...} block is tried when the whole text does not parse.
    """
    candidates = [text.strip()]
    json_match = re.search(r"\{.*\}", text, re.DOTALL)
    if json_match:
        candidates.append(json_match.group())

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    logger.warning("Reasoning reply is not valid JSON (%d chars), keeping raw text", len(text))
    return None


class RouteAnalyst:
    """
    Single-shot client for the reasoning service.

    One request per analysis; the SDK's automatic retries are disabled.
    """

    def __init__(self, settings: Settings, client: Any = None):
        self.settings = settings
        self._client = client

    def _build_client(self) -> AsyncOpenAI:
        if not self.settings.openrouter_api_key:
            raise UpstreamAuthError(
                "OPENROUTER_API_KEY is not configured. Add it to your environment or .env file"
            )
        return AsyncOpenAI(
            base_url=self.settings.openrouter_base_url,
            api_key=self.settings.openrouter_api_key,
            timeout=self.settings.reasoning_timeout_s,
            max_retries=0,
        )

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    async def analyze(self, prompt: str) -> AnalystReply:
        """
        Send the prompt and return the reply text with its parsed JSON.

        Raises:
            UpstreamAuthError: Missing or rejected API key
            UpstreamServiceError: Any other failure of the service
        """
        model = self.settings.openrouter_model
        logger.info("Requesting route analysis from %s", model)

        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": SYSTEM_INSTRUCTIONS},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self.settings.reasoning_max_tokens,
                temperature=self.settings.reasoning_temperature,
                response_format={"type": "json_object"},
                extra_headers={
                    "HTTP-Referer": self.settings.app_referer,
                    "X-Title": self.settings.app_title,
                },
            )
        except openai.AuthenticationError as e:
            logger.error("Reasoning service rejected the API key: status=%s", e.status_code)
            raise UpstreamAuthError("The reasoning service API key is missing or invalid") from e
        except openai.APIStatusError as e:
            logger.error("Reasoning service error: status=%s body=%s", e.status_code, e.body)
            raise UpstreamServiceError("Could not get an analysis from the reasoning service") from e
        except openai.APIError as e:
            logger.error("Reasoning service unreachable: %s", e)
            raise UpstreamServiceError("Could not get an analysis from the reasoning service") from e

        if not response.choices:
            raise UpstreamServiceError("The reasoning service returned no choices")

        text = (response.choices[0].message.content or "").strip()
        logger.info("Analysis received (%d chars)", len(text))

        return AnalystReply(text=text, data=parse_analysis_json(text))
