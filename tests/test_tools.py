"""Tests for elevation providers and reverse geocoding."""

import json

import httpx
import pytest

from terrain_analyzer.config import Settings
from terrain_analyzer.errors import ElevationAcquisitionError, RouteValidationError
from terrain_analyzer.models import GeographicContext
from terrain_analyzer.tools.elevation import (
    ElevationProvider,
    OpenElevationProvider,
    OpenTopoDataProvider,
    fetch_elevation_profile,
    fetch_elevations,
)
from terrain_analyzer.tools.geocoding import (
    format_geographic_context,
    get_geographic_context,
    sample_route_points,
)


COORDS = [(46.5547, 7.9800), (46.5660, 7.9620), (46.5772, 7.9567)]


def topo_payload(coordinates, elevations):
    return {
        "results": [
            {"elevation": elev, "location": {"lat": lat, "lng": lon}, "dataset": "srtm90m"}
            for elev, (lat, lon) in zip(elevations, coordinates)
        ],
        "status": "OK",
    }


def providers():
    return [
        OpenTopoDataProvider("srtm90m", base_url="https://topo.test/v1"),
        OpenTopoDataProvider("aster30m", base_url="https://topo.test/v1"),
        OpenElevationProvider(url="https://open-elevation.test/api/v1/lookup"),
    ]


class RecordingHandler:
    """MockTransport handler that records requests and answers per path."""

    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.responses[request.url.path]
        if isinstance(answer, Exception):
            raise answer
        if callable(answer):
            return answer(request)
        return answer

    @property
    def paths(self):
        return [r.url.path for r in self.requests]


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
class TestElevationAcquisition:
    """Test ordered provider fallback with content validation."""

    async def test_first_provider_success(self):
        handler = RecordingHandler({
            "/v1/srtm90m": httpx.Response(200, json=topo_payload(COORDS, [2061, 2345, 2970])),
        })
        async with mock_client(handler) as client:
            samples = await fetch_elevations(COORDS, providers(), client)

        assert [s.elevation for s in samples] == [2061, 2345, 2970]
        assert handler.paths == ["/v1/srtm90m"]
        assert handler.requests[0].url.params["locations"] == "|".join(
            f"{lat},{lon}" for lat, lon in COORDS
        )

    async def test_falls_back_after_http_error(self):
        handler = RecordingHandler({
            "/v1/srtm90m": httpx.Response(500, text="Internal Server Error"),
            "/v1/aster30m": httpx.Response(200, json=topo_payload(COORDS, [2050, 2340, 2965])),
        })
        async with mock_client(handler) as client:
            samples = await fetch_elevations(COORDS, providers(), client)

        assert [s.elevation for s in samples] == [2050, 2340, 2965]
        assert samples[0].location.lat == COORDS[0][0]
        assert handler.paths == ["/v1/srtm90m", "/v1/aster30m"]

    async def test_rejects_implausible_values(self):
        handler = RecordingHandler({
            "/v1/srtm90m": httpx.Response(200, json=topo_payload(COORDS, [9_999_999] * 3)),
            "/v1/aster30m": httpx.Response(200, json=topo_payload(COORDS, [100, 110, 120])),
        })
        async with mock_client(handler) as client:
            samples = await fetch_elevations(COORDS, providers(), client)

        assert [s.elevation for s in samples] == [100, 110, 120]

    async def test_rejects_missing_values(self):
        handler = RecordingHandler({
            "/v1/srtm90m": httpx.Response(200, json=topo_payload(COORDS, [100, None, 120])),
            "/v1/aster30m": httpx.Response(200, json=topo_payload(COORDS, [100, 105, 120])),
        })
        async with mock_client(handler) as client:
            samples = await fetch_elevations(COORDS, providers(), client)

        assert samples[1].elevation == 105

    async def test_transport_error_falls_through_to_open_elevation(self):
        def open_elevation(request):
            body = json.loads(request.content)
            assert body["locations"][0] == {"latitude": COORDS[0][0], "longitude": COORDS[0][1]}
            return httpx.Response(200, json={
                "results": [
                    {"latitude": lat, "longitude": lon, "elevation": 500 + i}
                    for i, (lat, lon) in enumerate(COORDS)
                ]
            })

        handler = RecordingHandler({
            "/v1/srtm90m": httpx.ConnectError("connection refused"),
            "/v1/aster30m": httpx.Response(503),
            "/api/v1/lookup": open_elevation,
        })
        async with mock_client(handler) as client:
            samples = await fetch_elevations(COORDS, providers(), client)

        assert [s.elevation for s in samples] == [500, 501, 502]
        assert [(s.location.lat, s.location.lng) for s in samples] == COORDS
        assert handler.requests[-1].method == "POST"

    async def test_one_request_per_provider(self):
        handler = RecordingHandler({
            "/v1/srtm90m": httpx.Response(500),
            "/v1/aster30m": httpx.Response(429),
            "/api/v1/lookup": httpx.Response(502),
        })
        async with mock_client(handler) as client:
            with pytest.raises(ElevationAcquisitionError, match="no elevation source available"):
                await fetch_elevations(COORDS, providers(), client)

        assert handler.paths == ["/v1/srtm90m", "/v1/aster30m", "/api/v1/lookup"]

    async def test_rejects_count_mismatch(self):
        handler = RecordingHandler({
            "/v1/srtm90m": httpx.Response(200, json=topo_payload(COORDS[:2], [100, 110])),
            "/v1/aster30m": httpx.Response(200, json={"status": "INVALID_REQUEST"}),
            "/api/v1/lookup": httpx.Response(200, text="not json"),
        })
        async with mock_client(handler) as client:
            with pytest.raises(ElevationAcquisitionError):
                await fetch_elevations(COORDS, providers(), client)

    async def test_too_many_coordinates(self):
        coords = [(46.0 + i * 0.001, 8.0) for i in range(101)]
        with pytest.raises(RouteValidationError):
            await fetch_elevations(coords, providers())

    async def test_profile_is_batched(self):
        coords = [(46.0 + i * 0.001, 8.0) for i in range(150)]

        def srtm(request):
            pairs = request.url.params["locations"].split("|")
            points = [tuple(float(v) for v in p.split(",")) for p in pairs]
            return httpx.Response(200, json=topo_payload(points, [1000] * len(points)))

        handler = RecordingHandler({"/v1/srtm90m": srtm})
        async with mock_client(handler) as client:
            profile = await fetch_elevation_profile(coords, providers(), client)

        assert len(profile) == 150
        assert len(handler.requests) == 2

    async def test_profile_keeps_one_provider(self):
        coords = [(46.0 + i * 0.001, 8.0) for i in range(150)]

        def aster(request):
            pairs = request.url.params["locations"].split("|")
            points = [tuple(float(v) for v in p.split(",")) for p in pairs]
            return httpx.Response(200, json=topo_payload(points, [1200] * len(points)))

        handler = RecordingHandler({"/v1/srtm90m": httpx.Response(500), "/v1/aster30m": aster})
        async with mock_client(handler) as client:
            profile = await fetch_elevation_profile(coords, providers(), client)

        assert profile == [1200.0] * 150
        assert handler.paths == ["/v1/srtm90m", "/v1/aster30m", "/v1/aster30m"]

    async def test_profile_refetched_when_pinned_provider_fails_mid_route(self):
        coords = [(46.0 + i * 0.001, 8.0) for i in range(150)]

        def answer(elevation):
            def handler(request):
                pairs = request.url.params["locations"].split("|")
                points = [tuple(float(v) for v in p.split(",")) for p in pairs]
                if elevation == 1000 and points[0][0] > 46.05:
                    return httpx.Response(503)
                return httpx.Response(200, json=topo_payload(points, [elevation] * len(points)))
            return handler

        handler = RecordingHandler({"/v1/srtm90m": answer(1000), "/v1/aster30m": answer(1200)})
        async with mock_client(handler) as client:
            profile = await fetch_elevation_profile(coords, providers(), client)

        # No mix of datasets within one route
        assert profile == [1200.0] * 150
        assert handler.paths == ["/v1/srtm90m", "/v1/srtm90m", "/v1/aster30m", "/v1/aster30m"]

    async def test_provider_base_is_abstract(self):
        with pytest.raises(TypeError):
            ElevationProvider()


class TestSampling:
    """Test route point sampling for geocoding."""

    def test_twelve_points(self):
        coords = [(50.0 + i * 0.1, 10.0) for i in range(12)]
        samples = sample_route_points(coords)

        assert len(samples) <= 7
        assert samples[0] == coords[0]
        assert coords[-1] in samples

    def test_deduplicates_endpoints(self):
        coords = [(50.0, 10.0), (50.1, 10.1)]
        assert sample_route_points(coords) == coords

    def test_long_route_keeps_five_plus_last(self):
        coords = [(50.0 + i * 0.01, 10.0) for i in range(100)]
        samples = sample_route_points(coords)
        assert len(samples) == 6
        assert samples[:5] == [coords[i] for i in (0, 20, 40, 60, 80)]
        assert samples[-1] == coords[-1]

    def test_empty(self):
        assert sample_route_points([]) == []


def nominatim_handler(addresses):
    """Answer Nominatim reverse calls from a {lat: address|status} table."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        lat = float(request.url.params["lat"])
        calls.append(lat)
        answer = addresses[lat]
        if isinstance(answer, int):
            return httpx.Response(answer)
        return httpx.Response(200, json={"address": answer, "addresstype": "city"})

    handler.calls = calls
    return handler


@pytest.mark.asyncio
class TestGeographicContext:
    """Test paced reverse geocoding and aggregation."""

    @pytest.fixture
    def settings(self):
        return Settings(nominatim_url="https://nominatim.test", geocode_delay_s=1.0)

    async def test_aggregates_unique_values(self, settings):
        coords = [(47.0, 8.0), (47.5, 9.0), (48.0, 10.0)]
        handler = nominatim_handler({
            47.0: {"country": "Switzerland", "state": "Zurich", "county": "Bezirk Zurich", "city": "Zurich"},
            47.5: {"country": "Switzerland", "state": "Thurgau", "district": "Weinfelden", "village": "Berg"},
            48.0: {"country": "Germany", "province": "Bavaria", "town": "Memmingen"},
        })
        sleeps = []

        async def fake_sleep(seconds):
            sleeps.append(seconds)

        async with mock_client(handler) as client:
            context = await get_geographic_context(coords, settings, client, sleep=fake_sleep)

        assert context.countries == ["Switzerland", "Germany"]
        assert context.regions == ["Zurich", "Thurgau", "Bavaria"]
        assert context.areas == ["Bezirk Zurich", "Weinfelden"]
        assert context.localities == ["Zurich", "Berg", "Memmingen"]
        assert context.multi_country is True
        assert context.multi_region is True
        assert context.total_points_analyzed == 3

        # Sequential, paced in sample order
        assert handler.calls == [47.0, 47.5, 48.0]
        assert sleeps == [pytest.approx(1.0, abs=0.1), pytest.approx(2.0, abs=0.1)]

    async def test_failed_point_is_skipped(self, settings):
        coords = [(47.0, 8.0), (47.5, 9.0)]
        handler = nominatim_handler({
            47.0: 500,
            47.5: {"country": "Switzerland", "state": "Thurgau"},
        })

        async def no_sleep(seconds):
            pass

        async with mock_client(handler) as client:
            context = await get_geographic_context(coords, settings, client, sleep=no_sleep)

        assert context.countries == ["Switzerland"]
        assert context.multi_region is False
        assert context.total_points_analyzed == 1

    async def test_malformed_address_keeps_resolved_points(self, settings):
        coords = [(47.0, 8.0), (47.5, 9.0), (48.0, 10.0)]
        handler = nominatim_handler({
            47.0: {"country": "Switzerland", "state": "Zurich"},
            47.5: "garbled",
            48.0: ["not", "an", "address"],
        })

        async def no_sleep(seconds):
            pass

        async with mock_client(handler) as client:
            context = await get_geographic_context(coords, settings, client, sleep=no_sleep)

        assert handler.calls == [47.0, 47.5, 48.0]
        assert context.countries == ["Switzerland"]
        assert context.regions == ["Zurich"]
        assert context.total_points_analyzed == 1

    async def test_total_failure_returns_unknown(self, settings):
        def handler(request):
            raise httpx.ConnectError("offline")

        async def no_sleep(seconds):
            pass

        async with mock_client(handler) as client:
            context = await get_geographic_context([(47.0, 8.0), (48.0, 9.0)], settings, client, sleep=no_sleep)

        assert context.countries == ["unknown"]
        assert context.regions == ["unknown"]
        assert context.total_points_analyzed == 0
        assert context.multi_country is False

    async def test_empty_address_counts_as_failure(self, settings):
        def handler(request):
            return httpx.Response(200, json={"error": "Unable to geocode"})

        async def no_sleep(seconds):
            pass

        async with mock_client(handler) as client:
            context = await get_geographic_context([(0.0, -30.0), (1.0, -31.0)], settings, client, sleep=no_sleep)

        assert context.is_unknown
        assert context.total_points_analyzed == 0

    async def test_sends_zoom_language_and_user_agent(self, settings):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"address": {"country": "Austria"}})

        async def no_sleep(seconds):
            pass

        async with mock_client(handler) as client:
            await get_geographic_context([(47.0, 13.0), (47.1, 13.1)], settings, client, sleep=no_sleep)

        assert seen[0].url.params["zoom"] == "8"
        assert seen[0].url.params["accept-language"] == "en"
        assert seen[0].headers["User-Agent"] == settings.geocode_user_agent


class TestFormatGeographicContext:
    """Test the human readable context summary."""

    def test_unknown(self):
        assert format_geographic_context(GeographicContext.unknown()) == (
            "geographic location could not be determined"
        )

    def test_single_country(self):
        context = GeographicContext(
            countries=["Switzerland"], regions=["Bern"], areas=["Interlaken"],
            localities=["Wengen"],
        )
        text = format_geographic_context(context)
        assert text == "Country: Switzerland. Region: Bern. Areas: Interlaken. Localities: Wengen."

    def test_multi_country_and_many_localities(self):
        context = GeographicContext(
            countries=["Austria", "Italy"], regions=["Tyrol", "South Tyrol"],
            localities=["A", "B", "C", "D", "E"],
            multi_region=True, multi_country=True,
        )
        text = format_geographic_context(context)
        assert "several countries: Austria, Italy" in text
        assert "Regions: Tyrol, South Tyrol." in text
        assert "Localities: A, B, C and 2 more." in text
