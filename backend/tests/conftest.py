"""
Centralized Test Configuration.
"""

from typing import Dict, List, Optional, Tuple

import httpx
import pytest
from httpx import AsyncClient, ASGITransport

from backend.app.main import app
from backend.app.core.dependencies import get_routing_client
from backend.app.core.pricing_config import PricingConfig
from backend.app.domain.pricing.distance import DistanceProvider, RoutingClient

ROUTING_BASE_URL = "http://routing.test"


class FakeRoutingService:
    """
    In-process stand-in for the routing/distance HTTP service.

    Answers from lookup tables and records every request it receives.
    """

    def __init__(self):
        self.distances: Dict[Tuple[str, str], float] = {}  # meters
        self.routes: Dict[Tuple[str, str], List[Tuple[float, float]]] = {}  # (meters, seconds)
        self.geocodes: Dict[str, dict] = {}
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.raise_timeout = False
        self.raise_connect_error = False
        self.raw_body: Optional[bytes] = None

    @property
    def calls(self) -> List[Tuple[str, Dict[str, str]]]:
        return [(request.url.path, dict(request.url.params)) for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.raise_timeout:
            raise httpx.ReadTimeout("timed out", request=request)
        if self.raise_connect_error:
            raise httpx.ConnectError("connection refused", request=request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "upstream"})
        if self.raw_body is not None:
            return httpx.Response(200, content=self.raw_body, headers={"content-type": "application/json"})

        params = request.url.params
        path = request.url.path

        if path.endswith("/distancematrix"):
            meters = self.distances.get((params["origin"], params["destination"]))
            if meters is None:
                return httpx.Response(200, json={"status": "NOT_FOUND"})
            return httpx.Response(200, json={"status": "OK", "distance": {"value": meters}})

        if path.endswith("/directions"):
            alternatives = self.routes.get((params["origin"], params["destination"]))
            if not alternatives:
                return httpx.Response(200, json={"status": "ZERO_RESULTS", "routes": []})
            routes = [
                {"legs": [{"distance": {"value": meters}, "duration": {"value": seconds}}]}
                for meters, seconds in alternatives
            ]
            return httpx.Response(200, json={"status": "OK", "routes": routes})

        if path.endswith("/geocode"):
            result = self.geocodes.get(params["address"])
            if result is None:
                return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})
            return httpx.Response(200, json={"status": "OK", "results": [result]})

        return httpx.Response(404, json={"error": "unknown path"})


def build_geocode_result(county: Optional[str], city: str = "Columbus", state: str = "OH") -> dict:
    """Geocoding result with the given county (None omits the county component)."""
    components = [
        {"long_name": city, "short_name": city, "types": ["locality", "political"]},
        {"long_name": state, "short_name": state, "types": ["administrative_area_level_1", "political"]},
    ]
    if county:
        components.append({"long_name": county, "short_name": county, "types": ["administrative_area_level_2", "political"]})
    return {"address_components": components}


@pytest.fixture
def county_result():
    return build_geocode_result


@pytest.fixture
def pricing_config():
    return PricingConfig()


@pytest.fixture
def routing_service():
    return FakeRoutingService()


@pytest.fixture
async def routing_client(routing_service):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(routing_service.handler))
    yield RoutingClient(ROUTING_BASE_URL, timeout=10.0, client=http_client)
    await http_client.aclose()


@pytest.fixture
def distance_provider(routing_client, pricing_config):
    return DistanceProvider(routing_client, pricing_config)


@pytest.fixture
async def client(routing_client):
    """Async client for testing, with the routing service mocked."""

    async def override_get_routing_client():
        yield routing_client

    app.dependency_overrides[get_routing_client] = override_get_routing_client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides = {}
