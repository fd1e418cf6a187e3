"""
Distance Provider.

Talks to the routing/distance HTTP service and returns normalized miles.

RoutingClient is the HTTP adapter: it raises RoutingServiceError or
RoutingConfigurationError. DistanceProvider wraps it for the pricing flow
and never raises; failures come back as a RoutingStatus on the result so
an unknown distance is never mistaken for a confident zero.

No retries: a failed call degrades to an estimated zero immediately to
keep quote latency bounded by the request timeout.
"""

import logging
import math
from typing import Any, Dict, Optional, Tuple

import httpx

from backend.app.core.exceptions import RoutingConfigurationError, RoutingServiceError
from backend.app.core.pricing_config import PricingConfig
from backend.app.models.pricing_enums import RoutingStatus
from backend.app.schemas.pricing import DeadMileage, RouteDistance, RouteLeg

logger = logging.getLogger(__name__)

METERS_TO_MILES = 0.000621371
DEFAULT_TIMEOUT_SECONDS = 10.0

DISTANCE_MATRIX_PATH = "/api/maps/distancematrix"
DIRECTIONS_PATH = "/api/maps/directions"
GEOCODE_PATH = "/api/maps/geocode"


def meters_to_miles(meters: float) -> float:
    """Convert meters to miles, rounded half-up to 2 decimals."""
    return round_miles(meters * METERS_TO_MILES)


def round_miles(miles: float) -> float:
    return math.floor(miles * 100 + 0.5) / 100


def parse_quantity(value: Any, field: str) -> float:
    """
    Read a meters/seconds value from a routing payload.

    Raises:
        RoutingServiceError: If the value is not a finite, non-negative number
    """
    try:
        quantity = float(value)
    except (TypeError, ValueError) as exc:
        raise RoutingServiceError(f"Invalid {field} in routing payload: {value!r}", details={field: repr(value)}) from exc

    if not math.isfinite(quantity) or quantity < 0:
        raise RoutingServiceError(f"Invalid {field} in routing payload: {value!r}", details={field: repr(value)})
    return quantity


class RoutingClient:
    """
    HTTP client for the routing service.

    Owns its httpx.AsyncClient unless one is injected (tests pass a client
    built on httpx.MockTransport). Use as an async context manager or call
    aclose() when done.
    """

    def __init__(
        self,
        base_url: Optional[str],
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "RoutingClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _get_json(self, path: str, params: Dict[str, str]) -> Dict[str, Any]:
        if not self.base_url:
            raise RoutingConfigurationError()

        url = f"{self.base_url}{path}"
        try:
            response = await self._http().get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as exc:
            raise RoutingServiceError(
                f"Routing service timed out after {self.timeout}s",
                details={"path": path},
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise RoutingServiceError(
                f"Routing service returned HTTP {exc.response.status_code}",
                details={"path": path, "status_code": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            raise RoutingServiceError(
                f"Routing service request failed: {type(exc).__name__}",
                details={"path": path},
            ) from exc
        except ValueError as exc:
            raise RoutingServiceError("Routing service returned invalid JSON", details={"path": path}) from exc

        if not isinstance(data, dict):
            raise RoutingServiceError(
                f"Routing service returned a JSON {type(data).__name__}, expected an object",
                details={"path": path},
            )
        return data

    async def fetch_distance_miles(self, origin: str, destination: str) -> float:
        """
        Distance between two addresses via the distance-matrix endpoint.

        Expected payload: {"status": "OK", "distance": {"value": <meters>}}
        """
        data = await self._get_json(DISTANCE_MATRIX_PATH, {"origin": origin, "destination": destination})

        if data.get("status") != "OK":
            raise RoutingServiceError(
                f"No distance for route: status={data.get('status')}",
                details={"status": data.get("status")},
            )

        try:
            meters = data["distance"]["value"]
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
            raise RoutingServiceError("Malformed distance payload") from exc
        return meters_to_miles(parse_quantity(meters, "distance"))

    async def fetch_fastest_route(self, origin: str, destination: str) -> Tuple[float, float]:
        """
        Fastest route among the alternatives of the directions endpoint.

        Routes are compared by first-leg duration; the earliest route wins
        ties. Returns (miles, duration_seconds).
        """
        data = await self._get_json(
            DIRECTIONS_PATH,
            {
                "origin": origin,
                "destination": destination,
                "alternatives": "true",
                "mode": "driving",
            },
        )

        routes = data.get("routes") or []
        if data.get("status") != "OK" or not routes:
            raise RoutingServiceError(
                f"No route found: status={data.get('status')}",
                details={"status": data.get("status")},
            )

        try:
            legs = [route["legs"][0] for route in routes]
            durations = [parse_quantity(leg["duration"]["value"], "duration") for leg in legs]
            fastest = durations.index(min(durations))
            meters = legs[fastest]["distance"]["value"]
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
            raise RoutingServiceError("Malformed directions payload") from exc
        return meters_to_miles(parse_quantity(meters, "distance")), durations[fastest]

    async def geocode(self, address: str) -> Dict[str, Any]:
        """First geocoding result for an address (with address_components)."""
        data = await self._get_json(GEOCODE_PATH, {"address": address})

        results = data.get("results") or []
        if data.get("status") != "OK" or not results:
            raise RoutingServiceError(
                f"Address could not be geocoded: status={data.get('status')}",
                details={"status": data.get("status")},
            )
        if not isinstance(results, list) or not isinstance(results[0], dict):
            raise RoutingServiceError("Malformed geocoding payload")
        return results[0]


def _failure_status(exc: Exception) -> RoutingStatus:
    if isinstance(exc, RoutingConfigurationError):
        return RoutingStatus.ESTIMATED
    return RoutingStatus.FAILED


class DistanceProvider:
    """Distance lookups for pricing. Never raises."""

    def __init__(self, routing: RoutingClient, config: PricingConfig):
        self.routing = routing
        self.config = config

    async def distance_between(self, origin: str, destination: str) -> RouteDistance:
        try:
            miles = await self.routing.fetch_distance_miles(origin, destination)
        except (RoutingServiceError, RoutingConfigurationError) as exc:
            logger.warning(
                "Distance lookup degraded to estimate: %s",
                exc.message,
                extra={"error_code": exc.error_code, "details": exc.details},
            )
            return RouteDistance(miles=0, status=_failure_status(exc), error=exc.message)
        return RouteDistance(miles=miles, status=RoutingStatus.SUCCESS)

    async def leg_distance(self, origin: str, destination: str) -> RouteLeg:
        try:
            miles, duration = await self.routing.fetch_fastest_route(origin, destination)
        except (RoutingServiceError, RoutingConfigurationError) as exc:
            logger.warning(
                "Leg distance unavailable: %s",
                exc.message,
                extra={"error_code": exc.error_code, "details": exc.details},
            )
            return RouteLeg(miles=0, status=_failure_status(exc), error=exc.message)
        return RouteLeg(miles=miles, duration_seconds=duration, status=RoutingStatus.SUCCESS)

    async def dead_mileage(self, pickup_address: str, destination_address: str, is_round_trip: bool) -> DeadMileage:
        """
        Empty-leg miles for a trip.

        One way: depot -> pickup, plus destination -> depot.
        Round trip: depot -> pickup, doubled (the driver returns from the
        pickup point once the return leg completes).
        Any failed lookup yields an estimated zero.
        """
        depot = self.config.depot_address

        to_pickup = await self.distance_between(depot, pickup_address)
        if to_pickup.status != RoutingStatus.SUCCESS:
            return DeadMileage(miles=0, is_estimated=True, status=to_pickup.status)

        if is_round_trip:
            miles = to_pickup.miles * 2
        else:
            from_destination = await self.distance_between(destination_address, depot)
            if from_destination.status != RoutingStatus.SUCCESS:
                return DeadMileage(miles=0, is_estimated=True, status=from_destination.status)
            miles = to_pickup.miles + from_destination.miles

        miles = round_miles(miles)
        logger.info(
            "Dead mileage resolved",
            extra={"dead_miles": miles, "is_round_trip": is_round_trip},
        )
        return DeadMileage(miles=miles, is_estimated=False, status=RoutingStatus.SUCCESS)
