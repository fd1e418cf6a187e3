"""
Pricing Service tests.

End-to-end quotes through the facade with the routing service mocked.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from backend.app.domain.pricing.jurisdiction import JurisdictionClassifier
from backend.app.domain.pricing.service import PricingService, format_currency, format_distance
from backend.app.models.pricing_enums import RoutingStatus
from backend.app.schemas.pricing import TripPricingRequest

LANCASTER = "120 Main St, Lancaster, OH 43130"
COLUMBUS = "500 High St, Columbus, OH 43215"
WESTERVILLE = "10 Executive Campus Dr, Westerville, OH 43082"


class ExplodingClassifier(JurisdictionClassifier):
    async def classify(self, pickup_address, destination_address):
        raise RuntimeError("boom")


@pytest.fixture
def pricing_service(pricing_config, distance_provider):
    return PricingService(pricing_config, distance_provider)


# TEST 1: Home zone quote
@pytest.mark.asyncio
async def test_in_zone_quote_skips_routing(pricing_service, routing_service):
    request = TripPricingRequest(
        distance=10,
        pickup_time=datetime(2025, 6, 10, 10, 0),
        client_weight=150,
        pickup_address=WESTERVILLE,
        destination_address=COLUMBUS,
    )

    estimate = await pricing_service.estimate(request)

    assert estimate.success is True
    assert estimate.pricing.total == Decimal("80.00")
    assert estimate.jurisdiction.in_home_zone is True
    assert estimate.dead_mileage is None
    assert estimate.holiday is None
    assert routing_service.requests == []

    assert estimate.summary.trip_type == "One Way"
    assert estimate.summary.distance == "10.0 miles"
    assert estimate.summary.estimated_total == "$80.00"


# TEST 2: Out-of-zone quote with dead mileage
@pytest.mark.asyncio
async def test_lancaster_quote_charges_dead_mileage(pricing_service, routing_service, pricing_config):
    depot = pricing_config.depot_address
    routing_service.distances[(depot, LANCASTER)] = 40000  # 24.85 mi
    routing_service.distances[(COLUMBUS, depot)] = 30000  # 18.64 mi
    request = TripPricingRequest(
        distance=10,
        pickup_time=datetime(2025, 6, 10, 10, 0),
        pickup_address=LANCASTER,
        destination_address=COLUMBUS,
    )

    estimate = await pricing_service.estimate(request)

    assert estimate.success is True
    assert estimate.jurisdiction.zones_crossed == 2
    assert estimate.dead_mileage.miles == 43.49
    assert estimate.pricing.dead_mileage_price == Decimal("173.96")
    assert estimate.pricing.total == Decimal("313.96")
    assert estimate.summary.has_dead_mileage is True


@pytest.mark.asyncio
async def test_routing_failure_still_prices_trip(pricing_service, routing_service):
    routing_service.status_code = 500
    request = TripPricingRequest(distance=10, pickup_address=LANCASTER, destination_address=COLUMBUS)

    estimate = await pricing_service.estimate(request)

    assert estimate.success is True
    assert estimate.dead_mileage.is_estimated is True
    assert estimate.dead_mileage.status == RoutingStatus.FAILED
    assert estimate.pricing.dead_mileage_price == 0
    assert estimate.pricing.has_dead_mileage is False
    assert estimate.pricing.total == Decimal("140.00")


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    b"[]",
    b'{"status": "OK", "distance": 1234}',
    b'{"status": "OK", "distance": {"value": "n/a"}}',
    b'{"status": "OK", "distance": {"value": NaN}}',
    b'{"status": "OK", "distance": {"value": -5}}',
])
async def test_malformed_routing_reply_still_prices_trip(pricing_service, routing_service, body):
    routing_service.raw_body = body
    request = TripPricingRequest(distance=10, pickup_address=LANCASTER, destination_address=COLUMBUS)

    estimate = await pricing_service.estimate(request)

    assert estimate.success is True
    assert estimate.dead_mileage.miles == 0
    assert estimate.dead_mileage.is_estimated is True
    assert estimate.pricing.dead_mileage_price == 0
    assert estimate.pricing.total == Decimal("140.00")


# TEST 3: Optional inputs
@pytest.mark.asyncio
async def test_missing_address_skips_classification(pricing_service):
    estimate = await pricing_service.estimate(TripPricingRequest(distance=10, pickup_address=LANCASTER))

    assert estimate.success is True
    assert estimate.jurisdiction is None
    assert estimate.pricing.distance_price == Decimal("40.00")


@pytest.mark.asyncio
async def test_holiday_attached_only_on_holidays(pricing_service):
    christmas = await pricing_service.estimate(TripPricingRequest(pickup_time=datetime(2025, 12, 25, 10, 0)))
    ordinary = await pricing_service.estimate(TripPricingRequest(pickup_time=datetime(2025, 12, 26, 10, 0)))

    assert christmas.holiday.name == "Christmas Day"
    assert christmas.summary.has_holiday_surcharge is True
    assert ordinary.holiday is None


# TEST 4: Failure is reported, not raised
@pytest.mark.asyncio
async def test_unexpected_error_returns_unavailable(pricing_config, distance_provider):
    service = PricingService(pricing_config, distance_provider, ExplodingClassifier())
    request = TripPricingRequest(distance=10, pickup_address=LANCASTER, destination_address=COLUMBUS)

    estimate = await service.estimate(request)

    assert estimate.success is False
    assert estimate.pricing is None
    assert estimate.error == "boom"


@pytest.mark.asyncio
async def test_unpriceable_distance_returns_unavailable(pricing_service):
    estimate = await pricing_service.estimate(TripPricingRequest(distance=float("inf")))

    assert estimate.success is False
    assert estimate.error == "Trip distance must be a finite number"


# TEST 5: Display formatting
def test_format_distance():
    assert format_distance(0, False) == "Distance not calculated"
    assert format_distance(10, True) == "20.0 miles"
    assert format_distance(12.34, False) == "12.3 miles"


@pytest.mark.parametrize("distance, is_round_trip, expected", [
    (10.25, False, "10.3 miles"),
    (0.125, True, "0.3 miles"),
    (2.45, False, "2.5 miles"),
    (5.125, True, "10.3 miles"),
    (10.24, False, "10.2 miles"),
])
def test_format_distance_rounds_ties_up(distance, is_round_trip, expected):
    assert format_distance(distance, is_round_trip) == expected


def test_format_currency():
    assert format_currency(Decimal("80")) == "$80.00"
    assert format_currency(Decimal("1234.5")) == "$1234.50"
    assert format_currency(None) == "$0.00"

