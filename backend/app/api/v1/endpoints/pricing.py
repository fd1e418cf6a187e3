"""
Pricing API Endpoints.

Live price quotes for the trip booking/edit screens, route leg distance,
and the holiday calendar.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from backend.app.core.dependencies import get_distance_provider, get_pricing_config, get_pricing_service
from backend.app.core.pricing_config import PricingConfig
from backend.app.domain.pricing.calendar_rules import holiday_for_date, holidays_for_year
from backend.app.domain.pricing.distance import DistanceProvider
from backend.app.domain.pricing.service import PricingService
from backend.app.schemas.pricing import (
    HolidayCalendarResponse,
    HolidayInfo,
    PricingEstimate,
    RouteLeg,
    RouteLegRequest,
    TripPricingRequest,
)

router = APIRouter(prefix="/pricing", tags=["Pricing"])


@router.post("/estimate", response_model=PricingEstimate)
async def estimate_trip_price(
    request: TripPricingRequest,
    service: PricingService = Depends(get_pricing_service),
):
    """
    Quote a proposed trip.

    Always returns 200; when a price cannot be computed the body has
    success=false and an error message. Callers persist `pricing`
    verbatim on the trip.
    """
    return await service.estimate(request)


@router.post("/route-distance", response_model=RouteLeg)
async def route_leg_distance(
    leg: RouteLegRequest,
    distance_provider: DistanceProvider = Depends(get_distance_provider),
):
    """Distance of the fastest route between two addresses."""
    return await distance_provider.leg_distance(leg.origin, leg.destination)


@router.get("/holidays", response_model=HolidayCalendarResponse)
async def list_holidays(
    year: int = Query(..., ge=1583, le=9999),
    config: PricingConfig = Depends(get_pricing_config),
):
    """Priced holidays for a calendar year."""
    return HolidayCalendarResponse(year=year, holidays=holidays_for_year(year, config))


@router.get("/holidays/{day}", response_model=HolidayInfo)
async def get_holiday(
    day: date,
    config: PricingConfig = Depends(get_pricing_config),
):
    """Holiday (if any) on a given date."""
    return holiday_for_date(day, config)
