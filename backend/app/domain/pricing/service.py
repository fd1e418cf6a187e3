"""
Pricing Service (Facade).

Single entry point used by the trip booking/edit flow.

Flow:
1. Classify jurisdiction (both addresses present)
2. Resolve dead mileage (2+ zones crossed)
3. Resolve holiday (pickup time present)
4. Compute the itemized price
5. Attach the display summary

Pricing degrades to "unavailable" instead of failing the caller: any
exception is returned as PricingEstimate(success=False, error=...).
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from backend.app.core.pricing_config import PricingConfig
from backend.app.domain.pricing.calculator import compute_price, to_decimal
from backend.app.domain.pricing.calendar_rules import resolve_holiday
from backend.app.domain.pricing.distance import DistanceProvider
from backend.app.domain.pricing.jurisdiction import JurisdictionClassifier, PatternJurisdictionClassifier
from backend.app.schemas.pricing import (
    DeadMileage,
    HolidayInfo,
    JurisdictionInfo,
    PriceBreakdown,
    PricingEstimate,
    PricingSummary,
    TripPricingRequest,
)

logger = logging.getLogger(__name__)

ROUND_TRIP_LABEL = "Round Trip"
ONE_WAY_LABEL = "One Way"
DISTANCE_NOT_CALCULATED = "Distance not calculated"
TENTH = Decimal("0.1")


def format_currency(amount: Optional[Decimal]) -> str:
    if amount is None:
        return "$0.00"
    return f"${amount:.2f}"


def format_distance(distance: float, is_round_trip: bool) -> str:
    """Display miles to one decimal, ties rounded up (10.25 -> "10.3 miles")."""
    if distance <= 0:
        return DISTANCE_NOT_CALCULATED
    miles = to_decimal(distance) * (2 if is_round_trip else 1)
    return f"{miles.quantize(TENTH, rounding=ROUND_HALF_UP)} miles"


def build_summary(request: TripPricingRequest, pricing: PriceBreakdown) -> PricingSummary:
    return PricingSummary(
        trip_type=ROUND_TRIP_LABEL if request.is_round_trip else ONE_WAY_LABEL,
        distance=format_distance(request.distance, request.is_round_trip),
        estimated_total=format_currency(pricing.total),
        is_bariatric=pricing.is_bariatric,
        has_holiday_surcharge=pricing.has_holiday_surcharge,
        has_dead_mileage=pricing.has_dead_mileage,
    )


class PricingService:
    """Orchestrates classification, distance and calendar lookups into a quote."""

    def __init__(
        self,
        config: PricingConfig,
        distance_provider: DistanceProvider,
        classifier: Optional[JurisdictionClassifier] = None,
    ):
        self.config = config
        self.distance_provider = distance_provider
        self.classifier = classifier or PatternJurisdictionClassifier(config)

    async def estimate(self, request: TripPricingRequest) -> PricingEstimate:
        """
        Price a proposed trip.

        Each call is computed from scratch; nothing is cached between
        requests. Never raises.
        """
        try:
            jurisdiction: Optional[JurisdictionInfo] = None
            if request.pickup_address and request.destination_address:
                jurisdiction = await self.classifier.classify(request.pickup_address, request.destination_address)

            dead_mileage: Optional[DeadMileage] = None
            if jurisdiction is not None and jurisdiction.zones_crossed >= 2:
                dead_mileage = await self.distance_provider.dead_mileage(
                    request.pickup_address,
                    request.destination_address,
                    request.is_round_trip,
                )

            holiday: Optional[HolidayInfo] = None
            if request.pickup_time is not None:
                resolved = resolve_holiday(request.pickup_time, self.config)
                if resolved.is_holiday:
                    holiday = resolved

            pricing = compute_price(request, self.config, jurisdiction, holiday, dead_mileage)
        except Exception as exc:
            logger.exception("Pricing estimate failed")
            return PricingEstimate(success=False, pricing=None, error=str(exc) or type(exc).__name__)

        logger.info(
            "Pricing estimate computed",
            extra={
                "total": str(pricing.total),
                "zones_crossed": jurisdiction.zones_crossed if jurisdiction else None,
                "dead_mileage_estimated": dead_mileage.is_estimated if dead_mileage else None,
                "holiday": holiday.name if holiday else None,
            },
        )
        return PricingEstimate(
            success=True,
            pricing=pricing,
            jurisdiction=jurisdiction,
            dead_mileage=dead_mileage,
            holiday=holiday,
            summary=build_summary(request, pricing),
        )
