"""
Pricing Calculator.

Turns a trip request plus its resolved jurisdiction, holiday and dead
mileage into an itemized PriceBreakdown. Pure and deterministic: the same
inputs always produce an identical breakdown.

Rules (each line rounded half-up to cents on its own):
1. Base fare per leg - bariatric rate at/over the weight threshold;
   a round trip adds the same rate again as a separate line
2. Distance - leg miles (doubled for round trips) at the in-zone or
   out-of-zone rate
3. Zone surcharge - (zones_crossed - 1) x surcharge, from 2 zones up
4. Dead mileage - depot miles x rate, from 2 zones up only
5. After-hours/weekend - one flat fee if either applies
6. Emergency fee
7. Holiday surcharge - once per trip
8. Wheelchair rental - only when the rule is enabled
9. Veteran discount - only when the rule is enabled

total = sum(1..8) - discount, rounded to cents.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from backend.app.core.exceptions import PricingComputationError
from backend.app.core.pricing_config import PricingConfig
from backend.app.domain.pricing.calendar_rules import is_after_hours, is_weekend
from backend.app.models.pricing_enums import WheelchairType
from backend.app.schemas.pricing import (
    DeadMileage,
    HolidayInfo,
    JurisdictionInfo,
    PriceBreakdown,
    TripPricingRequest,
    ZERO,
)

CENT = Decimal("0.01")
MIN_ZONES_FOR_SURCHARGE = 2


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: float) -> Decimal:
    """Exact decimal of a float's shortest repr (10.35 -> Decimal('10.35'))."""
    return Decimal(str(value))


def compute_price(
    request: TripPricingRequest,
    config: PricingConfig,
    jurisdiction: Optional[JurisdictionInfo] = None,
    holiday: Optional[HolidayInfo] = None,
    dead_mileage: Optional[DeadMileage] = None,
) -> PriceBreakdown:
    """
    Compute the itemized price of a trip.

    Args:
        request: Trip to price
        config: Rate table and rule flags
        jurisdiction: Zone classification; None prices distance out-of-zone
        holiday: Holiday of the pickup date, if resolved
        dead_mileage: Depot miles, only charged from 2 zones crossed up

    Returns:
        PriceBreakdown with every field rounded to cents

    Raises:
        PricingComputationError: If a distance is not a finite number
    """
    if not math.isfinite(request.distance):
        raise PricingComputationError("Trip distance must be a finite number", details={"distance": str(request.distance)})
    if dead_mileage is not None and not math.isfinite(dead_mileage.miles):
        raise PricingComputationError("Dead mileage must be a finite number")

    zones_crossed = jurisdiction.zones_crossed if jurisdiction is not None else 0

    # 1. Base fare
    is_bariatric = bool(request.client_weight) and request.client_weight >= config.bariatric_weight_threshold
    per_leg = config.bariatric_per_leg if is_bariatric else config.standard_per_leg
    base_price = round_money(per_leg)
    round_trip_price = round_money(per_leg) if request.is_round_trip else ZERO

    # 2. Distance
    distance_price = ZERO
    if request.distance > 0:
        effective_miles = to_decimal(request.distance) * (2 if request.is_round_trip else 1)
        in_home_zone = jurisdiction is not None and jurisdiction.in_home_zone
        rate = config.in_zone_per_mile if in_home_zone else config.out_of_zone_per_mile
        distance_price = round_money(effective_miles * rate)

    # 3. Zone surcharge
    zone_surcharge = ZERO
    if zones_crossed >= MIN_ZONES_FOR_SURCHARGE:
        zone_surcharge = round_money((zones_crossed - 1) * config.zone_surcharge)

    # 4. Dead mileage (never for a single zone crossing)
    dead_mileage_price = ZERO
    has_dead_mileage = False
    if dead_mileage is not None and dead_mileage.miles > 0 and zones_crossed >= MIN_ZONES_FOR_SURCHARGE:
        dead_mileage_price = round_money(to_decimal(dead_mileage.miles) * config.dead_mileage_per_mile)
        has_dead_mileage = True

    # 5. After-hours / weekend, not stacked
    after_hours_surcharge = ZERO
    if request.pickup_time is not None:
        if is_after_hours(request.pickup_time, config) or is_weekend(request.pickup_time, config):
            after_hours_surcharge = round_money(config.after_hours_fee)

    # 6. Emergency
    emergency_fee = round_money(config.emergency_fee) if request.is_emergency else ZERO

    # 7. Holiday, once per trip
    has_holiday_surcharge = holiday is not None and holiday.is_holiday
    holiday_surcharge = round_money(config.holiday_surcharge) if has_holiday_surcharge else ZERO

    # 8. Wheelchair rental
    wheelchair_price = ZERO
    if config.wheelchair_rental_enabled and request.wheelchair_type == WheelchairType.PROVIDED:
        wheelchair_price = round_money(config.wheelchair_rental_fee)

    subtotal = (
        base_price
        + round_trip_price
        + distance_price
        + zone_surcharge
        + dead_mileage_price
        + after_hours_surcharge
        + emergency_fee
        + holiday_surcharge
        + wheelchair_price
    )

    # 9. Veteran discount
    veteran_discount = ZERO
    if config.veteran_discount_enabled and request.is_veteran:
        veteran_discount = round_money(subtotal * config.veteran_discount_rate)

    return PriceBreakdown(
        base_price=base_price,
        round_trip_price=round_trip_price,
        distance_price=distance_price,
        zone_surcharge=zone_surcharge,
        dead_mileage_price=dead_mileage_price,
        after_hours_surcharge=after_hours_surcharge,
        emergency_fee=emergency_fee,
        holiday_surcharge=holiday_surcharge,
        wheelchair_price=wheelchair_price,
        veteran_discount=veteran_discount,
        total=round_money(subtotal - veteran_discount),
        is_bariatric=is_bariatric,
        has_holiday_surcharge=has_holiday_surcharge,
        has_dead_mileage=has_dead_mileage,
    )
