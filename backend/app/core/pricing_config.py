"""
Pricing configuration for the Trip Pricing Engine.

Rates, thresholds, rule flags and the holiday calendar used by every
pricing computation. Values are carried in an immutable PricingConfig that
callers construct once and pass into the calendar rules, classifier and
calculator, so tests can price against an alternate rate table.
"""

from decimal import Decimal
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Base fares (per leg)
STANDARD_PER_LEG = Decimal("50.00")
BARIATRIC_PER_LEG = Decimal("150.00")

# Weight classes (lbs)
BARIATRIC_WEIGHT_THRESHOLD = 300
CAPACITY_WEIGHT_LIMIT = 400  # Not enforced by the engine

# Per-mile rates
IN_ZONE_PER_MILE = Decimal("3.00")
OUT_OF_ZONE_PER_MILE = Decimal("4.00")
DEAD_MILEAGE_PER_MILE = Decimal("4.00")

# Flat fees
AFTER_HOURS_FEE = Decimal("40.00")
EMERGENCY_FEE = Decimal("40.00")
WHEELCHAIR_RENTAL_FEE = Decimal("25.00")
ZONE_SURCHARGE = Decimal("50.00")  # Per zone beyond the first
HOLIDAY_SURCHARGE = Decimal("100.00")  # Per trip, not per leg

VETERAN_DISCOUNT_RATE = Decimal("0.20")

# After-hours window (local hour, 24h clock)
AFTER_HOURS_START = 18
AFTER_HOURS_END = 8

LOCAL_TIMEZONE = "America/New_York"

DEPOT_ADDRESS = "5050 Blazer Pkwy # 100, Dublin, OH 43017"
DEPOT_COORDINATES: Tuple[float, float] = (40.0994, -83.1508)

HOME_ZONE_NAME = "Franklin County"
OUTSIDE_ZONE_NAME = "Fairfield County (Lancaster)"

HOME_ZONE_PATTERNS = [
    "westerville",
    "columbus",
    "dublin",
    "gahanna",
    "reynoldsburg",
    "grove city",
    "hilliard",
    "upper arlington",
    "bexley",
    "whitehall",
    "worthington",
    "grandview heights",
    "43082",  # Westerville
    "43228",  # Columbus
    "executive campus dr",
    "franshire",
    "groveport",
    "new albany",
    "pickerington",
    "canal winchester",
    "lockbourne",
]

OUTSIDE_ZONE_PATTERNS = [
    "lancaster, oh",
    "lancaster,oh",
    "lancaster ohio",
    "43130",  # Lancaster
    "fairfield county",
    "fairfield co",
]

# Cities resolved to the home county when a geocode result has no county
HOME_COUNTY_CITIES = [
    "columbus",
    "dublin",
    "westerville",
    "gahanna",
    "reynoldsburg",
    "grove city",
    "hilliard",
    "upper arlington",
    "bexley",
    "whitehall",
    "worthington",
    "grandview heights",
]


class FixedHoliday(BaseModel):
    """A holiday that falls on the same month/day every year."""

    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=31)
    name: str


FIXED_HOLIDAYS = [
    FixedHoliday(month=1, day=1, name="New Year's Day"),
    FixedHoliday(month=12, day=31, name="New Year's Eve"),
    FixedHoliday(month=7, day=4, name="Independence Day"),
    FixedHoliday(month=12, day=24, name="Christmas Eve"),
    FixedHoliday(month=12, day=25, name="Christmas Day"),
]


class PricingConfig(BaseModel):
    """
    Immutable rate table and rule set for one pricing deployment.

    Every monetary value is a Decimal in dollars. Rule flags mark features
    whose fields are kept on the breakdown but currently priced at zero.
    """

    model_config = ConfigDict(frozen=True)

    standard_per_leg: Decimal = STANDARD_PER_LEG
    bariatric_per_leg: Decimal = BARIATRIC_PER_LEG
    bariatric_weight_threshold: float = BARIATRIC_WEIGHT_THRESHOLD
    capacity_weight_limit: float = CAPACITY_WEIGHT_LIMIT

    in_zone_per_mile: Decimal = IN_ZONE_PER_MILE
    out_of_zone_per_mile: Decimal = OUT_OF_ZONE_PER_MILE
    dead_mileage_per_mile: Decimal = DEAD_MILEAGE_PER_MILE

    after_hours_fee: Decimal = AFTER_HOURS_FEE
    emergency_fee: Decimal = EMERGENCY_FEE
    wheelchair_rental_fee: Decimal = WHEELCHAIR_RENTAL_FEE
    zone_surcharge: Decimal = ZONE_SURCHARGE
    holiday_surcharge: Decimal = HOLIDAY_SURCHARGE
    veteran_discount_rate: Decimal = VETERAN_DISCOUNT_RATE

    wheelchair_rental_enabled: bool = False
    veteran_discount_enabled: bool = False

    after_hours_start: int = Field(AFTER_HOURS_START, ge=0, le=24)
    after_hours_end: int = Field(AFTER_HOURS_END, ge=0, le=24)
    local_timezone: str = LOCAL_TIMEZONE

    depot_address: str = DEPOT_ADDRESS
    depot_coordinates: Tuple[float, float] = DEPOT_COORDINATES

    home_zone_name: str = HOME_ZONE_NAME
    outside_zone_name: str = OUTSIDE_ZONE_NAME
    home_zone_patterns: Tuple[str, ...] = tuple(HOME_ZONE_PATTERNS)
    outside_zone_patterns: Tuple[str, ...] = tuple(OUTSIDE_ZONE_PATTERNS)
    home_county_cities: Tuple[str, ...] = tuple(HOME_COUNTY_CITIES)

    fixed_holidays: Tuple[FixedHoliday, ...] = tuple(FIXED_HOLIDAYS)

    @model_validator(mode="after")
    def check_after_hours_window(self) -> "PricingConfig":
        if self.after_hours_end > self.after_hours_start:
            raise ValueError("after_hours_end must not be later than after_hours_start")
        return self

    def with_overrides(self, **changes) -> "PricingConfig":
        """Return a validated copy with the given fields replaced."""
        return PricingConfig(**{**self.model_dump(), **changes})
