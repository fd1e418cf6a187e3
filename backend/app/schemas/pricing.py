"""
Pricing schemas.

Immutable request, intermediate and result types of the Trip Pricing Engine.
Monetary values are Decimals quantized to cents; distances are miles.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from backend.app.models.pricing_enums import JurisdictionSource, RoutingStatus, WheelchairType


ZERO = Decimal("0.00")


class TripPricingRequest(BaseModel):
    """A proposed trip to be priced."""
    model_config = ConfigDict(frozen=True)

    is_round_trip: bool = False
    distance: float = Field(0, ge=0, description="One-way leg distance in miles")
    pickup_time: Optional[datetime] = None
    wheelchair_type: WheelchairType = WheelchairType.NONE
    client_weight: Optional[float] = Field(None, ge=0, description="Client weight in lbs")
    additional_passengers: int = Field(0, ge=0)
    is_emergency: bool = False
    is_veteran: bool = False
    pickup_address: Optional[str] = None
    destination_address: Optional[str] = None


class JurisdictionInfo(BaseModel):
    """Rate zone of a pickup/destination pair."""
    model_config = ConfigDict(frozen=True)

    in_home_zone: bool
    zones_crossed: int = Field(..., ge=0)
    pickup_zone: str
    destination_zone: str
    source: JurisdictionSource = JurisdictionSource.DEFAULT

    @model_validator(mode="after")
    def check_home_zone(self) -> "JurisdictionInfo":
        if self.zones_crossed == 0 and not self.in_home_zone:
            raise ValueError("zones_crossed == 0 requires in_home_zone")
        return self


class HolidayInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_holiday: bool = False
    name: Optional[str] = None
    surcharge: Decimal = ZERO


class HolidayEntry(BaseModel):
    """One dated holiday in a calendar year."""
    model_config = ConfigDict(frozen=True)

    holiday_date: date
    name: str


class HolidayCalendarResponse(BaseModel):
    year: int
    holidays: List[HolidayEntry]


class DeadMileage(BaseModel):
    """Empty-leg distance between the depot and the trip endpoints."""
    model_config = ConfigDict(frozen=True)

    miles: float = Field(0, ge=0)
    is_estimated: bool = False
    status: RoutingStatus = RoutingStatus.SKIPPED


class RouteDistance(BaseModel):
    """Distance between two addresses as reported by the routing service."""
    model_config = ConfigDict(frozen=True)

    miles: float = Field(0, ge=0)
    status: RoutingStatus
    error: Optional[str] = None


class RouteLeg(BaseModel):
    """Fastest route between two addresses."""
    model_config = ConfigDict(frozen=True)

    miles: float = Field(0, ge=0)
    duration_seconds: Optional[float] = None
    status: RoutingStatus
    error: Optional[str] = None


class RouteLegRequest(BaseModel):
    origin: str = Field(..., min_length=1)
    destination: str = Field(..., min_length=1)


class PriceBreakdown(BaseModel):
    """
    Itemized trip price.

    Persisted verbatim by the caller; a stored breakdown is the frozen
    historical price of a trip.
    """
    model_config = ConfigDict(frozen=True)

    base_price: Decimal = ZERO
    round_trip_price: Decimal = ZERO
    distance_price: Decimal = ZERO
    zone_surcharge: Decimal = ZERO
    dead_mileage_price: Decimal = ZERO
    after_hours_surcharge: Decimal = ZERO
    emergency_fee: Decimal = ZERO
    holiday_surcharge: Decimal = ZERO
    wheelchair_price: Decimal = ZERO
    veteran_discount: Decimal = ZERO
    total: Decimal = ZERO

    is_bariatric: bool = False
    has_holiday_surcharge: bool = False
    has_dead_mileage: bool = False


class PricingSummary(BaseModel):
    """Display strings for the booking screen."""
    model_config = ConfigDict(frozen=True)

    trip_type: str
    distance: str
    estimated_total: str
    is_bariatric: bool = False
    has_holiday_surcharge: bool = False
    has_dead_mileage: bool = False


class PricingEstimate(BaseModel):
    """Result of a pricing request; failures are tagged, never raised."""
    model_config = ConfigDict(frozen=True)

    success: bool
    pricing: Optional[PriceBreakdown] = None
    jurisdiction: Optional[JurisdictionInfo] = None
    dead_mileage: Optional[DeadMileage] = None
    holiday: Optional[HolidayInfo] = None
    summary: Optional[PricingSummary] = None
    error: Optional[str] = None
