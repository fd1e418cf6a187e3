"""
Pricing enumerations.
"""

import enum


class WheelchairType(str, enum.Enum):
    """Wheelchair classification of the passenger."""
    NONE = "none"
    MANUAL = "manual"
    POWER = "power"
    PROVIDED = "provided"  # Chair supplied by us (rental fee line)


class RoutingStatus(str, enum.Enum):
    """Outcome of a routing-service distance lookup."""
    SUCCESS = "success"  # Distance resolved by the routing service
    ESTIMATED = "estimated"  # Not attempted: routing endpoint not configured
    FAILED = "failed"  # Attempted but errored, timed out or returned no route
    SKIPPED = "skipped"  # Not needed for this trip


class JurisdictionSource(str, enum.Enum):
    """Which classification rule produced a JurisdictionInfo."""
    PATTERN_OUTSIDE = "pattern_outside"
    PATTERN_INSIDE = "pattern_inside"
    DEFAULT = "default"  # No pattern matched; conservative home-zone default
    FALLBACK = "fallback"  # Classification raised; conservative home-zone default
    GEOCODER = "geocoder"
