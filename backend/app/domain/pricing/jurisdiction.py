"""
Jurisdiction Classifier.

Decides whether a pickup/destination pair is priced as home zone and how
many zone boundaries it crosses.

The default PatternJurisdictionClassifier is a heuristic over curated
address fragments, not a geocoding oracle:
1. Outside-zone pattern in either address -> outside, 2 zones crossed
2. Home-zone pattern in both addresses -> home zone, 0 crossed
3. Nothing conclusive -> home zone, 0 crossed (avoids overcharging)
4. Any error -> same home-zone default

GeocodingJurisdictionClassifier resolves counties through the routing
service and falls back to the pattern rules when it cannot.
Neither classifier raises.
"""

import abc
import logging
from typing import Any, Dict, Optional

from backend.app.core.pricing_config import PricingConfig
from backend.app.domain.pricing.distance import RoutingClient
from backend.app.models.pricing_enums import JurisdictionSource
from backend.app.schemas.pricing import JurisdictionInfo

logger = logging.getLogger(__name__)

OUTSIDE_ZONES_CROSSED = 2


class JurisdictionClassifier(abc.ABC):
    """Capability interface: classify a pickup/destination address pair."""

    @abc.abstractmethod
    async def classify(self, pickup_address: str, destination_address: str) -> JurisdictionInfo:
        raise NotImplementedError


class PatternJurisdictionClassifier(JurisdictionClassifier):

    def __init__(self, config: PricingConfig):
        self.config = config

    async def classify(self, pickup_address: str, destination_address: str) -> JurisdictionInfo:
        return self.match(pickup_address, destination_address)

    def home_zone(self, source: JurisdictionSource) -> JurisdictionInfo:
        return JurisdictionInfo(
            in_home_zone=True,
            zones_crossed=0,
            pickup_zone=self.config.home_zone_name,
            destination_zone=self.config.home_zone_name,
            source=source,
        )

    def match_outside(self, pickup_address: Optional[str], destination_address: Optional[str]) -> Optional[JurisdictionInfo]:
        """Outside-zone override, or None when neither address matches."""
        pickup = (pickup_address or "").lower()
        destination = (destination_address or "").lower()

        pickup_outside = any(pattern in pickup for pattern in self.config.outside_zone_patterns)
        destination_outside = any(pattern in destination for pattern in self.config.outside_zone_patterns)
        if not (pickup_outside or destination_outside):
            return None

        return JurisdictionInfo(
            in_home_zone=False,
            zones_crossed=OUTSIDE_ZONES_CROSSED,
            pickup_zone=self.config.outside_zone_name if pickup_outside else self.config.home_zone_name,
            destination_zone=self.config.outside_zone_name if destination_outside else self.config.home_zone_name,
            source=JurisdictionSource.PATTERN_OUTSIDE,
        )

    def match(self, pickup_address: Optional[str], destination_address: Optional[str]) -> JurisdictionInfo:
        try:
            outside = self.match_outside(pickup_address, destination_address)
            if outside is not None:
                logger.info("Outside-zone override matched", extra={"zones_crossed": outside.zones_crossed})
                return outside

            pickup = (pickup_address or "").lower()
            destination = (destination_address or "").lower()
            pickup_home = any(pattern in pickup for pattern in self.config.home_zone_patterns)
            destination_home = any(pattern in destination for pattern in self.config.home_zone_patterns)
            if pickup_home and destination_home:
                return self.home_zone(JurisdictionSource.PATTERN_INSIDE)

            logger.info("No zone pattern matched; defaulting to home zone")
            return self.home_zone(JurisdictionSource.DEFAULT)
        except Exception:
            logger.exception("Jurisdiction classification failed; defaulting to home zone")
            return self.home_zone(JurisdictionSource.FALLBACK)


def extract_county(geocode_result: Dict[str, Any], config: PricingConfig) -> Optional[str]:
    """
    County name from a geocoding result's address components.

    Uses administrative_area_level_2 when present; otherwise an Ohio
    locality in the home-county city list resolves to the home zone.
    """
    components = geocode_result.get("address_components") or []

    for component in components:
        if "administrative_area_level_2" in component.get("types", []):
            return component.get("long_name")

    is_ohio = any(
        "administrative_area_level_1" in component.get("types", []) and component.get("short_name") == "OH"
        for component in components
    )
    if not is_ohio:
        return None

    for component in components:
        if "locality" in component.get("types", []):
            city = (component.get("long_name") or "").lower()
            if any(home_city in city for home_city in config.home_county_cities):
                return config.home_zone_name
            return None

    return None


class GeocodingJurisdictionClassifier(JurisdictionClassifier):
    """
    County-based classification through the geocoding endpoint.

    Zones crossed = 1 + number of distinct non-home counties among the two
    endpoints, so a single neighbouring county counts like the outside-zone
    override. Override patterns are still checked first.
    """

    def __init__(self, config: PricingConfig, routing: RoutingClient):
        self.config = config
        self.routing = routing
        self.patterns = PatternJurisdictionClassifier(config)

    async def classify(self, pickup_address: str, destination_address: str) -> JurisdictionInfo:
        outside = self.patterns.match_outside(pickup_address, destination_address)
        if outside is not None:
            return outside

        try:
            pickup_county = extract_county(await self.routing.geocode(pickup_address), self.config)
            destination_county = extract_county(await self.routing.geocode(destination_address), self.config)
        except Exception as exc:
            logger.warning("Geocoding unavailable, using address patterns: %s", exc)
            return self.patterns.match(pickup_address, destination_address)

        if not pickup_county or not destination_county:
            logger.info("County unresolved, using address patterns")
            return self.patterns.match(pickup_address, destination_address)

        home = self.config.home_zone_name.lower()
        outside_counties = {county.lower() for county in (pickup_county, destination_county) if county.lower() != home}
        if not outside_counties:
            return self.patterns.home_zone(JurisdictionSource.GEOCODER)

        return JurisdictionInfo(
            in_home_zone=False,
            zones_crossed=1 + len(outside_counties),
            pickup_zone=pickup_county,
            destination_zone=destination_county,
            source=JurisdictionSource.GEOCODER,
        )
