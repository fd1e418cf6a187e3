"""
Pricing dependencies for FastAPI.

This module wires configuration, the routing client and the pricing
service into request handlers. Tests replace any of them through
app.dependency_overrides.
"""

from typing import AsyncIterator

from fastapi import Depends

from backend.app.core.config import settings
from backend.app.core.pricing_config import PricingConfig
from backend.app.domain.pricing.distance import DistanceProvider, RoutingClient
from backend.app.domain.pricing.jurisdiction import (
    GeocodingJurisdictionClassifier,
    JurisdictionClassifier,
    PatternJurisdictionClassifier,
)
from backend.app.domain.pricing.service import PricingService


def get_pricing_config() -> PricingConfig:
    """Rate table in force for this deployment."""
    return settings.pricing


async def get_routing_client() -> AsyncIterator[RoutingClient]:
    """
    Request-scoped routing client.

    Closed when the request finishes; nothing is shared across requests.
    """
    async with RoutingClient(settings.routing_base_url, timeout=settings.routing_timeout_seconds) as client:
        yield client


def get_distance_provider(
    routing: RoutingClient = Depends(get_routing_client),
    config: PricingConfig = Depends(get_pricing_config),
) -> DistanceProvider:
    return DistanceProvider(routing, config)


def get_jurisdiction_classifier(
    routing: RoutingClient = Depends(get_routing_client),
    config: PricingConfig = Depends(get_pricing_config),
) -> JurisdictionClassifier:
    if settings.geocoding_enabled and routing.is_configured:
        return GeocodingJurisdictionClassifier(config, routing)
    return PatternJurisdictionClassifier(config)


def get_pricing_service(
    config: PricingConfig = Depends(get_pricing_config),
    distance_provider: DistanceProvider = Depends(get_distance_provider),
    classifier: JurisdictionClassifier = Depends(get_jurisdiction_classifier),
) -> PricingService:
    return PricingService(config, distance_provider, classifier)
