"""
Configuration settings for the Trip Pricing Engine.

This module handles application configuration using Pydantic settings.
Pricing rates are nested under `pricing` and can be overridden from the
environment, e.g. PRICING__IN_ZONE_PER_MILE=3.25.
"""

from pydantic_settings import BaseSettings
from typing import Optional

from backend.app.core.pricing_config import PricingConfig


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "NEMT Trip Pricing Engine"
    api_version: str = "v1"
    debug: bool = False
    log_level: str = "INFO"

    # Routing / Distance Service
    routing_base_url: Optional[str] = None
    routing_timeout_seconds: float = 10.0

    # Geocoding (optional jurisdiction enhancement)
    geocoding_enabled: bool = False

    # Rates, rule flags and holiday calendar
    pricing: PricingConfig = PricingConfig()

    class Config:
        env_file = ".env"
        env_nested_delimiter = "__"
        case_sensitive = False


settings = Settings()
