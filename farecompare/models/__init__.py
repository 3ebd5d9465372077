"""
Pricing table models
====================

Central import point for the pricing configuration models.

Usage::

    from farecompare.models import PricingConfig, load_pricing_config
"""

from .pricing import (
    AirportFeeOverride,
    DowntownZone,
    LocationModifiers,
    PricingConfig,
    ServicePricingProfile,
    SurgeSchedule,
    TrafficModifiers,
    load_pricing_config,
)

__all__ = [
    "AirportFeeOverride",
    "DowntownZone",
    "LocationModifiers",
    "PricingConfig",
    "ServicePricingProfile",
    "SurgeSchedule",
    "TrafficModifiers",
    "load_pricing_config",
]
