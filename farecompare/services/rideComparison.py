"""
Ride Comparison Service
=======================

Prices one trip across several services at the same instant and builds
the side-by-side view consumed by the comparison API:

- one quote per service, sorted cheapest first
- a route-level surge summary (uncapped by any single service)
- airport flag and best-time tips

Expected duration defaults to the trip duration, so the traffic adjuster
only fires when an observed duration is supplied.  Nothing here persists
quotes; callers that keep price history store ``final_fare`` and the
surge/traffic metadata themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from farecompare.core.money import Number, to_decimal
from farecompare.services.geoService import Coordinates
from farecompare.services.pricingEngine import PricingEngine, PricingInput, PricingResult
from farecompare.services.trafficAdjuster import TrafficBand, assess_traffic

logger = logging.getLogger(__name__)

# Surge at or below this multiplier is not advertised as active
SURGE_ACTIVE_THRESHOLD = Decimal("1.05")


@dataclass(frozen=True)
class ServiceQuote:
    service: str
    label: str
    result: PricingResult
    traffic_level: TrafficBand


@dataclass(frozen=True)
class SurgeInfo:
    multiplier: Decimal
    reason: str
    is_active: bool


@dataclass(frozen=True)
class ComparisonResult:
    timestamp: datetime
    quotes: list[ServiceQuote]
    cheapest_service: str
    savings: Decimal
    surge: SurgeInfo
    has_airport_surcharge: bool
    time_recommendations: list[str]


@dataclass(frozen=True)
class FareQuote:
    price: str
    surge_reason: str
    confidence: Decimal


def compare_services(
    engine: PricingEngine,
    pickup: Coordinates,
    destination: Coordinates,
    distance_km: Number,
    duration_min: Number,
    timestamp: Optional[datetime] = None,
    observed_duration_sec: Optional[Number] = None,
    services: Optional[Sequence[str]] = None,
) -> ComparisonResult:
    """Price a trip for every requested service (default: all configured).

    Raises:
        UnsupportedServiceError: If any requested service is unknown.
        ValueError: If ``services`` is an empty list.
    """
    service_ids = list(services) if services is not None else engine.config.service_ids
    if not service_ids:
        raise ValueError("At least one service is required for a comparison")

    # Every service is priced at the same instant
    now = engine.resolve_timestamp(timestamp)
    expected_duration_sec = to_decimal(duration_min) * 60
    traffic_level = assess_traffic(
        observed_duration_sec, expected_duration_sec, engine.config.traffic_modifiers
    ).band

    quotes: list[ServiceQuote] = []
    for service in service_ids:
        profile = engine.get_profile(service)
        result = engine.calculate_fare(
            PricingInput(
                service=service,
                pickup=pickup,
                destination=destination,
                distance_km=distance_km,
                duration_min=duration_min,
                timestamp=now,
                observed_duration_sec=observed_duration_sec,
                expected_duration_sec=expected_duration_sec,
            )
        )
        quotes.append(
            ServiceQuote(
                service=service.lower(),
                label=profile.label,
                result=result,
                traffic_level=traffic_level,
            )
        )

    quotes.sort(key=lambda quote: quote.result.price)
    savings = quotes[-1].result.price - quotes[0].result.price

    surge = engine.calculate_surge(pickup, destination, now)

    logger.info(
        "Compared %d services: cheapest=%s at %s (savings %s, surge %sx %s)",
        len(quotes),
        quotes[0].service,
        quotes[0].result.price,
        savings,
        surge.multiplier,
        surge.reason.value,
    )

    return ComparisonResult(
        timestamp=now,
        quotes=quotes,
        cheapest_service=quotes[0].service,
        savings=savings,
        surge=SurgeInfo(
            multiplier=surge.multiplier,
            reason=surge.reason.value,
            is_active=surge.multiplier > SURGE_ACTIVE_THRESHOLD,
        ),
        has_airport_surcharge=surge.is_airport_route,
        time_recommendations=engine.get_best_time_recommendations(now),
    )


def format_fare_quote(
    engine: PricingEngine,
    service: str,
    pickup: Coordinates,
    destination: Coordinates,
    distance_km: Number,
    duration_min: Number,
    timestamp: Optional[datetime] = None,
) -> FareQuote:
    """Compact quote with a display price string such as ``"$18.10"``."""
    result = engine.calculate_fare(
        PricingInput(
            service=service,
            pickup=pickup,
            destination=destination,
            distance_km=distance_km,
            duration_min=duration_min,
            timestamp=timestamp,
            expected_duration_sec=to_decimal(duration_min) * 60,
        )
    )
    return FareQuote(
        price=f"${result.price:.2f}",
        surge_reason=result.surge_reason,
        confidence=result.breakdown.confidence,
    )

