"""
Fare & Surge Pricing Engine
===========================

Turns a trip request (service, pickup, destination, distance, duration,
timestamp, optional traffic durations) into an itemized, explained and
confidence-scored fare.

Pipeline, executed in order for every ``calculate_fare`` call:

1. Surge Classifier     -- half-hour slot multiplier + time-band reason
                           + additive airport delta, capped per service
2. Location Fees        -- airport pickup/dropoff, downtown (CBD), long ride
3. Traffic Adjuster     -- observed / expected duration step function
4. Assembler            -- subtotal, surge fee and traffic fee (both against
                           the pre-surge subtotal), minimum-fare floor,
                           confidence score

Currency amounts are ``Decimal`` quantized to cents (half-up).  The engine
captures its configuration at construction and keeps no per-request state,
so a single instance is safe to share across concurrent requests.  The
airport locator is called at most twice per request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import Decimal
from functools import lru_cache
from typing import Any, Optional
from zoneinfo import ZoneInfo

from farecompare.core.config import settings
from farecompare.core.money import Number, round_cents, to_decimal
from farecompare.integrations.airports import Airport, AirportLocator, StaticAirportLocator
from farecompare.models.pricing import PricingConfig, ServicePricingProfile, load_pricing_config
from farecompare.services.geoService import Coordinates, km_to_miles
from farecompare.services.locationFees import calculate_location_fees
from farecompare.services.surgeClassifier import SurgeAssessment, classify_surge
from farecompare.services.timeRecommendations import get_best_time_recommendations as recommend_for_time
from farecompare.services.trafficAdjuster import TrafficAssessment, assess_traffic

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAX_CONFIDENCE = Decimal("0.90")
MIN_CONFIDENCE = Decimal("0.50")

LONG_DISTANCE_KM = Decimal("50")
MEDIUM_DISTANCE_KM = Decimal("25")
LONG_DISTANCE_PENALTY = Decimal("0.15")
MEDIUM_DISTANCE_PENALTY = Decimal("0.10")

HIGH_SURGE_THRESHOLD = Decimal("2.0")
HIGH_SURGE_PENALTY = Decimal("0.10")
CONGESTION_PENALTY = Decimal("0.10")

# Hours (inclusive) during which estimates carry extra uncertainty
LOW_CONFIDENCE_HOURS = range(1, 6)
LOW_CONFIDENCE_HOUR_PENALTY = Decimal("0.10")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class UnsupportedServiceError(ValueError):
    """Raised when a service id has no configured pricing profile."""

    def __init__(self, service: str, supported: list[str]) -> None:
        self.service = service
        self.supported = supported
        super().__init__(
            f"Unsupported service: {service} (supported: {', '.join(supported)})"
        )


# ---------------------------------------------------------------------------
# Request / response DTOs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PricingInput:
    """A single fare request."""
    service: str
    pickup: Coordinates
    destination: Coordinates
    distance_km: Number
    duration_min: Number
    timestamp: Optional[datetime] = None
    observed_duration_sec: Optional[Number] = None
    expected_duration_sec: Optional[Number] = None


@dataclass(frozen=True)
class PricingBreakdown:
    """Fully itemized fare.  ``subtotal`` is the sum of the first eight items."""
    base_fare: Decimal
    distance_fee: Decimal
    time_fee: Decimal
    booking_fee: Decimal
    safety_fee: Decimal
    airport_fees: Decimal
    location_surcharge: Decimal
    long_ride_fee: Decimal
    subtotal: Decimal

    surge_multiplier: Decimal
    surge_fee: Decimal
    traffic_multiplier: Decimal
    traffic_fee: Decimal

    final_fare: Decimal
    applied_min_fare: bool
    confidence: Decimal


@dataclass(frozen=True)
class PricingResult:
    price: Decimal
    breakdown: PricingBreakdown
    surge_reason: str
    debug: Optional[dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _finite_or_zero(value: Number, field: str) -> Decimal:
    """Convert a trip measure, mapping NaN and infinities to zero."""
    amount = to_decimal(value)
    if not amount.is_finite():
        logger.warning("Non-finite %s %r treated as 0", field, value)
        return Decimal("0")
    return amount


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class PricingEngine:
    """Deterministic fare calculator over an immutable pricing table.

    Args:
        config: Pricing table.  Defaults to the packaged table.
        locator: Airport classifier.  Defaults to the static airport table.
        tz: Zone for "now" and for converting aware timestamps.  Naive
            timestamps are used as-is.
        debug: Attach a diagnostic payload to every result.
    """

    def __init__(
        self,
        config: Optional[PricingConfig] = None,
        locator: Optional[AirportLocator] = None,
        tz: Optional[tzinfo] = None,
        debug: bool = False,
    ) -> None:
        self._config = config if config is not None else load_pricing_config()
        self._locator = locator if locator is not None else StaticAirportLocator()
        self._tz = tz if tz is not None else ZoneInfo(settings.pricing_timezone)
        self._debug = debug

    @property
    def config(self) -> PricingConfig:
        return self._config

    # -- Public operations --------------------------------------------------

    def calculate_fare(self, request: PricingInput) -> PricingResult:
        """Price a single trip for one service.

        Raises:
            UnsupportedServiceError: If the service has no pricing profile.
        """
        profile = self.get_profile(request.service)
        timestamp = self.resolve_timestamp(request.timestamp)

        logger.debug(
            "Calculating fare: service=%s distance_km=%s duration_min=%s at %s",
            request.service,
            request.distance_km,
            request.duration_min,
            timestamp.isoformat(),
        )

        pickup_airport = self._locator.locate(request.pickup)
        destination_airport = self._locator.locate(request.destination)

        distance_km = _finite_or_zero(request.distance_km, "distance_km")
        duration_min = _finite_or_zero(request.duration_min, "duration_min")
        distance_miles = km_to_miles(distance_km)

        # 1. Surge
        surge = classify_surge(
            self._config.surge_schedule,
            self._config.location_modifiers,
            timestamp,
            pickup_airport,
            destination_airport,
            profile.max_surge,
        )

        # 2. Location fees
        location = calculate_location_fees(
            profile,
            request.pickup,
            request.destination,
            pickup_airport,
            destination_airport,
            distance_miles,
            timestamp.hour,
            self._config.downtown_zones,
            self._config.location_modifiers,
        )

        # 3. Traffic
        traffic = assess_traffic(
            request.observed_duration_sec,
            request.expected_duration_sec,
            self._config.traffic_modifiers,
        )

        # 4. Assemble
        base_fare = round_cents(profile.base_fare)
        distance_fee = round_cents(distance_miles * profile.per_mile)
        time_fee = round_cents(duration_min * profile.per_minute)
        booking_fee = round_cents(profile.booking_fee)
        safety_fee = round_cents(profile.safety_fee)

        subtotal = (
            base_fare
            + distance_fee
            + time_fee
            + booking_fee
            + safety_fee
            + location.airport_fees
            + location.location_surcharge
            + location.long_ride_fee
        )

        surge_fee = round_cents(subtotal * (surge.multiplier - 1))
        traffic_fee = round_cents(subtotal * (traffic.multiplier - 1))
        fare_before_floor = subtotal + surge_fee + traffic_fee

        min_fare = round_cents(profile.min_fare)
        final_fare = max(fare_before_floor, min_fare)
        applied_min_fare = final_fare == min_fare

        confidence = self.calculate_confidence(distance_km, surge, traffic, timestamp)

        breakdown = PricingBreakdown(
            base_fare=base_fare,
            distance_fee=distance_fee,
            time_fee=time_fee,
            booking_fee=booking_fee,
            safety_fee=safety_fee,
            airport_fees=location.airport_fees,
            location_surcharge=location.location_surcharge,
            long_ride_fee=location.long_ride_fee,
            subtotal=subtotal,
            surge_multiplier=surge.multiplier,
            surge_fee=surge_fee,
            traffic_multiplier=traffic.multiplier,
            traffic_fee=traffic_fee,
            final_fare=final_fare,
            applied_min_fare=applied_min_fare,
            confidence=confidence,
        )

        logger.debug(
            "Fare for %s: subtotal=%s surge=%sx traffic=%sx final=%s (min_fare=%s, confidence=%s)",
            request.service,
            subtotal,
            surge.multiplier,
            traffic.multiplier,
            final_fare,
            applied_min_fare,
            confidence,
        )

        debug_info: Optional[dict[str, Any]] = None
        if self._debug:
            debug_info = {
                "config_version": self._config.version,
                "timestamp": timestamp.isoformat(),
                "distance_miles": str(distance_miles),
                "pickup_airport": pickup_airport.code if pickup_airport else None,
                "destination_airport": destination_airport.code if destination_airport else None,
                "is_downtown": location.is_downtown,
                "time_slot": surge.time_slot,
                "base_surge": str(surge.base_surge),
                "traffic_band": traffic.band.value,
                "traffic_reason": traffic.reason,
            }

        return PricingResult(
            price=final_fare,
            breakdown=breakdown,
            surge_reason=surge.reason.value,
            debug=debug_info,
        )

    def calculate_surge(
        self,
        pickup: Coordinates,
        destination: Coordinates,
        timestamp: Optional[datetime] = None,
        service: Optional[str] = None,
    ) -> SurgeAssessment:
        """Standalone surge classification.

        The cap is the service's ``max_surge`` when ``service`` is given,
        otherwise the table's ``default_max_surge``.
        """
        max_surge = (
            self.get_profile(service).max_surge
            if service is not None
            else self._config.default_max_surge
        )
        return classify_surge(
            self._config.surge_schedule,
            self._config.location_modifiers,
            self.resolve_timestamp(timestamp),
            self._locator.locate(pickup),
            self._locator.locate(destination),
            max_surge,
        )

    def get_best_time_recommendations(self, timestamp: Optional[datetime] = None) -> list[str]:
        return recommend_for_time(self.resolve_timestamp(timestamp))

    def has_airport_surcharge(self, pickup: Coordinates, destination: Coordinates) -> bool:
        return self.locate_airport(pickup) is not None or self.locate_airport(destination) is not None

    # -- Helpers ------------------------------------------------------------

    def get_profile(self, service: str) -> ServicePricingProfile:
        profile = self._config.get_service(service)
        if profile is None:
            logger.warning("Pricing requested for unsupported service %r", service)
            raise UnsupportedServiceError(service, self._config.service_ids)
        return profile

    def locate_airport(self, point: Coordinates) -> Optional[Airport]:
        return self._locator.locate(point)

    def resolve_timestamp(self, timestamp: Optional[datetime]) -> datetime:
        """Return the request time as wall-clock time in the pricing zone."""
        if timestamp is None:
            return datetime.now(self._tz)
        if timestamp.tzinfo is not None:
            return timestamp.astimezone(self._tz)
        return timestamp

    @staticmethod
    def calculate_confidence(
        distance_km: Decimal,
        surge: SurgeAssessment,
        traffic: TrafficAssessment,
        timestamp: datetime,
    ) -> Decimal:
        """Start at 0.90, subtract every triggered penalty, floor at 0.50."""
        penalty = Decimal("0")

        if distance_km > LONG_DISTANCE_KM:
            penalty += LONG_DISTANCE_PENALTY
        elif distance_km > MEDIUM_DISTANCE_KM:
            penalty += MEDIUM_DISTANCE_PENALTY

        if surge.multiplier > HIGH_SURGE_THRESHOLD:
            penalty += HIGH_SURGE_PENALTY

        if traffic.is_congested:
            penalty += CONGESTION_PENALTY

        if timestamp.hour in LOW_CONFIDENCE_HOURS:
            penalty += LOW_CONFIDENCE_HOUR_PENALTY

        return max(MIN_CONFIDENCE, MAX_CONFIDENCE - penalty)


# ---------------------------------------------------------------------------
# Module-level convenience API bound to a process-wide engine
# ---------------------------------------------------------------------------

@lru_cache(maxsize=1)
def get_default_engine() -> PricingEngine:
    """Build (once) the engine described by the application settings."""
    return PricingEngine(
        config=load_pricing_config(settings.pricing_config_path),
        locator=StaticAirportLocator(tolerance=settings.airport_tolerance_deg),
        tz=ZoneInfo(settings.pricing_timezone),
        debug=settings.debug,
    )


def calculate_fare(request: PricingInput) -> PricingResult:
    return get_default_engine().calculate_fare(request)


def calculate_surge(
    pickup: Coordinates,
    destination: Coordinates,
    timestamp: Optional[datetime] = None,
    service: Optional[str] = None,
) -> SurgeAssessment:
    return get_default_engine().calculate_surge(pickup, destination, timestamp, service)


def has_airport_surcharge(pickup: Coordinates, destination: Coordinates) -> bool:
    return get_default_engine().has_airport_surcharge(pickup, destination)


def get_best_time_recommendations(timestamp: Optional[datetime] = None) -> list[str]:
    return get_default_engine().get_best_time_recommendations(timestamp)
