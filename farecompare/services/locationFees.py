"""
Location Fee Calculator
=======================

Location-dependent line items of a fare:

- Airport fees: pickup and dropoff sides are charged independently, so an
  airport-to-airport trip pays both.  A per-airport override on the
  service profile replaces the generic fee for that side.
- Downtown (CBD) surcharge: applied once per trip when either endpoint is
  inside a downtown zone, scaled by time of day (business hours x0.5,
  nightlife x1.2, otherwise full value).
- Long-ride fee: flat fee once the trip reaches the service's mileage
  threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from farecompare.core.money import round_cents
from farecompare.integrations.airports import Airport
from farecompare.models.pricing import (
    DowntownZone,
    LocationModifiers,
    ServicePricingProfile,
)
from farecompare.services.geoService import Coordinates

ZERO = Decimal("0.00")

# Absorbs float noise in km inputs derived from a mile figure
# (e.g. 25 / 0.621371).
_MILES_TOLERANCE = Decimal("1E-9")


@dataclass(frozen=True)
class LocationFees:
    airport_fees: Decimal
    location_surcharge: Decimal
    long_ride_fee: Decimal
    is_downtown: bool


def calculate_airport_fees(
    profile: ServicePricingProfile,
    pickup_airport: Optional[Airport],
    destination_airport: Optional[Airport],
) -> Decimal:
    total = ZERO

    if pickup_airport is not None:
        override = profile.airport_fee_overrides.get(pickup_airport.code)
        total += override.pickup if override is not None else profile.airport_pickup_fee

    if destination_airport is not None:
        override = profile.airport_fee_overrides.get(destination_airport.code)
        total += override.dropoff if override is not None else profile.airport_dropoff_fee

    return round_cents(total)


def is_downtown(point: Coordinates, zones: Iterable[DowntownZone]) -> bool:
    return any(zone.contains(point) for zone in zones)


def is_business_hours(hour: int) -> bool:
    return 9 <= hour <= 17


def is_nightlife_hours(hour: int) -> bool:
    return hour >= 20 or hour <= 2


def downtown_time_factor(hour: int, modifiers: LocationModifiers) -> Decimal:
    if is_business_hours(hour):
        return modifiers.downtown_business_hours
    if is_nightlife_hours(hour):
        return modifiers.downtown_nightlife
    return Decimal("1")


def calculate_location_surcharge(
    profile: ServicePricingProfile,
    downtown: bool,
    hour: int,
    modifiers: LocationModifiers,
) -> Decimal:
    if not downtown or not profile.cbd_surcharge:
        return ZERO
    return round_cents(profile.cbd_surcharge * downtown_time_factor(hour, modifiers))


def calculate_long_ride_fee(profile: ServicePricingProfile, distance_miles: Decimal) -> Decimal:
    if distance_miles >= profile.long_ride_threshold_miles - _MILES_TOLERANCE:
        return round_cents(profile.long_ride_fee)
    return ZERO


def calculate_location_fees(
    profile: ServicePricingProfile,
    pickup: Coordinates,
    destination: Coordinates,
    pickup_airport: Optional[Airport],
    destination_airport: Optional[Airport],
    distance_miles: Decimal,
    hour: int,
    zones: Iterable[DowntownZone],
    modifiers: LocationModifiers,
) -> LocationFees:
    """Compute all location-dependent line items for one service."""
    zones = tuple(zones)
    downtown = is_downtown(pickup, zones) or is_downtown(destination, zones)

    return LocationFees(
        airport_fees=calculate_airport_fees(profile, pickup_airport, destination_airport),
        location_surcharge=calculate_location_surcharge(profile, downtown, hour, modifiers),
        long_ride_fee=calculate_long_ride_fee(profile, distance_miles),
        is_downtown=downtown,
    )
