"""
Geo Service
===========

Coordinate type and geographic helpers for the pricing engine.

Uses the haversine formula for great-circle distance between two points
on Earth's surface. Accurate enough for trip estimates (error < 0.5% for
distances under 100 km). Trip estimates scale the straight-line distance by
a road factor, since roads are ~30% longer than great-circle distance on
North American urban networks.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import NamedTuple

# Earth's mean radius in kilometres
EARTH_RADIUS_KM: float = 6371.0

KM_TO_MILES = Decimal("0.621371")


class Coordinates(NamedTuple):
    """A WGS84 point in decimal degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class TripEstimate:
    """Locally estimated trip distance and duration."""

    distance_km: float
    duration_min: float


def km_to_miles(km: Decimal) -> Decimal:
    return km * KM_TO_MILES


def haversine_distance(origin: Coordinates, target: Coordinates) -> float:
    """Great-circle distance in km between two WGS84 points."""
    phi1, phi2 = math.radians(origin.lat), math.radians(target.lat)
    half_dphi = math.radians(target.lat - origin.lat) / 2
    half_dlambda = math.radians(target.lng - origin.lng) / 2

    h = math.sin(half_dphi) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(half_dlambda) ** 2
    # Clamp rounding overshoot near antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, h)))


def estimate_trip(
    pickup: Coordinates,
    destination: Coordinates,
    road_factor: float = 1.3,
    avg_speed_kmh: float = 40.0,
) -> TripEstimate:
    """Estimate driving distance and duration without a routing service.

    The straight-line distance is multiplied by ``road_factor`` and the
    duration assumes ``avg_speed_kmh`` city driving with stops.
    """
    straight_line_km = haversine_distance(pickup, destination)
    road_km = straight_line_km * road_factor
    duration_min = (road_km / avg_speed_kmh) * 60.0

    return TripEstimate(
        distance_km=round(road_km, 2),
        duration_min=round(duration_min, 1),
    )
