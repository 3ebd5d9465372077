"""
Pydantic v2 schemas for the Pricing API.

Covers:
- Single-service fare estimates with a full itemized breakdown
- Side-by-side service comparison
- Standalone surge, best-time recommendations and airport checks
- The configured service rate cards
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from farecompare.services.geoService import Coordinates


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class CoordinatesIn(BaseModel):
    lat: float = Field(description="Latitude in decimal degrees", ge=-90, le=90)
    lng: float = Field(description="Longitude in decimal degrees", ge=-180, le=180)

    def to_coordinates(self) -> Coordinates:
        return Coordinates(lat=self.lat, lng=self.lng)


class TripRequestBase(BaseModel):
    """Fields shared by the estimate and compare requests."""

    pickup: CoordinatesIn
    destination: CoordinatesIn
    distance_km: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Driving distance in km. Estimated from the coordinates if omitted.",
    )
    duration_min: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Expected trip duration in minutes. Estimated if omitted.",
    )
    timestamp: Optional[datetime] = Field(
        default=None,
        description="Request time (ISO 8601). Defaults to now in the pricing timezone.",
    )
    observed_duration_sec: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Live-traffic trip duration in seconds",
    )


class FareEstimateRequest(TripRequestBase):
    """Body of ``POST /pricing/estimate``."""

    service: str = Field(description="Service id, e.g. 'premium', 'budget' or 'taxi'")
    expected_duration_sec: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Free-flow trip duration in seconds. Defaults to duration_min.",
    )


class CompareRequest(TripRequestBase):
    """Body of ``POST /pricing/compare``."""

    services: Optional[list[str]] = Field(
        default=None,
        min_length=1,
        description="Service ids to compare. All configured services if omitted.",
    )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class PricingBreakdownOut(BaseModel):
    """Itemized fare; ``subtotal`` is the sum of the first eight items."""

    model_config = ConfigDict(from_attributes=True)

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
    surge_fee: Decimal = Field(description="subtotal x (surge_multiplier - 1)")
    traffic_multiplier: Decimal
    traffic_fee: Decimal = Field(description="subtotal x (traffic_multiplier - 1)")

    final_fare: Decimal
    applied_min_fare: bool = Field(description="True when the minimum fare set the price")
    confidence: Decimal = Field(description="Estimate confidence in [0.50, 0.90]")


class FareEstimateOut(BaseModel):
    service: str
    price: Decimal
    surge_reason: str
    confidence: Decimal
    distance_km: Decimal
    duration_min: Decimal
    is_estimated_trip: bool = Field(
        description="True when distance or duration was estimated from the coordinates",
    )
    breakdown: PricingBreakdownOut
    debug: Optional[dict[str, Any]] = None
    currency: str = "USD"


class SurgeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    multiplier: Decimal
    reason: str
    base_surge: Decimal = Field(description="Half-hour slot multiplier before the airport delta")
    time_slot: str = Field(description="Half-hour slot key, e.g. '08:00-08:30'")
    is_airport_route: bool
    timestamp: datetime


class SurgeInfoOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    multiplier: Decimal
    reason: str
    is_active: bool = Field(description="True when the multiplier exceeds 1.05")


class ServiceQuoteOut(BaseModel):
    service: str
    label: str
    price: Decimal
    surge_reason: str
    confidence: Decimal
    traffic_level: str
    breakdown: PricingBreakdownOut


class ComparisonOut(BaseModel):
    timestamp: datetime
    distance_km: Decimal
    duration_min: Decimal
    quotes: list[ServiceQuoteOut] = Field(description="Quotes sorted cheapest first")
    cheapest_service: str
    savings: Decimal = Field(description="Most expensive minus cheapest price")
    surge: SurgeInfoOut
    has_airport_surcharge: bool
    time_recommendations: list[str]
    currency: str = "USD"


class RecommendationsOut(BaseModel):
    timestamp: datetime
    recommendations: list[str]


class AirportOut(BaseModel):
    code: str
    name: str
    city: str
    state: str
    lat: float
    lng: float
    timezone: str


class AirportCheckOut(BaseModel):
    has_airport_surcharge: bool
    pickup_airport: Optional[AirportOut] = None
    destination_airport: Optional[AirportOut] = None


class ServiceProfileOut(BaseModel):
    """Public view of a service rate card."""

    model_config = ConfigDict(from_attributes=True)

    service: str
    label: str
    base_fare: Decimal
    per_mile: Decimal
    per_minute: Decimal
    booking_fee: Decimal
    safety_fee: Decimal
    min_fare: Decimal
    airport_pickup_fee: Decimal
    airport_dropoff_fee: Decimal
    cbd_surcharge: Decimal
    long_ride_threshold_miles: Decimal
    long_ride_fee: Decimal
    max_surge: Decimal


class ServiceListOut(BaseModel):
    version: str
    services: list[ServiceProfileOut]
