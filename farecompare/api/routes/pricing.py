"""
Fare & Surge Pricing API routes
===============================

Endpoints for fare estimates, service comparison and pricing context.

  POST /api/v1/pricing/estimate          -- Itemized fare for one service
  POST /api/v1/pricing/compare           -- All services side by side
  GET  /api/v1/pricing/surge             -- Standalone surge classification
  GET  /api/v1/pricing/recommendations   -- Best-time-to-ride tips
  GET  /api/v1/pricing/airports/check    -- Airport surcharge check
  GET  /api/v1/pricing/services          -- Configured service rate cards
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from farecompare.api.deps import PricingEngineDep
from farecompare.api.schemas.pricing import (
    AirportCheckOut,
    AirportOut,
    CompareRequest,
    ComparisonOut,
    FareEstimateOut,
    FareEstimateRequest,
    PricingBreakdownOut,
    RecommendationsOut,
    ServiceListOut,
    ServiceProfileOut,
    ServiceQuoteOut,
    SurgeInfoOut,
    SurgeOut,
    TripRequestBase,
)
from farecompare.core.config import settings
from farecompare.core.money import to_decimal
from farecompare.integrations.airports import Airport
from farecompare.services.geoService import Coordinates, estimate_trip
from farecompare.services.pricingEngine import PricingInput
from farecompare.services.rideComparison import compare_services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pricing", tags=["Pricing"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _resolve_trip(body: TripRequestBase) -> tuple[Decimal, Decimal, bool]:
    """Return ``(distance_km, duration_min, estimated)`` for a request.

    Missing values are filled from a haversine estimate between the two
    coordinates; supplied values are never overwritten.
    """
    if body.distance_km is not None and body.duration_min is not None:
        return body.distance_km, body.duration_min, False

    estimate = estimate_trip(
        body.pickup.to_coordinates(),
        body.destination.to_coordinates(),
        road_factor=settings.road_distance_factor,
        avg_speed_kmh=settings.fallback_avg_speed_kmh,
    )
    logger.debug(
        "Estimated trip %s -> %s: %s km, %s min",
        body.pickup,
        body.destination,
        estimate.distance_km,
        estimate.duration_min,
    )

    distance_km = body.distance_km if body.distance_km is not None else to_decimal(estimate.distance_km)
    duration_min = body.duration_min if body.duration_min is not None else to_decimal(estimate.duration_min)
    return distance_km, duration_min, True


def _airport_out(airport: Optional[Airport]) -> Optional[AirportOut]:
    if airport is None:
        return None
    return AirportOut(
        code=airport.code,
        name=airport.name,
        city=airport.city,
        state=airport.state,
        lat=airport.coordinates.lat,
        lng=airport.coordinates.lng,
        timezone=airport.timezone,
    )


# ---------------------------------------------------------------------------
# POST /api/v1/pricing/estimate
# ---------------------------------------------------------------------------

@router.post(
    "/estimate",
    response_model=FareEstimateOut,
    summary="Itemized fare estimate for one service",
    description=(
        "Prices a trip for a single service: base, distance and time fees, "
        "booking and safety fees, airport, downtown and long-ride fees, then "
        "surge and traffic fees computed against the pre-surge subtotal.  "
        "The service minimum fare acts as a floor."
    ),
)
async def estimate_fare(body: FareEstimateRequest, engine: PricingEngineDep) -> FareEstimateOut:
    distance_km, duration_min, estimated = _resolve_trip(body)
    expected_duration_sec = (
        body.expected_duration_sec
        if body.expected_duration_sec is not None
        else duration_min * 60
    )

    try:
        result = engine.calculate_fare(
            PricingInput(
                service=body.service,
                pickup=body.pickup.to_coordinates(),
                destination=body.destination.to_coordinates(),
                distance_km=distance_km,
                duration_min=duration_min,
                timestamp=body.timestamp,
                observed_duration_sec=body.observed_duration_sec,
                expected_duration_sec=expected_duration_sec,
            )
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )

    return FareEstimateOut(
        service=body.service.lower(),
        price=result.price,
        surge_reason=result.surge_reason,
        confidence=result.breakdown.confidence,
        distance_km=distance_km,
        duration_min=duration_min,
        is_estimated_trip=estimated,
        breakdown=PricingBreakdownOut.model_validate(result.breakdown),
        debug=result.debug,
    )


# ---------------------------------------------------------------------------
# POST /api/v1/pricing/compare
# ---------------------------------------------------------------------------

@router.post(
    "/compare",
    response_model=ComparisonOut,
    summary="Compare fares across services",
    description=(
        "Prices the same trip for every requested service (all configured "
        "services by default) at one instant and returns the quotes sorted "
        "cheapest first, with surge info and best-time tips."
    ),
)
async def compare_fares(body: CompareRequest, engine: PricingEngineDep) -> ComparisonOut:
    distance_km, duration_min, _ = _resolve_trip(body)

    try:
        comparison = compare_services(
            engine,
            pickup=body.pickup.to_coordinates(),
            destination=body.destination.to_coordinates(),
            distance_km=distance_km,
            duration_min=duration_min,
            timestamp=body.timestamp,
            observed_duration_sec=body.observed_duration_sec,
            services=body.services,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )

    quotes_out = [
        ServiceQuoteOut(
            service=quote.service,
            label=quote.label,
            price=quote.result.price,
            surge_reason=quote.result.surge_reason,
            confidence=quote.result.breakdown.confidence,
            traffic_level=quote.traffic_level.value,
            breakdown=PricingBreakdownOut.model_validate(quote.result.breakdown),
        )
        for quote in comparison.quotes
    ]

    return ComparisonOut(
        timestamp=comparison.timestamp,
        distance_km=distance_km,
        duration_min=duration_min,
        quotes=quotes_out,
        cheapest_service=comparison.cheapest_service,
        savings=comparison.savings,
        surge=SurgeInfoOut.model_validate(comparison.surge),
        has_airport_surcharge=comparison.has_airport_surcharge,
        time_recommendations=comparison.time_recommendations,
    )


# ---------------------------------------------------------------------------
# GET /api/v1/pricing/surge
# ---------------------------------------------------------------------------

@router.get(
    "/surge",
    response_model=SurgeOut,
    summary="Current surge multiplier and reason for a route",
)
async def get_surge(
    engine: PricingEngineDep,
    pickup_lat: float = Query(description="Pickup latitude", ge=-90, le=90),
    pickup_lng: float = Query(description="Pickup longitude", ge=-180, le=180),
    destination_lat: float = Query(description="Destination latitude", ge=-90, le=90),
    destination_lng: float = Query(description="Destination longitude", ge=-180, le=180),
    timestamp: Optional[datetime] = Query(
        default=None,
        description="Request time (ISO 8601). Defaults to now.",
    ),
    service: Optional[str] = Query(
        default=None,
        description="Cap the multiplier at this service's max surge",
    ),
) -> SurgeOut:
    resolved = engine.resolve_timestamp(timestamp)

    try:
        surge = engine.calculate_surge(
            Coordinates(pickup_lat, pickup_lng),
            Coordinates(destination_lat, destination_lng),
            resolved,
            service,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )

    return SurgeOut(
        multiplier=surge.multiplier,
        reason=surge.reason.value,
        base_surge=surge.base_surge,
        time_slot=surge.time_slot,
        is_airport_route=surge.is_airport_route,
        timestamp=resolved,
    )


# ---------------------------------------------------------------------------
# GET /api/v1/pricing/recommendations
# ---------------------------------------------------------------------------

@router.get(
    "/recommendations",
    response_model=RecommendationsOut,
    summary="Best-time-to-ride tips",
)
async def get_recommendations(
    engine: PricingEngineDep,
    timestamp: Optional[datetime] = Query(
        default=None,
        description="Request time (ISO 8601). Defaults to now.",
    ),
) -> RecommendationsOut:
    resolved = engine.resolve_timestamp(timestamp)
    return RecommendationsOut(
        timestamp=resolved,
        recommendations=engine.get_best_time_recommendations(resolved),
    )


# ---------------------------------------------------------------------------
# GET /api/v1/pricing/airports/check
# ---------------------------------------------------------------------------

@router.get(
    "/airports/check",
    response_model=AirportCheckOut,
    summary="Whether a route picks up or drops off at an airport",
)
async def check_airports(
    engine: PricingEngineDep,
    pickup_lat: float = Query(description="Pickup latitude", ge=-90, le=90),
    pickup_lng: float = Query(description="Pickup longitude", ge=-180, le=180),
    destination_lat: float = Query(description="Destination latitude", ge=-90, le=90),
    destination_lng: float = Query(description="Destination longitude", ge=-180, le=180),
) -> AirportCheckOut:
    pickup_airport = engine.locate_airport(Coordinates(pickup_lat, pickup_lng))
    destination_airport = engine.locate_airport(Coordinates(destination_lat, destination_lng))

    return AirportCheckOut(
        has_airport_surcharge=pickup_airport is not None or destination_airport is not None,
        pickup_airport=_airport_out(pickup_airport),
        destination_airport=_airport_out(destination_airport),
    )


# ---------------------------------------------------------------------------
# GET /api/v1/pricing/services
# ---------------------------------------------------------------------------

@router.get(
    "/services",
    response_model=ServiceListOut,
    summary="Configured services and their rate cards",
)
async def list_services(engine: PricingEngineDep) -> ServiceListOut:
    config = engine.config
    return ServiceListOut(
        version=config.version,
        services=[
            ServiceProfileOut(
                service=service_id,
                **profile.model_dump(exclude={"airport_fee_overrides"}),
            )
            for service_id, profile in config.services.items()
        ],
    )
