"""
Pydantic models for the static pricing table: per-service profiles, the
half-hour surge schedule, location and traffic modifiers, and downtown
zones.

Every model is frozen.  The table is validated once when a
``PricingEngine`` is built and never mutated at request time.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Annotated, Mapping, Optional, TypeVar, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from farecompare.services.geoService import Coordinates

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "data" / "pricing_config.json"

_V = TypeVar("_V")


def _read_only(value: Mapping[str, _V]) -> Mapping[str, _V]:
    return MappingProxyType(dict(value))


# Frozen models block reassignment only; table mappings are wrapped so the
# entries cannot be changed in place either.
ReadOnlyMap = Annotated[Mapping[str, _V], AfterValidator(_read_only)]


class AirportFeeOverride(BaseModel):
    """Per-airport pickup/dropoff fees that replace the generic airport fees."""

    model_config = ConfigDict(frozen=True)

    pickup: Decimal = Decimal("0")
    dropoff: Decimal = Decimal("0")


class ServicePricingProfile(BaseModel):
    """Rate card for a single mobility service."""

    model_config = ConfigDict(frozen=True)

    label: str
    base_fare: Decimal = Field(ge=0)
    per_mile: Decimal = Field(ge=0)
    per_minute: Decimal = Field(ge=0)
    booking_fee: Decimal = Field(default=Decimal("0"), ge=0)
    safety_fee: Decimal = Field(default=Decimal("0"), ge=0)
    min_fare: Decimal = Field(ge=0)

    # Airports
    airport_pickup_fee: Decimal = Field(default=Decimal("0"), ge=0)
    airport_dropoff_fee: Decimal = Field(default=Decimal("0"), ge=0)
    airport_fee_overrides: ReadOnlyMap[AirportFeeOverride] = Field(
        default_factory=dict,
        validate_default=True,
        description="Fees keyed by airport code, consulted before the generic fees",
    )

    # Downtown / long ride
    cbd_surcharge: Decimal = Field(default=Decimal("0"), ge=0)
    long_ride_threshold_miles: Decimal = Field(gt=0)
    long_ride_fee: Decimal = Field(default=Decimal("0"), ge=0)

    max_surge: Decimal = Field(ge=1)


class SurgeSchedule(BaseModel):
    """Surge multipliers keyed by exact half-hour slot (``"08:00-08:30"``)."""

    model_config = ConfigDict(frozen=True)

    weekday: ReadOnlyMap[Decimal] = Field(default_factory=dict, validate_default=True)
    weekend: ReadOnlyMap[Decimal] = Field(default_factory=dict, validate_default=True)


class LocationModifiers(BaseModel):
    model_config = ConfigDict(frozen=True)

    airport_late_night: Decimal = Decimal("1.0")
    airport_peak_hours: Decimal = Decimal("1.0")
    downtown_business_hours: Decimal = Decimal("1.0")
    downtown_nightlife: Decimal = Decimal("1.0")


class TrafficModifiers(BaseModel):
    model_config = ConfigDict(frozen=True)

    light: Decimal = Decimal("1.0")
    moderate: Decimal = Decimal("1.1")
    heavy: Decimal = Decimal("1.25")
    severe: Decimal = Decimal("1.4")


class DowntownZone(BaseModel):
    """Axis-aligned bounding box around a metro core (bounds inclusive)."""

    model_config = ConfigDict(frozen=True)

    name: str
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, point: Coordinates) -> bool:
        return (
            self.min_lat <= point.lat <= self.max_lat
            and self.min_lng <= point.lng <= self.max_lng
        )


class PricingConfig(BaseModel):
    """The complete, immutable pricing table."""

    model_config = ConfigDict(frozen=True)

    version: str = "unversioned"
    default_max_surge: Decimal = Decimal("3.0")
    services: ReadOnlyMap[ServicePricingProfile]
    surge_schedule: SurgeSchedule = Field(default_factory=SurgeSchedule)
    location_modifiers: LocationModifiers = Field(default_factory=LocationModifiers)
    traffic_modifiers: TrafficModifiers = Field(default_factory=TrafficModifiers)
    downtown_zones: tuple[DowntownZone, ...] = ()

    def get_service(self, service: str) -> Optional[ServicePricingProfile]:
        """Look up a profile by service id (case-insensitive)."""
        return self.services.get(service.lower())

    @property
    def service_ids(self) -> list[str]:
        return list(self.services)


def load_pricing_config(path: Union[str, Path, None] = None) -> PricingConfig:
    """Load and validate the pricing table from JSON.

    Args:
        path: Optional path to a JSON table.  Defaults to the packaged
            ``data/pricing_config.json``.

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the table is malformed.
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    raw = json.loads(config_path.read_text(encoding="utf-8"))
    # Service ids are matched case-insensitively
    raw["services"] = {key.lower(): value for key, value in raw.get("services", {}).items()}
    config = PricingConfig.model_validate(raw)

    logger.info(
        "Loaded pricing config %s from %s (%d services)",
        config.version,
        config_path,
        len(config.services),
    )
    return config
