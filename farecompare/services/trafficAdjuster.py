"""
Traffic Adjuster
================

Maps the ratio of observed to expected (free-flow) trip duration to a
congestion multiplier:

    ratio <= 1.1          light     (x1.0)
    1.1 < ratio <= 1.3    moderate  (x1.1)
    1.3 < ratio <= 1.6    heavy     (x1.25)
    ratio > 1.6           severe    (x1.4)

Missing, non-positive or non-finite durations mean "no traffic data" and
yield 1.0.
The traffic fee is charged against the pre-surge subtotal, in parallel
with the surge fee rather than compounded on top of it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from farecompare.core.money import Number, to_decimal
from farecompare.models.pricing import TrafficModifiers

LIGHT_MAX_RATIO = Decimal("1.1")
MODERATE_MAX_RATIO = Decimal("1.3")
HEAVY_MAX_RATIO = Decimal("1.6")


class TrafficBand(str, enum.Enum):
    NO_DATA = "no_data"
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"
    SEVERE = "severe"


_BAND_REASONS: dict[TrafficBand, str] = {
    TrafficBand.NO_DATA: "No traffic data",
    TrafficBand.LIGHT: "Normal traffic conditions",
    TrafficBand.MODERATE: "Moderate traffic",
    TrafficBand.HEAVY: "Heavy traffic congestion",
    TrafficBand.SEVERE: "Severe traffic congestion",
}


@dataclass(frozen=True)
class TrafficAssessment:
    multiplier: Decimal
    band: TrafficBand
    ratio: Optional[Decimal] = None

    @property
    def reason(self) -> str:
        return _BAND_REASONS[self.band]

    @property
    def is_congested(self) -> bool:
        """True for the heavy and severe bands (ratio above 1.3)."""
        return self.band in (TrafficBand.HEAVY, TrafficBand.SEVERE)


def classify_traffic_ratio(ratio: Decimal) -> TrafficBand:
    if ratio <= LIGHT_MAX_RATIO:
        return TrafficBand.LIGHT
    if ratio <= MODERATE_MAX_RATIO:
        return TrafficBand.MODERATE
    if ratio <= HEAVY_MAX_RATIO:
        return TrafficBand.HEAVY
    return TrafficBand.SEVERE


def assess_traffic(
    observed_duration_sec: Optional[Number],
    expected_duration_sec: Optional[Number],
    modifiers: TrafficModifiers,
) -> TrafficAssessment:
    """Derive the congestion multiplier from observed vs expected duration."""
    if observed_duration_sec is None or expected_duration_sec is None:
        return TrafficAssessment(multiplier=Decimal("1.0"), band=TrafficBand.NO_DATA)

    observed = to_decimal(observed_duration_sec)
    expected = to_decimal(expected_duration_sec)
    if not (observed.is_finite() and expected.is_finite()) or observed <= 0 or expected <= 0:
        return TrafficAssessment(multiplier=Decimal("1.0"), band=TrafficBand.NO_DATA)

    ratio = observed / expected
    band = classify_traffic_ratio(ratio)
    multiplier = {
        TrafficBand.LIGHT: modifiers.light,
        TrafficBand.MODERATE: modifiers.moderate,
        TrafficBand.HEAVY: modifiers.heavy,
        TrafficBand.SEVERE: modifiers.severe,
    }[band]

    return TrafficAssessment(multiplier=multiplier, band=band, ratio=ratio)
