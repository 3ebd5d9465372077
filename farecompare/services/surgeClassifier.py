"""
Surge Classifier
================

Determines the surge multiplier and a human-readable reason for a trip.

Two independent mechanisms run side by side:

- **Slot lookup**: the timestamp is mapped to its half-hour slot key
  (``"08:00-08:30"``) and looked up *exactly* in the weekday or weekend
  schedule.  Missing slots fall back to 1.0.
- **Band classification**: broad time bands (late night, peak commute)
  plus airport adjacency choose the reason and an additive airport delta.

The two can disagree: a 02:00 request may read "Late night premium" while
its multiplier is the 1.0 default because no exact slot entry exists.

The final multiplier is ``min(base_surge + delta, max_surge)``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from farecompare.integrations.airports import Airport
from farecompare.models.pricing import LocationModifiers, SurgeSchedule

DEFAULT_SURGE = Decimal("1.0")
NO_DELTA = Decimal("0")

# Day-of-week (Monday=0) values treated as weekend
WEEKEND_DAYS: frozenset[int] = frozenset({5, 6})


class SurgeReason(str, enum.Enum):
    """Reason shown next to the surge multiplier, in priority order."""

    LATE_NIGHT_AIRPORT = "Late night airport premium"
    PEAK_AIRPORT = "Peak hours airport demand"
    AIRPORT_ROUTE = "Airport route"
    LATE_NIGHT = "Late night premium"
    RUSH_HOUR = "Rush hour demand"
    STANDARD = "Standard pricing"


@dataclass(frozen=True)
class SurgeAssessment:
    """Result of the surge classification for one request."""

    multiplier: Decimal
    reason: SurgeReason
    base_surge: Decimal
    time_slot: str
    is_airport_route: bool


# ---------------------------------------------------------------------------
# Slot lookup
# ---------------------------------------------------------------------------

def is_weekend(timestamp: datetime) -> bool:
    return timestamp.weekday() in WEEKEND_DAYS


def time_slot_key(hour: int, minute: int) -> str:
    """Return the half-hour slot key covering ``hour:minute``.

    >>> time_slot_key(8, 15)
    '08:00-08:30'
    >>> time_slot_key(23, 45)
    '23:30-00:00'
    """
    if minute < 30:
        return f"{hour:02d}:00-{hour:02d}:30"
    return f"{hour:02d}:30-{(hour + 1) % 24:02d}:00"


def lookup_base_surge(schedule: SurgeSchedule, timestamp: datetime) -> tuple[str, Decimal]:
    """Exact-match slot lookup.  Returns ``(slot_key, multiplier)``."""
    table = schedule.weekend if is_weekend(timestamp) else schedule.weekday
    slot = time_slot_key(timestamp.hour, timestamp.minute)
    return slot, table.get(slot, DEFAULT_SURGE)


# ---------------------------------------------------------------------------
# Band classification
# ---------------------------------------------------------------------------

def is_late_night(hour: int) -> bool:
    return hour >= 23 or hour <= 5


def is_peak_commute(hour: int, weekend: bool) -> bool:
    return not weekend and (7 <= hour <= 9 or 17 <= hour <= 19)


def classify_surge_reason(
    is_airport_route: bool,
    late_night: bool,
    peak_commute: bool,
) -> SurgeReason:
    if is_airport_route:
        if late_night:
            return SurgeReason.LATE_NIGHT_AIRPORT
        if peak_commute:
            return SurgeReason.PEAK_AIRPORT
        return SurgeReason.AIRPORT_ROUTE
    if late_night:
        return SurgeReason.LATE_NIGHT
    if peak_commute:
        return SurgeReason.RUSH_HOUR
    return SurgeReason.STANDARD


def airport_delta(reason: SurgeReason, modifiers: LocationModifiers) -> Decimal:
    """Additive surge delta contributed by the airport modifiers."""
    if reason is SurgeReason.LATE_NIGHT_AIRPORT:
        return modifiers.airport_late_night - 1
    if reason is SurgeReason.PEAK_AIRPORT:
        return modifiers.airport_peak_hours - 1
    return NO_DELTA


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def classify_surge(
    schedule: SurgeSchedule,
    modifiers: LocationModifiers,
    timestamp: datetime,
    pickup_airport: Optional[Airport],
    destination_airport: Optional[Airport],
    max_surge: Decimal,
) -> SurgeAssessment:
    """Classify surge for a trip whose endpoints are already resolved.

    Args:
        schedule: Weekday/weekend half-hour surge tables.
        modifiers: Airport late-night / peak-hour modifiers.
        timestamp: Request time in the pricing timezone.
        pickup_airport: Airport at the pickup point, if any.
        destination_airport: Airport at the destination, if any.
        max_surge: Cap applied to the combined multiplier.

    Returns:
        SurgeAssessment with the capped multiplier and its reason.
    """
    slot, base_surge = lookup_base_surge(schedule, timestamp)

    hour = timestamp.hour
    is_airport_route = pickup_airport is not None or destination_airport is not None
    reason = classify_surge_reason(
        is_airport_route,
        is_late_night(hour),
        is_peak_commute(hour, is_weekend(timestamp)),
    )

    multiplier = min(base_surge + airport_delta(reason, modifiers), max_surge)

    return SurgeAssessment(
        multiplier=multiplier,
        reason=reason,
        base_surge=base_surge,
        time_slot=slot,
        is_airport_route=is_airport_route,
    )
