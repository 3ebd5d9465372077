"""
Unit tests for the surge classifier.

Tests half-hour slot keys, exact-match schedule lookup, reason priority,
the additive airport delta and the per-service cap.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from farecompare.integrations.airports import AIRPORTS
from farecompare.services.surgeClassifier import (
    SurgeReason,
    classify_surge,
    classify_surge_reason,
    is_late_night,
    is_peak_commute,
    is_weekend,
    lookup_base_surge,
    time_slot_key,
)

SFO = AIRPORTS["SFO"]
NO_CAP = Decimal("3.0")


def _classify(config, timestamp, pickup_airport=None, destination_airport=None, max_surge=NO_CAP):
    return classify_surge(
        config.surge_schedule,
        config.location_modifiers,
        timestamp,
        pickup_airport,
        destination_airport,
        max_surge,
    )


# ---------------------------------------------------------------------------
# Slot keys
# ---------------------------------------------------------------------------


class TestTimeSlotKey:
    @pytest.mark.parametrize(
        "hour, minute, expected",
        [
            (8, 0, "08:00-08:30"),
            (8, 29, "08:00-08:30"),
            (8, 30, "08:30-09:00"),
            (0, 5, "00:00-00:30"),
            (23, 45, "23:30-00:00"),
        ],
    )
    def test_slot_key(self, hour, minute, expected):
        assert time_slot_key(hour, minute) == expected


class TestLookupBaseSurge:
    def test_weekday_slot_boundary(self, pricing_config):
        assert lookup_base_surge(pricing_config.surge_schedule, datetime(2024, 1, 15, 8, 29)) == (
            "08:00-08:30",
            Decimal("1.25"),
        )
        assert lookup_base_surge(pricing_config.surge_schedule, datetime(2024, 1, 15, 8, 30)) == (
            "08:30-09:00",
            Decimal("1.20"),
        )

    def test_wide_range_keys_never_match(self, pricing_config):
        # "10:00-16:30" exists in the table but is not a half-hour key
        _, surge = lookup_base_surge(pricing_config.surge_schedule, datetime(2024, 1, 15, 12, 0))
        assert surge == Decimal("1.0")

    def test_late_night_falls_back_to_default(self, pricing_config):
        _, surge = lookup_base_surge(pricing_config.surge_schedule, datetime(2024, 1, 15, 2, 0))
        assert surge == Decimal("1.0")

    def test_weekend_table_has_no_half_hour_keys(self, pricing_config):
        # Saturday evening
        _, surge = lookup_base_surge(pricing_config.surge_schedule, datetime(2024, 1, 20, 18, 0))
        assert surge == Decimal("1.0")


# ---------------------------------------------------------------------------
# Bands
# ---------------------------------------------------------------------------


class TestTimeBands:
    @pytest.mark.parametrize("hour", [23, 0, 3, 5])
    def test_late_night_hours(self, hour):
        assert is_late_night(hour) is True

    @pytest.mark.parametrize("hour", [6, 12, 22])
    def test_not_late_night(self, hour):
        assert is_late_night(hour) is False

    def test_peak_commute_weekday_only(self):
        assert is_peak_commute(8, weekend=False) is True
        assert is_peak_commute(19, weekend=False) is True
        assert is_peak_commute(8, weekend=True) is False
        assert is_peak_commute(12, weekend=False) is False

    def test_saturday_and_sunday_are_weekend(self):
        assert is_weekend(datetime(2024, 1, 20)) is True
        assert is_weekend(datetime(2024, 1, 21)) is True
        assert is_weekend(datetime(2024, 1, 19)) is False


class TestClassifySurgeReason:
    def test_airport_reasons_take_priority(self):
        assert classify_surge_reason(True, True, False) is SurgeReason.LATE_NIGHT_AIRPORT
        assert classify_surge_reason(True, False, True) is SurgeReason.PEAK_AIRPORT
        assert classify_surge_reason(True, False, False) is SurgeReason.AIRPORT_ROUTE

    def test_non_airport_reasons(self):
        assert classify_surge_reason(False, True, False) is SurgeReason.LATE_NIGHT
        assert classify_surge_reason(False, False, True) is SurgeReason.RUSH_HOUR
        assert classify_surge_reason(False, False, False) is SurgeReason.STANDARD


# ---------------------------------------------------------------------------
# Full classification
# ---------------------------------------------------------------------------


class TestClassifySurge:
    def test_peak_airport_adds_delta(self, pricing_config):
        surge = _classify(pricing_config, datetime(2024, 1, 15, 8, 15), pickup_airport=SFO)

        assert surge.multiplier == Decimal("1.37")
        assert surge.reason is SurgeReason.PEAK_AIRPORT
        assert surge.base_surge == Decimal("1.25")
        assert surge.is_airport_route is True

    def test_late_night_airport(self, pricing_config):
        surge = _classify(pricing_config, datetime(2024, 1, 15, 2, 0), destination_airport=SFO)

        assert surge.multiplier == Decimal("1.12")
        assert surge.reason is SurgeReason.LATE_NIGHT_AIRPORT

    def test_late_night_reason_with_default_multiplier(self, pricing_config):
        surge = _classify(pricing_config, datetime(2024, 1, 15, 2, 0))

        assert surge.multiplier == Decimal("1.0")
        assert surge.reason is SurgeReason.LATE_NIGHT

    def test_cap_applies_after_delta(self, pricing_config):
        surge = _classify(
            pricing_config,
            datetime(2024, 1, 15, 18, 0),
            pickup_airport=SFO,
            max_surge=Decimal("1.4"),
        )
        assert surge.multiplier == Decimal("1.4")

    def test_weekend_rush_hour_is_standard(self, pricing_config):
        surge = _classify(pricing_config, datetime(2024, 1, 20, 8, 15))

        assert surge.reason is SurgeReason.STANDARD
        assert surge.multiplier == Decimal("1.0")

    def test_multiplier_never_exceeds_cap(self, pricing_config):
        cap = Decimal("1.1")
        for hour in range(24):
            surge = _classify(pricing_config, datetime(2024, 1, 15, hour, 0), pickup_airport=SFO, max_surge=cap)
            assert surge.multiplier <= cap
