"""
Unit tests for the location fee calculator.

Tests independent airport pickup/dropoff fees and per-airport overrides,
the downtown surcharge time-of-day factors and the long-ride threshold.
"""

from decimal import Decimal

import pytest

from farecompare.core.money import to_decimal
from farecompare.integrations.airports import AIRPORTS
from farecompare.models.pricing import AirportFeeOverride
from farecompare.services.geoService import Coordinates, km_to_miles
from farecompare.services.locationFees import (
    calculate_airport_fees,
    calculate_location_fees,
    calculate_location_surcharge,
    calculate_long_ride_fee,
    is_downtown,
)

SFO = AIRPORTS["SFO"]
OAK = AIRPORTS["OAK"]


@pytest.fixture
def premium(pricing_config):
    return pricing_config.services["premium"]


class TestAirportFees:
    def test_pickup_only(self, premium):
        assert calculate_airport_fees(premium, SFO, None) == Decimal("5.50")

    def test_dropoff_only(self, premium):
        assert calculate_airport_fees(premium, None, OAK) == Decimal("3.25")

    def test_airport_to_airport_pays_both(self, premium):
        assert calculate_airport_fees(premium, SFO, OAK) == Decimal("8.75")

    def test_no_airport(self, premium):
        assert calculate_airport_fees(premium, None, None) == Decimal("0.00")

    def test_override_replaces_generic_fee_for_that_airport(self, premium):
        profile = premium.model_copy(
            update={
                "airport_fee_overrides": {
                    "SFO": AirportFeeOverride(pickup=Decimal("7.00"), dropoff=Decimal("4.00")),
                }
            }
        )

        assert calculate_airport_fees(profile, SFO, None) == Decimal("7.00")
        assert calculate_airport_fees(profile, OAK, SFO) == Decimal("9.50")


class TestDowntown:
    def test_zone_bounds_are_inclusive(self, pricing_config):
        zones = pricing_config.downtown_zones
        assert is_downtown(Coordinates(37.785, -122.415), zones) is True
        assert is_downtown(Coordinates(37.79, -122.405), zones) is True
        assert is_downtown(Coordinates(37.75, -122.45), zones) is False

    def test_downtown_san_jose(self, pricing_config):
        assert is_downtown(Coordinates(37.335, -121.885), pricing_config.downtown_zones) is True

    @pytest.mark.parametrize(
        "hour, expected",
        [
            (10, "1.75"),  # business hours x0.5
            (17, "1.75"),
            (19, "3.50"),  # full value
            (22, "4.20"),  # nightlife x1.2
            (1, "4.20"),
            (6, "3.50"),
        ],
    )
    def test_time_of_day_factor(self, premium, pricing_config, hour, expected):
        surcharge = calculate_location_surcharge(premium, True, hour, pricing_config.location_modifiers)
        assert surcharge == Decimal(expected)

    def test_no_surcharge_outside_downtown(self, premium, pricing_config):
        assert calculate_location_surcharge(premium, False, 22, pricing_config.location_modifiers) == Decimal("0")

    def test_surcharge_applied_once_for_two_downtown_endpoints(self, premium, pricing_config):
        fees = calculate_location_fees(
            premium,
            Coordinates(37.79, -122.405),
            Coordinates(37.80, -122.40),
            None,
            None,
            Decimal("1"),
            19,
            pricing_config.downtown_zones,
            pricing_config.location_modifiers,
        )
        assert fees.location_surcharge == Decimal("3.50")
        assert fees.is_downtown is True


class TestLongRideFee:
    def test_below_threshold(self, premium):
        assert calculate_long_ride_fee(premium, Decimal("24.99")) == Decimal("0.00")

    def test_at_threshold(self, premium):
        assert calculate_long_ride_fee(premium, Decimal("25")) == Decimal("5.50")

    def test_km_derived_from_threshold_miles_qualifies(self, premium):
        distance_km = Decimal("25") / Decimal("0.621371")
        assert calculate_long_ride_fee(premium, km_to_miles(distance_km)) == Decimal("5.50")

    def test_float_km_derived_from_threshold_miles_qualifies(self, premium):
        distance_km = to_decimal(25 / 0.621371)
        assert calculate_long_ride_fee(premium, km_to_miles(distance_km)) == Decimal("5.50")

    @pytest.mark.parametrize("miles", ["24.99996", "24.9999999"])
    def test_just_below_threshold_pays_nothing(self, premium, miles):
        distance_km = Decimal(miles) / Decimal("0.621371")
        assert calculate_long_ride_fee(premium, km_to_miles(distance_km)) == Decimal("0.00")

    def test_taxi_threshold_is_thirty_miles(self, pricing_config):
        taxi = pricing_config.services["taxi"]
        assert calculate_long_ride_fee(taxi, Decimal("29")) == Decimal("0.00")
        assert calculate_long_ride_fee(taxi, Decimal("30")) == Decimal("5.00")
