"""
Shared pytest fixtures for the pricing engine tests.

Provides the packaged pricing table, a mock airport locator and an engine
pinned to the Pacific timezone, so fare outcomes do not depend on the
machine running the suite.
"""

from decimal import Decimal
from typing import Optional
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest

from farecompare.integrations.airports import AIRPORTS, Airport
from farecompare.models.pricing import PricingConfig, load_pricing_config
from farecompare.services.geoService import Coordinates
from farecompare.services.pricingEngine import PricingEngine

PACIFIC = ZoneInfo("America/Los_Angeles")


# ---------------------------------------------------------------------------
# Pricing table
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def pricing_config() -> PricingConfig:
    """The packaged pricing table, loaded once per session."""
    return load_pricing_config()


@pytest.fixture
def high_surge_config(pricing_config: PricingConfig) -> PricingConfig:
    """Packaged table with a 2.5x Monday 14:00 slot and a 3.0 premium cap."""
    premium = pricing_config.services["premium"].model_copy(update={"max_surge": Decimal("3.0")})
    schedule = pricing_config.surge_schedule.model_copy(
        update={"weekday": {**pricing_config.surge_schedule.weekday, "14:00-14:30": Decimal("2.5")}}
    )
    return pricing_config.model_copy(
        update={
            "services": {**pricing_config.services, "premium": premium},
            "surge_schedule": schedule,
        }
    )


# ---------------------------------------------------------------------------
# Airport locator mock
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_locator() -> MagicMock:
    """Locator that resolves nothing by default.

    Tests route specific points to airports with ``airport_points``.
    """
    locator = MagicMock()
    locator.locate.return_value = None
    return locator


@pytest.fixture
def airport_points(mock_locator: MagicMock):
    """Configure ``mock_locator`` from a ``{Coordinates: airport_code}`` map."""

    def _configure(points: dict[Coordinates, str]) -> MagicMock:
        def _locate(point: Coordinates) -> Optional[Airport]:
            code = points.get(point)
            return AIRPORTS[code] if code else None

        mock_locator.locate.side_effect = _locate
        return mock_locator

    return _configure


# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------


@pytest.fixture
def engine(pricing_config: PricingConfig, mock_locator: MagicMock) -> PricingEngine:
    return PricingEngine(config=pricing_config, locator=mock_locator, tz=PACIFIC)


@pytest.fixture
def debug_engine(pricing_config: PricingConfig, mock_locator: MagicMock) -> PricingEngine:
    return PricingEngine(config=pricing_config, locator=mock_locator, tz=PACIFIC, debug=True)


# ---------------------------------------------------------------------------
# Coordinates
# ---------------------------------------------------------------------------


@pytest.fixture
def regular_pickup() -> Coordinates:
    """A residential San Francisco point (no airport, outside downtown)."""
    return Coordinates(37.75, -122.45)


@pytest.fixture
def regular_destination() -> Coordinates:
    return Coordinates(37.78, -122.48)


@pytest.fixture
def sfo() -> Coordinates:
    return AIRPORTS["SFO"].coordinates


@pytest.fixture
def oak() -> Coordinates:
    return AIRPORTS["OAK"].coordinates


@pytest.fixture
def downtown_sf() -> Coordinates:
    """Inside the SF Financial District zone."""
    return Coordinates(37.79, -122.405)
