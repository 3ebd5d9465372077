"""
E2E test fixtures for the pricing API.

- httpx AsyncClient wired via ASGI transport (no network needed)
- The shared pricing engine replaced by one pinned to the packaged table,
  the static airport locator and the Pacific timezone
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from zoneinfo import ZoneInfo

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from farecompare.api.deps import get_pricing_engine
from farecompare.integrations.airports import StaticAirportLocator
from farecompare.main import app
from farecompare.services.pricingEngine import PricingEngine


@pytest_asyncio.fixture
async def client(pricing_config) -> AsyncGenerator[AsyncClient, None]:
    """httpx AsyncClient connected to the app via ASGI transport."""
    engine = PricingEngine(
        config=pricing_config,
        locator=StaticAirportLocator(),
        tz=ZoneInfo("America/Los_Angeles"),
    )
    app.dependency_overrides[get_pricing_engine] = lambda: engine

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
