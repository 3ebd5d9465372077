"""
Shared FastAPI dependencies for the fare comparison backend.

Route handlers receive the process-wide ``PricingEngine`` through
``PricingEngineDep``.  Tests swap it out with
``app.dependency_overrides[get_pricing_engine]``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from farecompare.services.pricingEngine import PricingEngine, get_default_engine


def get_pricing_engine() -> PricingEngine:
    """Return the shared engine built from the application settings.

    Usage in a route::

        @router.get("/surge")
        async def get_surge(engine: PricingEngineDep):
            ...
    """
    return get_default_engine()


PricingEngineDep = Annotated[PricingEngine, Depends(get_pricing_engine)]
