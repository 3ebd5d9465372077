"""Ride Fare Compare API -- Main Application Entry Point

Creates the FastAPI application, configures logging and CORS middleware,
and registers the pricing routes under the /api/v1 prefix.

Run with::

    uvicorn farecompare.main:app --host 0.0.0.0 --port 8000 --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from farecompare.core.config import settings
from farecompare.services.pricingEngine import get_default_engine

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan: startup / shutdown hooks
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Startup:
      - Build the shared pricing engine so a malformed pricing table fails
        the boot instead of the first request.
    """
    engine = get_default_engine()
    logger.info(
        "Pricing engine ready: config %s, services %s",
        engine.config.version,
        ", ".join(engine.config.service_ids),
    )
    yield


# ---------------------------------------------------------------------------
# Application instance
# ---------------------------------------------------------------------------

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# CORS middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/health", tags=["Health"])
async def health():
    """Lightweight health check for load balancers and readiness probes."""
    return {"status": "ok", "version": settings.app_version}


# ---------------------------------------------------------------------------
# Register API route modules
# ---------------------------------------------------------------------------

from farecompare.api.routes import pricing  # noqa: E402

app.include_router(pricing.router, prefix=settings.api_v1_prefix)
