"""
Application configuration loaded from environment variables with sensible
defaults for local development.

All settings are validated at startup via Pydantic ``BaseSettings``.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the fare comparison backend."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Application --
    app_name: str = "Ride Fare Compare API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # -- API --
    api_v1_prefix: str = "/api/v1"

    # -- Pricing --
    # Path to a JSON pricing table; the packaged table is used when unset.
    pricing_config_path: Optional[str] = None
    # Zone used for "now" and for converting aware timestamps before the
    # hour / day-of-week classification.
    pricing_timezone: str = "America/Los_Angeles"
    airport_tolerance_deg: float = 0.05

    # -- Trip estimation (used when a request omits distance/duration) --
    road_distance_factor: float = 1.3
    fallback_avg_speed_kmh: float = 40.0


settings = Settings()
