"""
Application configuration using Pydantic Settings.

Values are read from environment variables prefixed with ``PARKING_`` (e.g.
``PARKING_INITIAL_SLOTS=20``) or from a local ``.env`` file.
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_prefix="PARKING_", env_file=".env", extra="ignore")

    # API metadata
    app_title: str = "Parking Lot API"
    app_version: str = "1.0.0"

    # Lot size at startup; 0 leaves the lot empty until initialized via the API
    initial_slots: int = 0

    log_level: str = "INFO"

    # uvicorn bind address
    host: str = "127.0.0.1"
    port: int = 8000


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Send log records of ``level`` and above to stdout with timestamps."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stdout,
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(level.upper())
