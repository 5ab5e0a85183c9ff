"""
PetCare Dashboard — Centralized configuration.

Loads all settings from .env and validates required keys.
This module is the foundation for the bot and the level simulator.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (one level up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Telegram
    TELEGRAM_BOT_TOKEN: str

    # Level simulator: seconds between two telemetry ticks
    LEVEL_TICK_SECONDS: float = 6.0

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("LEVEL_TICK_SECONDS", mode="before")
    @classmethod
    def parse_tick(cls, v: str | float) -> float:
        value = float(v)
        if value <= 0:
            raise ValueError("LEVEL_TICK_SECONDS must be positive")
        return value

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_log_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()


def _load_settings() -> Settings:
    """Load settings from environment, validating required keys."""
    token = os.getenv("TELEGRAM_BOT_TOKEN", "")

    if not token or token.startswith("your-"):
        print("ERROR: TELEGRAM_BOT_TOKEN is missing or not set in .env", file=sys.stderr)
        sys.exit(1)

    return Settings(
        TELEGRAM_BOT_TOKEN=token,
        LEVEL_TICK_SECONDS=os.getenv("LEVEL_TICK_SECONDS", "6.0"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    )


# Singleton — imported by the bot as:
#   from src.config import settings
settings = _load_settings()
