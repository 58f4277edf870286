"""
Posture Guardian — Centralized configuration.

Loads all settings from .env and validates them.
Reminder cadence and work hours are user settings persisted in the
database (see src.data.stores); this module only covers how the process
itself is wired up.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

# Load .env from project root (two levels up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class AppConfig(BaseModel):
    """Application settings loaded from environment variables."""

    # SQLite file holding the persisted settings/state records
    DATABASE_PATH: str = "data/posture.db"

    # IANA zone name; empty → system local time
    TIMEZONE: str = ""

    # Side effects
    REMINDER_SOUND_PATH: str = "sounds/gentle-chime.mp3"
    NOTIFICATION_ICON_PATH: str = "images/posture-icon.png"
    NOTIFICATION_TIMEOUT_SECONDS: int = 10

    # Start the reminder cycle as soon as the daemon boots
    AUTO_START: bool = True

    LOG_LEVEL: str = "INFO"

    @field_validator("TIMEZONE")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        v = v.strip()
        if not v:
            return ""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {v!r}") from exc
        return v

    @field_validator("NOTIFICATION_TIMEOUT_SECONDS", mode="before")
    @classmethod
    def parse_timeout(cls, v: str | int) -> int:
        value = int(v)
        if value <= 0:
            raise ValueError("NOTIFICATION_TIMEOUT_SECONDS must be positive")
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return level


def _load_settings() -> AppConfig:
    """Load settings from environment, exiting on invalid values."""
    try:
        return AppConfig(
            DATABASE_PATH=os.getenv("DATABASE_PATH", "data/posture.db"),
            TIMEZONE=os.getenv("TIMEZONE", ""),
            REMINDER_SOUND_PATH=os.getenv("REMINDER_SOUND_PATH", "sounds/gentle-chime.mp3"),
            NOTIFICATION_ICON_PATH=os.getenv("NOTIFICATION_ICON_PATH", "images/posture-icon.png"),
            NOTIFICATION_TIMEOUT_SECONDS=os.getenv("NOTIFICATION_TIMEOUT_SECONDS", "10"),
            AUTO_START=os.getenv("AUTO_START", "true"),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )
    except ValidationError as exc:
        print(f"ERROR: invalid configuration in .env:\n{exc}", file=sys.stderr)
        sys.exit(1)


# Singleton — imported by all other modules as:
#   from src.config import settings
settings = _load_settings()
