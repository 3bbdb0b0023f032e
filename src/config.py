"""
Family Calendar Lite — Centralized configuration.

Loads all settings from .env and validates required keys.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

_PARENT_IDS = ("parentA", "parentB")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Backend provider: "supabase" | "sqlite"
    BACKEND_PROVIDER: str = "supabase"

    # Supabase / PostgREST (only needed when BACKEND_PROVIDER=supabase)
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    EVENTS_TABLE: str = "events"
    BACKEND_TIMEOUT_SECONDS: int = 10

    # SQLite — local events table (BACKEND_PROVIDER=sqlite) and session storage
    DATABASE_PATH: str = "data/calendar.db"

    # Session gate
    PIN_CODE: str
    PIN_TTL_DAYS: int = 30

    # Which parent is operating this installation
    ACTING_PARENT: str = "parentA"

    LOG_LEVEL: str = "INFO"

    @field_validator("ACTING_PARENT", mode="before")
    @classmethod
    def parse_acting_parent(cls, v: str) -> str:
        v = (v or "parentA").strip()
        if v not in _PARENT_IDS:
            raise ValueError(f"ACTING_PARENT must be one of {_PARENT_IDS}, got {v!r}")
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_log_level(cls, v: str) -> str:
        v = (v or "INFO").strip().upper()
        if v not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {_LOG_LEVELS}, got {v!r}")
        return v

    @field_validator("PIN_TTL_DAYS", "BACKEND_TIMEOUT_SECONDS", mode="before")
    @classmethod
    def parse_int(cls, v: str | int) -> int:
        return int(v)


def _load_settings() -> Settings:
    """Load settings from environment, validating required keys."""
    provider = os.getenv("BACKEND_PROVIDER", "supabase").strip().lower()
    pin_code = os.getenv("PIN_CODE", "")

    if not pin_code:
        print("ERROR: PIN_CODE is missing or not set in .env", file=sys.stderr)
        sys.exit(1)

    if provider == "supabase":
        if not os.getenv("SUPABASE_URL") or not os.getenv("SUPABASE_KEY"):
            print(
                "ERROR: SUPABASE_URL and SUPABASE_KEY are required when "
                "BACKEND_PROVIDER=supabase",
                file=sys.stderr,
            )
            sys.exit(1)

    return Settings(
        BACKEND_PROVIDER=provider,
        SUPABASE_URL=os.getenv("SUPABASE_URL", "").rstrip("/"),
        SUPABASE_KEY=os.getenv("SUPABASE_KEY", ""),
        EVENTS_TABLE=os.getenv("EVENTS_TABLE", "events"),
        BACKEND_TIMEOUT_SECONDS=os.getenv("BACKEND_TIMEOUT_SECONDS", "10"),
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/calendar.db"),
        PIN_CODE=pin_code,
        PIN_TTL_DAYS=os.getenv("PIN_TTL_DAYS", "30"),
        ACTING_PARENT=os.getenv("ACTING_PARENT", "parentA"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    )


# Singleton — imported by all other modules as:
#   from src.config import settings
settings = _load_settings()
