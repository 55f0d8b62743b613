"""
Centralised application settings loaded from environment / .env file.

Uses pydantic-settings so every value can be overridden via env vars
or the .env file at the project root. The rule defaults mirror the
constants the engine falls back to when called directly.
"""

from __future__ import annotations

import re

from pydantic import field_validator
from pydantic_settings import BaseSettings

from carecore.engine.absence import DEFAULT_ABSENCE_MONTHLY_LIMIT, DEFAULT_ABSENCE_SUPPORT_LIMIT
from carecore.engine.attendance import DEFAULT_FACILITY_CLOSE_TIME
from carecore.engine.discrepancy import DEFAULT_DISCREPANCY_THRESHOLD
from carecore.engine.intervals import DEFAULT_UTC_OFFSET
from carecore.engine.workload import DEFAULT_WORKLOAD_LIMIT_HOURS

_TIME_24H_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_UTC_OFFSET_RE = re.compile(r"^[+-]([01]\d|2[0-3]):?[0-5]\d$")


class Settings(BaseSettings):
    # ── Project ──────────────────────────────────────────────────────
    PROJECT_NAME: str = "carecore"
    VERSION: str = "1.0.0"
    API_V1_PREFIX: str = "/api/v1"

    # ── CORS ─────────────────────────────────────────────────────────
    CORS_ORIGINS: list[str] = [
        "http://localhost",
        "http://localhost:5173",
        "http://localhost:8000",
        "http://127.0.0.1",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:8000",
    ]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors(cls, v: object) -> list[str]:
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v  # type: ignore[return-value]

    # ── Logging ──────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    # ── Scheduling rules ─────────────────────────────────────────────
    WORKLOAD_LIMIT_HOURS: float = DEFAULT_WORKLOAD_LIMIT_HOURS

    # ── Attendance / service record rules ────────────────────────────
    ABSENCE_MONTHLY_LIMIT: int = DEFAULT_ABSENCE_MONTHLY_LIMIT
    ABSENCE_SUPPORT_LIMIT: int = DEFAULT_ABSENCE_SUPPORT_LIMIT
    DISCREPANCY_THRESHOLD: float = DEFAULT_DISCREPANCY_THRESHOLD
    FACILITY_CLOSE_TIME: str = DEFAULT_FACILITY_CLOSE_TIME
    FACILITY_UTC_OFFSET: str = DEFAULT_UTC_OFFSET

    @field_validator("WORKLOAD_LIMIT_HOURS", "DISCREPANCY_THRESHOLD")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("ABSENCE_MONTHLY_LIMIT", "ABSENCE_SUPPORT_LIMIT")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @field_validator("FACILITY_CLOSE_TIME")
    @classmethod
    def _close_time(cls, v: str) -> str:
        v = v.strip()
        if not _TIME_24H_RE.match(v):
            raise ValueError("Facility close time must be HH:MM (24h)")
        return v

    @field_validator("FACILITY_UTC_OFFSET")
    @classmethod
    def _utc_offset(cls, v: str) -> str:
        v = v.strip()
        if not _UTC_OFFSET_RE.match(v):
            raise ValueError("UTC offset must look like +09:00")
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }


settings = Settings()
