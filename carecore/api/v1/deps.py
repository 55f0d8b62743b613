"""
FastAPI dependencies: effective rule settings and the request clock.
"""

from __future__ import annotations

from datetime import datetime, timezone

from carecore.core.config import Settings, settings


def get_settings() -> Settings:
    """Rule settings; overridable in tests via ``dependency_overrides``."""
    return settings


def get_now() -> datetime:
    """Sample the clock once per request so one evaluation is time-stable."""
    return datetime.now(timezone.utc)
