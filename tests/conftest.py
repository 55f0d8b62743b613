"""
Shared test fixtures for the carecore test suite.

The engine is pure, so most tests call it directly. API tests go through
an httpx AsyncClient bound to the ASGI app; no server, no database.
"""

import os
import sys
from datetime import date, datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["LOG_LEVEL"] = "WARNING"

from httpx import ASGITransport, AsyncClient

from carecore.main import app
from carecore.schemas.attendance import AttendanceStatus, AttendanceUser, AttendanceVisit
from carecore.schemas.daily_care import DailyCareRecord
from carecore.schemas.scheduling import ResourceBooking

JST = timezone(timedelta(hours=9))
DAY = date(2025, 1, 15)


def at(hour: int, minute: int = 0, second: int = 0, day: date = DAY) -> datetime:
    """A UTC instant on the test day."""
    return datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=timezone.utc)


def booking(
    booking_id: str,
    start: datetime | None,
    end: datetime | None,
    resource_id: str | None = "staff-1",
    **extra,
) -> ResourceBooking:
    return ResourceBooking(id=booking_id, resource_id=resource_id, start=start, end=end, **extra)


def user(code: str = "U001", **extra) -> AttendanceUser:
    return AttendanceUser(user_code=code, user_name=f"User {code}", **extra)


def visit(code: str = "U001", status: AttendanceStatus = AttendanceStatus.UNVISITED, **extra) -> AttendanceVisit:
    return AttendanceVisit(user_code=code, record_date=DAY, status=status, **extra)


def care_record(day: int, status: str = "Present", **extra) -> DailyCareRecord:
    return DailyCareRecord(date=date(2025, 4, day), status=status, **extra)


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def override_dependency():
    """Install ``app.dependency_overrides`` for one test and undo afterwards."""
    installed = []

    def _install(dep, replacement):
        app.dependency_overrides[dep] = replacement
        installed.append(dep)

    yield _install
    for dep in installed:
        app.dependency_overrides.pop(dep, None)
