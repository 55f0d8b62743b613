"""Tests for the daily-care endpoints."""

import pytest
from httpx import AsyncClient

from carecore.api.v1.deps import get_settings
from carecore.core.config import Settings

USER = {"user_code": "U001", "is_eligible_for_meal_addon": True}


async def _month(async_client: AsyncClient, ym="2025-04"):
    resp = await async_client.post("/api/v1/daily-care/month", json={"user": USER, "service_year_month": ym})
    assert resp.status_code == 200
    return resp.json()


async def _mark_absent(async_client: AsyncClient, records, day: str):
    resp = await async_client.post(
        "/api/v1/daily-care/records/update",
        json={
            "records": records,
            "date": day,
            "changes": {"status": "Absent", "is_absence_support_applied": True},
            "user": USER,
        },
    )
    assert resp.status_code == 200
    return resp.json()


@pytest.mark.asyncio
async def test_month_initialisation(async_client: AsyncClient):
    """A new month has one default record per day and a matching summary."""
    data = await _month(async_client)
    assert len(data["records"]) == 30
    first = data["records"][0]
    assert first["date"] == "2025-04-01"
    assert first["start_time"] == "10:00"
    assert first["calculated_hours"] == 6.0
    assert data["summary"]["present_days"] == 30
    assert data["summary"]["meal_addon_count"] == 30


@pytest.mark.asyncio
async def test_bad_month_is_422(async_client: AsyncClient):
    """An unparseable service month is rejected, not a 500."""
    resp = await async_client.post(
        "/api/v1/daily-care/month",
        json={"user": USER, "service_year_month": "2025-13"},
    )
    assert resp.status_code == 422
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_third_absence_claim_is_capped(async_client: AsyncClient):
    """Only the first two absence-support claims of the month survive."""
    month = await _month(async_client)
    for day in ("2025-04-02", "2025-04-09", "2025-04-16"):
        month = await _mark_absent(async_client, month["records"], day)

    records = {r["date"]: r for r in month["records"]}
    assert records["2025-04-02"]["is_absence_support_applied"] is True
    assert records["2025-04-09"]["is_absence_support_applied"] is True
    assert records["2025-04-16"]["is_absence_support_applied"] is False
    assert records["2025-04-16"]["is_absence_support_disabled"] is True
    assert records["2025-04-16"]["start_time"] is None
    assert month["summary"]["absent_days"] == 3
    assert month["summary"]["absence_support_count"] == 2


@pytest.mark.asyncio
async def test_update_confirmation_stamps_timestamp(async_client: AsyncClient):
    month = await _month(async_client)
    resp = await async_client.post(
        "/api/v1/daily-care/records/update",
        json={
            "records": month["records"],
            "date": "2025-04-01",
            "changes": {"is_user_confirmed": True},
            "now": "2025-04-01T07:00:00Z",
        },
    )
    first = resp.json()["records"][0]
    assert first["is_user_confirmed"] is True
    assert first["confirmed_timestamp"].startswith("2025-04-01T07:00:00")


@pytest.mark.asyncio
async def test_enforce_with_configured_limit(async_client: AsyncClient, override_dependency):
    """The support cap falls back to the configured value."""
    override_dependency(get_settings, lambda: Settings(ABSENCE_SUPPORT_LIMIT=1))
    records = [
        {"date": f"2025-04-0{d}", "status": "Absent", "is_absence_support_applied": True} for d in (1, 2, 3)
    ]
    resp = await async_client.post("/api/v1/daily-care/enforce", json={"records": records})
    data = resp.json()
    assert [r["is_absence_support_applied"] for r in data["records"]] == [True, False, False]
    assert data["summary"]["absence_support_count"] == 1


@pytest.mark.asyncio
async def test_summary_endpoint(async_client: AsyncClient):
    records = [
        {"date": "2025-04-01", "status": "Present", "bathing_addon": True},
        {"date": "2025-04-02", "status": "Online"},
        {"date": "2025-04-03", "status": "Unknown"},
    ]
    resp = await async_client.post("/api/v1/daily-care/summary", json={"records": records})
    data = resp.json()
    assert data["present_days"] == 1
    assert data["online_days"] == 1
    assert data["bathing_addon_count"] == 1


@pytest.mark.asyncio
async def test_hours_endpoint(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/daily-care/hours",
        json={"status": "Present", "start_time": "09:15", "end_time": "15:45"},
    )
    assert resp.json() == {"calculated_hours": 6.5}

    resp = await async_client.post(
        "/api/v1/daily-care/hours",
        json={"status": "Absent", "start_time": "09:15", "end_time": "15:45"},
    )
    assert resp.json() == {"calculated_hours": 0.0}
