"""Pydantic schemas for the monthly daily-care (service record) view."""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class DailyCareStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    ONLINE = "Online"


class TransportationAddon(BaseModel):
    outbound: bool = False
    inbound: bool = False

    model_config = {"frozen": True}


class CareUserMaster(BaseModel):
    user_code: str
    default_start_time: str | None = "10:00"
    default_end_time: str | None = "16:00"
    is_eligible_for_meal_addon: bool = False

    model_config = {"frozen": True}


class DailyCareRecord(BaseModel):
    date: dt.date
    # Plain string: unrecognised statuses must survive parsing and be
    # skipped by the monthly fold.
    status: str = DailyCareStatus.PRESENT.value
    start_time: str | None = None
    end_time: str | None = None
    transportation_addon: TransportationAddon = Field(default_factory=TransportationAddon)
    meal_addon: bool = False
    bathing_addon: bool = False
    other_addons: dict[str, Any] = Field(default_factory=dict)
    is_absence_support_applied: bool = False
    is_absence_support_disabled: bool = True
    absence_support_memo: str | None = None
    absence_contact_time: str | None = None
    memo: str = ""
    is_user_confirmed: bool = False
    confirmed_timestamp: dt.datetime | None = None
    calculated_hours: float = 0.0

    model_config = {"frozen": True}


class MonthlySummary(BaseModel):
    present_days: int = 0
    absent_days: int = 0
    online_days: int = 0
    transport_outbound: int = 0
    transport_inbound: int = 0
    meal_addon_count: int = 0
    bathing_addon_count: int = 0
    other_addon_counts: dict[str, int] = Field(default_factory=dict)
    absence_support_count: int = 0


class DailyCareMonth(BaseModel):
    records: list[DailyCareRecord]
    summary: MonthlySummary


# ── Requests ───────────────────────────────────────────────────────
class DailyCareRecordChanges(BaseModel):
    """Partial update for one day; only fields that were sent are applied."""

    status: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    transportation_addon: TransportationAddon | None = None
    meal_addon: bool | None = None
    bathing_addon: bool | None = None
    other_addons: dict[str, Any] | None = None
    is_absence_support_applied: bool | None = None
    absence_support_memo: str | None = None
    absence_contact_time: str | None = None
    memo: str | None = None
    is_user_confirmed: bool | None = None


class MonthRequest(BaseModel):
    user: CareUserMaster
    service_year_month: str = Field(description="YYYY-MM")
    limit: int | None = Field(default=None, ge=0)


class UpdateRecordRequest(BaseModel):
    records: list[DailyCareRecord]
    date: dt.date
    changes: DailyCareRecordChanges
    user: CareUserMaster | None = None
    limit: int | None = Field(default=None, ge=0)
    now: dt.datetime | None = None


class EnforceRequest(BaseModel):
    records: list[DailyCareRecord]
    limit: int | None = Field(default=None, ge=0)


class SummaryRequest(BaseModel):
    records: list[DailyCareRecord]


class HoursRequest(BaseModel):
    status: str = DailyCareStatus.PRESENT.value
    start_time: str | None = None
    end_time: str | None = None


class HoursResponse(BaseModel):
    calculated_hours: float
