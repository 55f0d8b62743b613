"""Pydantic schemas for daily attendance visits and the facility roster."""

from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

_USER_CODE_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class AttendanceStatus(str, Enum):
    UNVISITED = "unvisited"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    ABSENT = "absent"


class AbsentMethod(str, Enum):
    """How the morning absence contact was received."""

    PHONE = "phone"
    SMS = "sms"
    FAMILY = "family"
    OTHER = "other"
    NONE = ""


# ── Roster ──────────────────────────────────────────────────────────
class AttendanceUser(BaseModel):
    user_code: str
    user_name: str = ""
    is_transport_target: bool = False
    absence_claimed_this_month: int = Field(default=0, ge=0)
    standard_minutes: int = Field(default=0, ge=0)
    is_active: bool = True

    model_config = {"frozen": True}

    @field_validator("user_code")
    @classmethod
    def _user_code(cls, v: str) -> str:
        v = v.strip()
        if not _USER_CODE_RE.match(v):
            raise ValueError("user_code must be 1-64 alphanumeric chars")
        return v


# ── Visit ───────────────────────────────────────────────────────────
class AttendanceVisit(BaseModel):
    user_code: str
    record_date: date
    status: AttendanceStatus = AttendanceStatus.UNVISITED

    cnt_attend_in: int = Field(default=0, ge=0, le=1)
    cnt_attend_out: int = Field(default=0, ge=0, le=1)

    transport_to: bool = False
    transport_from: bool = False
    is_early_leave: bool = False

    absent_morning_contacted: bool = False
    absent_morning_method: AbsentMethod = AbsentMethod.NONE
    evening_checked: bool = False
    evening_note: str = ""
    is_absence_addon_claimable: bool = False

    provided_minutes: int = Field(default=0, ge=0)
    user_confirmed_at: datetime | None = None
    check_in_at: datetime | None = None
    check_out_at: datetime | None = None

    model_config = {"frozen": True}


# ── Requests / responses ───────────────────────────────────────────
class InitialVisitsRequest(BaseModel):
    users: list[AttendanceUser]
    record_date: date


class CheckInRequest(BaseModel):
    visit: AttendanceVisit
    at: datetime | None = None
    transport_to: bool = False


class CheckOutRequest(BaseModel):
    visit: AttendanceVisit
    at: datetime | None = None
    transport_from: bool = False
    early_leave: bool = False


class AbsenceRequest(BaseModel):
    visit: AttendanceVisit
    user: AttendanceUser
    morning_contacted: bool = False
    morning_method: AbsentMethod = AbsentMethod.NONE
    evening_checked: bool = False
    evening_note: str = Field(default="", max_length=500)
    monthly_limit: int | None = Field(default=None, ge=0)


class TransitionResponse(BaseModel):
    applied: bool
    visit: AttendanceVisit


class EligibilityRequest(BaseModel):
    user: AttendanceUser
    morning_contacted: bool = False
    evening_checked: bool = False
    monthly_limit: int | None = Field(default=None, ge=0)


class EligibilityResponse(BaseModel):
    eligible: bool
    monthly_limit: int


class DiscrepancyRequest(BaseModel):
    visits: list[AttendanceVisit]
    users: list[AttendanceUser]
    threshold: float | None = Field(default=None, gt=0)


class DiscrepancyResponse(BaseModel):
    threshold: float
    count: int
    user_codes: list[str]


class CloseStatusResponse(BaseModel):
    now: datetime
    local_time: str
    close_time: str
    before_close: bool
