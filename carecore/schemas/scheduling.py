"""Pydantic schemas for resource bookings, drop checks and workload."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

_FROZEN = {"frozen": True}


# ── Bookings ────────────────────────────────────────────────────────
class ResourceBooking(BaseModel):
    id: str
    resource_id: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    is_background: bool = False  # informational marker, never booked time
    actual_start: datetime | None = None  # recorded actuals freeze the booking
    title: str | None = None

    model_config = _FROZEN


class WarningEvent(ResourceBooking):
    """Synthetic all-day background marker for an overloaded resource."""

    is_background: bool = True
    all_day: bool = True
    total_hours: float = 0.0
    background_color: str = "rgba(255, 0, 0, 0.15)"
    class_names: list[str] = Field(default_factory=lambda: ["fc-event-warning-bg"])
    plan_id: str = ""
    description: str = ""


class ProposedRange(BaseModel):
    start: datetime
    end: datetime
    resource_id: str | None = None

    model_config = _FROZEN


class DropDecision(BaseModel):
    allowed: bool
    reason: str | None = None

    model_config = _FROZEN


# ── Workload ────────────────────────────────────────────────────────
class ResourceWorkloadTotal(BaseModel):
    resource_id: str
    total_hours: float
    is_over: bool

    model_config = _FROZEN


# ── Requests / responses ───────────────────────────────────────────
class DropCheckRequest(BaseModel):
    booking: ResourceBooking
    proposed: ProposedRange
    bookings: list[ResourceBooking] = Field(default_factory=list)


class SelectCheckRequest(BaseModel):
    proposed: ProposedRange
    bookings: list[ResourceBooking] = Field(default_factory=list)


class WorkloadRequest(BaseModel):
    bookings: list[ResourceBooking] = Field(default_factory=list)
    window_start: datetime
    window_end: datetime
    limit_hours: float | None = Field(default=None, gt=0)


class WorkloadResponse(BaseModel):
    limit_hours: float
    totals: dict[str, ResourceWorkloadTotal]
    warnings: list[WarningEvent]
