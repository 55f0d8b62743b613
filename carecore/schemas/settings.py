"""Pydantic schemas for the settings / health endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class RuleSettingsRead(BaseModel):
    workload_limit_hours: float
    absence_monthly_limit: int
    absence_support_limit: int
    discrepancy_threshold: float
    facility_close_time: str
    facility_utc_offset: str


class HealthResponse(BaseModel):
    status: str
    version: str
