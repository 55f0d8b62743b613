"""
Settings & health endpoints.

The rule settings come from the environment (see ``core/config.py``); this
router only exposes the effective values so the UI can show the same
limits the engine applies.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from carecore.api.v1.deps import get_settings
from carecore.core.config import Settings
from carecore.schemas.settings import HealthResponse, RuleSettingsRead

router = APIRouter(tags=["settings"])


@router.get("/settings", response_model=RuleSettingsRead)
async def read_settings(cfg: Settings = Depends(get_settings)) -> RuleSettingsRead:
    """Get the effective scheduling and attendance rules."""
    return RuleSettingsRead(
        workload_limit_hours=cfg.WORKLOAD_LIMIT_HOURS,
        absence_monthly_limit=cfg.ABSENCE_MONTHLY_LIMIT,
        absence_support_limit=cfg.ABSENCE_SUPPORT_LIMIT,
        discrepancy_threshold=cfg.DISCREPANCY_THRESHOLD,
        facility_close_time=cfg.FACILITY_CLOSE_TIME,
        facility_utc_offset=cfg.FACILITY_UTC_OFFSET,
    )


@router.get("/health", response_model=HealthResponse)
async def health(cfg: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(status="ok", version=cfg.VERSION)
