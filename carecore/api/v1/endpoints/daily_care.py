"""
Daily-care (monthly service record) endpoints.

Every response that returns records has already been through the
absence-support cap, and its summary is recomputed from those records.
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends

from carecore.api.v1.deps import get_now, get_settings
from carecore.core.config import Settings
from carecore.engine.daily_care import build_month, generate_month_records, update_record
from carecore.engine.discrepancy import calculate_hours, compute_monthly_summary
from carecore.schemas.daily_care import (
    DailyCareMonth,
    EnforceRequest,
    HoursRequest,
    HoursResponse,
    MonthlySummary,
    MonthRequest,
    SummaryRequest,
    UpdateRecordRequest,
)

router = APIRouter(prefix="/daily-care", tags=["daily-care"])
logger = logging.getLogger(__name__)


def _limit(requested: int | None, cfg: Settings) -> int:
    return requested if requested is not None else cfg.ABSENCE_SUPPORT_LIMIT


@router.post("/month", response_model=DailyCareMonth)
async def initialize_month(
    body: MonthRequest,
    cfg: Settings = Depends(get_settings),
) -> DailyCareMonth:
    """Default records for every day of ``service_year_month``."""
    limit = _limit(body.limit, cfg)
    records = generate_month_records(body.user, body.service_year_month, limit)
    logger.info("Initialised %s for %s (%d days)", body.service_year_month, body.user.user_code, len(records))
    return build_month(records, limit)


@router.post("/records/update", response_model=DailyCareMonth)
async def update_daily_record(
    body: UpdateRecordRequest,
    now: datetime = Depends(get_now),
    cfg: Settings = Depends(get_settings),
) -> DailyCareMonth:
    return update_record(
        body.records,
        body.date,
        body.changes,
        limit=_limit(body.limit, cfg),
        user=body.user,
        now=body.now or now,
    )


@router.post("/enforce", response_model=DailyCareMonth)
async def enforce_limit(
    body: EnforceRequest,
    cfg: Settings = Depends(get_settings),
) -> DailyCareMonth:
    return build_month(body.records, _limit(body.limit, cfg))


@router.post("/summary", response_model=MonthlySummary)
async def monthly_summary(body: SummaryRequest) -> MonthlySummary:
    return compute_monthly_summary(body.records)


@router.post("/hours", response_model=HoursResponse)
async def hours(body: HoursRequest) -> HoursResponse:
    return HoursResponse(calculated_hours=calculate_hours(body.status, body.start_time, body.end_time))
