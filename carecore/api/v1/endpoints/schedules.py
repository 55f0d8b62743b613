"""
Scheduling endpoints: drop / selection checks and workload warnings.

Each request carries the full booking snapshot; nothing is stored.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from carecore.api.v1.deps import get_settings
from carecore.core.config import Settings
from carecore.engine.overlap import check_drop_allowed, check_select_allowed
from carecore.engine.workload import aggregate, generate_warnings
from carecore.schemas.scheduling import (
    DropCheckRequest,
    DropDecision,
    SelectCheckRequest,
    WorkloadRequest,
    WorkloadResponse,
)

router = APIRouter(prefix="/schedules", tags=["schedules"])
logger = logging.getLogger(__name__)


@router.post("/drop-check", response_model=DropDecision)
async def drop_check(body: DropCheckRequest) -> DropDecision:
    """Can an existing booking be moved to the proposed range / resource?"""
    decision = check_drop_allowed(body.booking, body.proposed, body.bookings)
    if not decision.allowed:
        logger.info("Drop of booking %s rejected: %s", body.booking.id, decision.reason)
    return decision


@router.post("/select-check", response_model=DropDecision)
async def select_check(body: SelectCheckRequest) -> DropDecision:
    """Can a new booking be created over the selected range?"""
    return check_select_allowed(body.proposed, body.bookings)


@router.post("/workload", response_model=WorkloadResponse)
async def workload(
    body: WorkloadRequest,
    cfg: Settings = Depends(get_settings),
) -> WorkloadResponse:
    """Per-resource booked hours plus overload markers for the window."""
    limit_hours = body.limit_hours if body.limit_hours is not None else cfg.WORKLOAD_LIMIT_HOURS
    totals = aggregate(body.bookings, limit_hours)
    warnings = generate_warnings(totals, body.window_start, body.window_end)
    return WorkloadResponse(limit_hours=limit_hours, totals=totals, warnings=warnings)
