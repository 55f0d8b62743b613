"""
Attendance endpoints: day-start rows, guarded transitions, absence
eligibility and the discrepancy alert.

Guarded transitions never error: an illegal request returns
``applied=false`` together with the untouched visit so the UI can simply
disable the action.
"""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query

from carecore.api.v1.deps import get_now, get_settings
from carecore.core.config import Settings
from carecore.engine.absence import compute_absence_eligibility
from carecore.engine.attendance import (
    build_initial_visits,
    can_check_in,
    can_check_out,
    can_mark_absent,
    check_in,
    check_out,
    format_time,
    is_before_close_time,
    mark_absent,
)
from carecore.engine.discrepancy import find_discrepancies
from carecore.schemas.attendance import (
    AbsenceRequest,
    AttendanceVisit,
    CheckInRequest,
    CheckOutRequest,
    CloseStatusResponse,
    DiscrepancyRequest,
    DiscrepancyResponse,
    EligibilityRequest,
    EligibilityResponse,
    InitialVisitsRequest,
    TransitionResponse,
)

router = APIRouter(prefix="/attendance", tags=["attendance"])
logger = logging.getLogger(__name__)


@router.post("/visits", response_model=list[AttendanceVisit])
async def initial_visits(body: InitialVisitsRequest) -> list[AttendanceVisit]:
    """Day-start snapshot: one unvisited row per active user."""
    return list(build_initial_visits(body.users, body.record_date).values())


@router.post("/check-in", response_model=TransitionResponse)
async def visit_check_in(
    body: CheckInRequest,
    now: datetime = Depends(get_now),
) -> TransitionResponse:
    if not can_check_in(body.visit):
        logger.info("Check-in refused for %s (status=%s)", body.visit.user_code, body.visit.status.value)
        return TransitionResponse(applied=False, visit=body.visit)
    visit = check_in(body.visit, body.at or now, transport_to=body.transport_to)
    return TransitionResponse(applied=True, visit=visit)


@router.post("/check-out", response_model=TransitionResponse)
async def visit_check_out(
    body: CheckOutRequest,
    now: datetime = Depends(get_now),
) -> TransitionResponse:
    if not can_check_out(body.visit):
        logger.info("Check-out refused for %s (status=%s)", body.visit.user_code, body.visit.status.value)
        return TransitionResponse(applied=False, visit=body.visit)
    visit = check_out(
        body.visit,
        body.at or now,
        transport_from=body.transport_from,
        early_leave=body.early_leave,
    )
    return TransitionResponse(applied=True, visit=visit)


@router.post("/absence", response_model=TransitionResponse)
async def visit_absence(
    body: AbsenceRequest,
    cfg: Settings = Depends(get_settings),
) -> TransitionResponse:
    if not can_mark_absent(body.visit):
        logger.info("Absence refused for %s (status=%s)", body.visit.user_code, body.visit.status.value)
        return TransitionResponse(applied=False, visit=body.visit)
    monthly_limit = body.monthly_limit if body.monthly_limit is not None else cfg.ABSENCE_MONTHLY_LIMIT
    visit = mark_absent(
        body.visit,
        body.user,
        morning_contacted=body.morning_contacted,
        morning_method=body.morning_method,
        evening_checked=body.evening_checked,
        evening_note=body.evening_note,
        monthly_limit=monthly_limit,
    )
    return TransitionResponse(applied=True, visit=visit)


@router.post("/eligibility", response_model=EligibilityResponse)
async def absence_eligibility(
    body: EligibilityRequest,
    cfg: Settings = Depends(get_settings),
) -> EligibilityResponse:
    monthly_limit = body.monthly_limit if body.monthly_limit is not None else cfg.ABSENCE_MONTHLY_LIMIT
    eligible = compute_absence_eligibility(body.user, body.morning_contacted, body.evening_checked, monthly_limit)
    return EligibilityResponse(eligible=eligible, monthly_limit=monthly_limit)


@router.post("/discrepancies", response_model=DiscrepancyResponse)
async def discrepancies(
    body: DiscrepancyRequest,
    cfg: Settings = Depends(get_settings),
) -> DiscrepancyResponse:
    """Visits whose provided minutes fall short of the contracted minutes."""
    threshold = body.threshold if body.threshold is not None else cfg.DISCREPANCY_THRESHOLD
    flagged = find_discrepancies(body.visits, body.users, threshold)
    return DiscrepancyResponse(
        threshold=threshold,
        count=len(flagged),
        user_codes=[v.user_code for v in flagged],
    )


@router.get("/close-status", response_model=CloseStatusResponse)
async def close_status(
    at: datetime | None = Query(default=None),
    now: datetime = Depends(get_now),
    cfg: Settings = Depends(get_settings),
) -> CloseStatusResponse:
    """Is the facility still before closing time (in facility wall-clock)?"""
    moment = at or now
    return CloseStatusResponse(
        now=moment,
        local_time=format_time(moment, cfg.FACILITY_UTC_OFFSET),
        close_time=cfg.FACILITY_CLOSE_TIME,
        before_close=is_before_close_time(moment, cfg.FACILITY_CLOSE_TIME, cfg.FACILITY_UTC_OFFSET),
    )
