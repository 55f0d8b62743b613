"""
Daily attendance state machine.

    unvisited ──check_in──▶ checked_in ──check_out──▶ checked_out
        │
        └────mark_absent───▶ absent

``checked_out`` and ``absent`` are terminal. Illegal transitions are
answered with ``False`` from the ``can_*`` guards; the transition helpers
then hand back the visit unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime

from carecore.engine.absence import DEFAULT_ABSENCE_MONTHLY_LIMIT, compute_absence_eligibility
from carecore.engine.intervals import DEFAULT_UTC_OFFSET, parse_instant, to_facility_time
from carecore.schemas.attendance import AbsentMethod, AttendanceStatus, AttendanceUser, AttendanceVisit

logger = logging.getLogger(__name__)

DEFAULT_FACILITY_CLOSE_TIME = "18:00"


# ── Time helpers ────────────────────────────────────────────────────
def diff_minutes(start: datetime | str | None, end: datetime | str | None) -> int:
    """Whole minutes between two instants, truncated; never negative."""
    start_dt = parse_instant(start)
    end_dt = parse_instant(end)
    if start_dt is None or end_dt is None:
        return 0
    seconds = (end_dt - start_dt).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // 60)


def _parse_hhmm(value: str) -> tuple[int, int] | None:
    parts = (value or "").strip().split(":")
    if len(parts) != 2:
        return None
    try:
        hh, mm = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hh <= 23 and 0 <= mm <= 59):
        return None
    return hh, mm


def is_before_close_time(
    now: datetime,
    close_time: str = DEFAULT_FACILITY_CLOSE_TIME,
    utc_offset: str = DEFAULT_UTC_OFFSET,
) -> bool:
    """Is ``now`` strictly earlier than today's closing time at the facility?

    A malformed or out-of-range ``close_time`` answers ``False``.
    """
    parsed = _parse_hhmm(close_time)
    if parsed is None:
        return False
    local = to_facility_time(now, utc_offset)
    close = local.replace(hour=parsed[0], minute=parsed[1], second=0, microsecond=0)
    return local < close


def format_time(value: datetime | str | None, utc_offset: str = DEFAULT_UTC_OFFSET) -> str:
    """Facility wall-clock ``HH:MM`` for display, ``--:--`` when unknown."""
    instant = parse_instant(value)
    if instant is None:
        return "--:--"
    return to_facility_time(instant, utc_offset).strftime("%H:%M")


# ── Day start ───────────────────────────────────────────────────────
def build_initial_visits(users: Iterable[AttendanceUser], record_date: date) -> dict[str, AttendanceVisit]:
    """One ``unvisited`` row per active user, keyed by user code."""
    return {
        u.user_code: AttendanceVisit(user_code=u.user_code, record_date=record_date)
        for u in users
        if u.is_active
    }


# ── Guards ──────────────────────────────────────────────────────────
def can_check_in(visit: AttendanceVisit | None) -> bool:
    return visit is not None and visit.status == AttendanceStatus.UNVISITED


def can_check_out(visit: AttendanceVisit | None) -> bool:
    if visit is None:
        return False
    if visit.status != AttendanceStatus.CHECKED_IN:
        return False
    # cnt_attend_in is deliberately not consulted here.
    return visit.cnt_attend_out == 0


def can_mark_absent(visit: AttendanceVisit | None) -> bool:
    return visit is not None and visit.status == AttendanceStatus.UNVISITED


# ── Transitions ─────────────────────────────────────────────────────
def check_in(visit: AttendanceVisit, at: datetime, *, transport_to: bool = False) -> AttendanceVisit:
    if not can_check_in(visit):
        logger.debug("Check-in ignored for %s (status=%s)", visit.user_code, visit.status.value)
        return visit
    return visit.model_copy(
        update={
            "status": AttendanceStatus.CHECKED_IN,
            "cnt_attend_in": 1,
            "cnt_attend_out": 0,
            "check_in_at": visit.check_in_at or at,
            "check_out_at": None,
            "transport_to": transport_to,
        }
    )


def check_out(
    visit: AttendanceVisit,
    at: datetime,
    *,
    transport_from: bool = False,
    early_leave: bool = False,
) -> AttendanceVisit:
    if not can_check_out(visit):
        logger.debug("Check-out ignored for %s (status=%s)", visit.user_code, visit.status.value)
        return visit
    check_in_at = visit.check_in_at or at
    return visit.model_copy(
        update={
            "status": AttendanceStatus.CHECKED_OUT,
            "cnt_attend_in": 1,
            "cnt_attend_out": 1,
            "check_in_at": check_in_at,
            "check_out_at": at,
            "transport_from": transport_from,
            "is_early_leave": early_leave,
            "provided_minutes": diff_minutes(check_in_at, at),
        }
    )


def build_absent_visit(
    base: AttendanceVisit,
    *,
    morning_contacted: bool,
    morning_method: AbsentMethod,
    evening_checked: bool,
    evening_note: str,
    eligible: bool,
) -> AttendanceVisit:
    """Reshape ``base`` into the ``absent`` terminal state."""
    return base.model_copy(
        update={
            "status": AttendanceStatus.ABSENT,
            "cnt_attend_in": 0,
            "cnt_attend_out": 0,
            "check_in_at": None,
            "check_out_at": None,
            "transport_to": False,
            "transport_from": False,
            "is_early_leave": False,
            "absent_morning_contacted": morning_contacted,
            "absent_morning_method": morning_method,
            "evening_checked": evening_checked,
            "evening_note": evening_note,
            "is_absence_addon_claimable": eligible,
            "provided_minutes": 0,
            "user_confirmed_at": None,
        }
    )


def mark_absent(
    visit: AttendanceVisit,
    user: AttendanceUser,
    *,
    morning_contacted: bool,
    morning_method: AbsentMethod = AbsentMethod.NONE,
    evening_checked: bool,
    evening_note: str = "",
    monthly_limit: int = DEFAULT_ABSENCE_MONTHLY_LIMIT,
) -> AttendanceVisit:
    """Guarded absence transition with add-on eligibility worked out."""
    if not can_mark_absent(visit):
        logger.debug("Absence ignored for %s (status=%s)", visit.user_code, visit.status.value)
        return visit
    eligible = compute_absence_eligibility(user, morning_contacted, evening_checked, monthly_limit)
    return build_absent_visit(
        visit,
        morning_contacted=morning_contacted,
        morning_method=morning_method,
        evening_checked=evening_checked,
        evening_note=evening_note,
        eligible=eligible,
    )
