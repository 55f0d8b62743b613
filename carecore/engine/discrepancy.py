"""
Planned-vs-provided service minutes and the monthly daily-care roll-up.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime

from carecore.engine.intervals import round_half_up
from carecore.schemas.attendance import AttendanceUser, AttendanceVisit
from carecore.schemas.daily_care import DailyCareRecord, DailyCareStatus, MonthlySummary

logger = logging.getLogger(__name__)

DEFAULT_DISCREPANCY_THRESHOLD = 0.75


def find_discrepancies(
    visits: Mapping[str, AttendanceVisit] | Iterable[AttendanceVisit],
    users: Iterable[AttendanceUser],
    threshold: float = DEFAULT_DISCREPANCY_THRESHOLD,
) -> list[AttendanceVisit]:
    """Visits whose provided minutes fall short of ``standard * threshold``.

    A zero is not evidence of under-delivery (usually "not checked out yet")
    and visits of users missing from the roster are skipped.
    """
    if isinstance(visits, Mapping):
        visits = visits.values()
    roster = {u.user_code: u for u in users}

    flagged: list[AttendanceVisit] = []
    for visit in visits:
        user = roster.get(visit.user_code)
        if user is None:
            continue
        if visit.provided_minutes <= 0:
            continue
        if visit.provided_minutes < user.standard_minutes * threshold:
            flagged.append(visit)
    return flagged


def get_discrepancy_count(
    visits: Mapping[str, AttendanceVisit] | Iterable[AttendanceVisit],
    users: Iterable[AttendanceUser],
    threshold: float = DEFAULT_DISCREPANCY_THRESHOLD,
) -> int:
    return len(find_discrepancies(visits, users, threshold))


def time_to_minutes(value: str | None) -> int | None:
    """``"HH:MM"`` -> minutes since midnight, ``None`` when unparseable."""
    if not value:
        return None
    try:
        parsed = datetime.strptime(value.strip(), "%H:%M")
    except ValueError:
        return None
    return parsed.hour * 60 + parsed.minute


def calculate_hours(status: str, start: str | None, end: str | None) -> float:
    if status == DailyCareStatus.ABSENT.value:
        return 0.0
    start_minutes = time_to_minutes(start)
    end_minutes = time_to_minutes(end)
    if start_minutes is None or end_minutes is None or end_minutes <= start_minutes:
        return 0.0
    return round_half_up((end_minutes - start_minutes) / 60, 2)


def compute_monthly_summary(records: Iterable[DailyCareRecord]) -> MonthlySummary:
    present = absent = online = 0
    outbound = inbound = meal = bathing = absence_support = 0
    other: dict[str, int] = {}

    for record in records:
        if record.status == DailyCareStatus.PRESENT.value:
            present += 1
        elif record.status == DailyCareStatus.ABSENT.value:
            absent += 1
        elif record.status == DailyCareStatus.ONLINE.value:
            online += 1

        if record.transportation_addon.outbound:
            outbound += 1
        if record.transportation_addon.inbound:
            inbound += 1
        if record.meal_addon:
            meal += 1
        if record.bathing_addon:
            bathing += 1
        if record.is_absence_support_applied:
            absence_support += 1
        for key, value in record.other_addons.items():
            if value:
                other[key] = other.get(key, 0) + 1

    return MonthlySummary(
        present_days=present,
        absent_days=absent,
        online_days=online,
        transport_outbound=outbound,
        transport_inbound=inbound,
        meal_addon_count=meal,
        bathing_addon_count=bathing,
        other_addon_counts=other,
        absence_support_count=absence_support,
    )
