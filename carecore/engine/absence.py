"""
Absence-support add-on eligibility and the monthly cap.

The cap is enforced by walking the month's records in the order given and
letting the first ``limit`` claims through. It is re-run over the whole
month after every change; applying it to its own output changes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from carecore.schemas.attendance import AttendanceUser
from carecore.schemas.daily_care import DailyCareRecord, DailyCareStatus

logger = logging.getLogger(__name__)

DEFAULT_ABSENCE_MONTHLY_LIMIT = 2
DEFAULT_ABSENCE_SUPPORT_LIMIT = 2


def compute_absence_eligibility(
    user: AttendanceUser,
    morning_contacted: bool,
    evening_checked: bool,
    monthly_limit: int = DEFAULT_ABSENCE_MONTHLY_LIMIT,
) -> bool:
    """Both contacts confirmed and the user still under this month's limit."""
    if not morning_contacted or not evening_checked:
        return False
    return user.absence_claimed_this_month < monthly_limit


def enforce_absence_support_limit(
    records: Iterable[DailyCareRecord],
    limit: int = DEFAULT_ABSENCE_SUPPORT_LIMIT,
) -> list[DailyCareRecord]:
    """Return a new month where at most ``limit`` absences carry the add-on."""
    if limit <= 0:
        return [
            r.model_copy(update={"is_absence_support_applied": False, "is_absence_support_disabled": True})
            for r in records
        ]

    applied_count = 0
    demoted = 0
    out: list[DailyCareRecord] = []
    for record in records:
        if record.status != DailyCareStatus.ABSENT.value:
            out.append(
                record.model_copy(update={"is_absence_support_applied": False, "is_absence_support_disabled": True})
            )
            continue

        is_applied = record.is_absence_support_applied
        if is_applied:
            if applied_count < limit:
                applied_count += 1
            else:
                is_applied = False
                demoted += 1

        out.append(
            record.model_copy(
                update={
                    "is_absence_support_applied": is_applied,
                    "is_absence_support_disabled": applied_count >= limit and not is_applied,
                }
            )
        )

    if demoted:
        logger.info("Absence support over limit %d: demoted %d record(s)", limit, demoted)
    return out
