"""
Monthly daily-care record workflow.

A service month is an ordered list of one record per calendar day. Every
edit goes through ``update_record``, which normalises the edited day,
re-runs the absence-support cap over the whole month and recomputes the
summary from scratch.
"""

from __future__ import annotations

import calendar
import logging
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

from carecore.engine.absence import DEFAULT_ABSENCE_SUPPORT_LIMIT, enforce_absence_support_limit
from carecore.engine.discrepancy import calculate_hours, compute_monthly_summary
from carecore.schemas.daily_care import CareUserMaster, DailyCareMonth, DailyCareRecord, DailyCareStatus

logger = logging.getLogger(__name__)

# Fields where an explicit null clears the value rather than being ignored.
_NULLABLE = frozenset({"start_time", "end_time", "absence_support_memo", "absence_contact_time"})


def build_default_record(day: date, user: CareUserMaster) -> DailyCareRecord:
    status = DailyCareStatus.PRESENT.value
    return DailyCareRecord(
        date=day,
        status=status,
        start_time=user.default_start_time,
        end_time=user.default_end_time,
        meal_addon=user.is_eligible_for_meal_addon,
        calculated_hours=calculate_hours(status, user.default_start_time, user.default_end_time),
    )


def parse_service_year_month(value: str) -> tuple[int, int]:
    """``"2025-04"`` -> ``(2025, 4)``; raises ``ValueError`` otherwise."""
    parts = (value or "").strip().split("-")
    if len(parts) != 2:
        raise ValueError(f"Invalid service_year_month: {value!r}")
    try:
        year, month = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Invalid service_year_month: {value!r}") from None
    if year < 1 or not 1 <= month <= 12:
        raise ValueError(f"Invalid service_year_month: {value!r}")
    return year, month


def generate_month_records(
    user: CareUserMaster,
    service_year_month: str,
    limit: int = DEFAULT_ABSENCE_SUPPORT_LIMIT,
) -> list[DailyCareRecord]:
    year, month = parse_service_year_month(service_year_month)
    _, days_in_month = calendar.monthrange(year, month)
    records = [build_default_record(date(year, month, d), user) for d in range(1, days_in_month + 1)]
    return enforce_absence_support_limit(records, limit)


def normalize_record(
    record: DailyCareRecord,
    changes: Mapping[str, Any] | BaseModel,
    user: CareUserMaster | None = None,
    now: datetime | None = None,
) -> DailyCareRecord:
    """Merge ``changes`` into ``record`` and restore the per-day invariants."""
    if isinstance(changes, BaseModel):
        changes = changes.model_dump(exclude_unset=True)
    changes = {k: v for k, v in changes.items() if v is not None or k in _NULLABLE}
    nxt: dict[str, Any] = {**record.model_dump(), **changes}

    if user is not None and not user.is_eligible_for_meal_addon:
        nxt["meal_addon"] = False

    if nxt["status"] == DailyCareStatus.ABSENT.value:
        nxt["start_time"] = None
        nxt["end_time"] = None
        nxt["transportation_addon"] = {"outbound": False, "inbound": False}
        nxt["meal_addon"] = False
        nxt["bathing_addon"] = False
    else:
        nxt["is_absence_support_applied"] = False
        nxt["absence_support_memo"] = None
        nxt["absence_contact_time"] = None

    if nxt["is_user_confirmed"]:
        nxt["confirmed_timestamp"] = nxt["confirmed_timestamp"] or now
    else:
        nxt["confirmed_timestamp"] = None

    nxt["calculated_hours"] = calculate_hours(nxt["status"], nxt["start_time"], nxt["end_time"])
    return DailyCareRecord.model_validate(nxt)


def build_month(records: Sequence[DailyCareRecord], limit: int = DEFAULT_ABSENCE_SUPPORT_LIMIT) -> DailyCareMonth:
    """Cap-enforced month plus its summary, both rebuilt from scratch."""
    enforced = enforce_absence_support_limit(records, limit)
    return DailyCareMonth(records=enforced, summary=compute_monthly_summary(enforced))


def update_record(
    records: Sequence[DailyCareRecord],
    day: date,
    changes: Mapping[str, Any] | BaseModel,
    limit: int = DEFAULT_ABSENCE_SUPPORT_LIMIT,
    user: CareUserMaster | None = None,
    now: datetime | None = None,
) -> DailyCareMonth:
    """Apply ``changes`` to ``day``; an unknown day edits nothing."""
    index = next((i for i, r in enumerate(records) if r.date == day), None)
    if index is None:
        logger.debug("No daily-care record for %s; month left unchanged", day)
        return build_month(records, limit)

    next_records = list(records)
    next_records[index] = normalize_record(records[index], changes, user, now)
    return build_month(next_records, limit)
