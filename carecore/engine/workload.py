"""
Per-resource workload totals and synthetic overload warnings.

Totals are always rebuilt from the full booking set. The warning markers
are background bookings, so feeding them back into ``aggregate`` or the
overlap checker leaves the results unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, time, timedelta

from carecore.engine.intervals import duration_hours, epoch_millis, round_half_up
from carecore.schemas.scheduling import ResourceBooking, ResourceWorkloadTotal, WarningEvent

logger = logging.getLogger(__name__)

DEFAULT_WORKLOAD_LIMIT_HOURS = 8.0


def aggregate(
    bookings: Iterable[ResourceBooking],
    limit_hours: float = DEFAULT_WORKLOAD_LIMIT_HOURS,
) -> dict[str, ResourceWorkloadTotal]:
    """Sum booked hours per resource and flag those strictly over the limit."""
    raw: dict[str, float] = {}
    for booking in bookings:
        if booking.is_background:
            continue
        if booking.start is None or booking.end is None:
            continue
        if not booking.resource_id:
            continue
        raw[booking.resource_id] = raw.get(booking.resource_id, 0.0) + duration_hours(booking.start, booking.end)

    totals: dict[str, ResourceWorkloadTotal] = {}
    for resource_id, hours in raw.items():
        # Round first: the limit applies to the figure users see.
        rounded = round_half_up(hours, 1)
        totals[resource_id] = ResourceWorkloadTotal(
            resource_id=resource_id,
            total_hours=rounded,
            is_over=rounded > limit_hours,
        )
    return totals


def warning_id(resource_id: str, window_start: datetime) -> str:
    return f"warning-{resource_id}-{epoch_millis(window_start)}"


def generate_warnings(
    totals: Mapping[str, ResourceWorkloadTotal],
    window_start: datetime,
    window_end: datetime,
) -> list[WarningEvent]:
    """One all-day background marker per overloaded resource.

    The marker spans from the start of ``window_start``'s day up to (not
    including) the day after ``window_end``.
    """
    day_start = datetime.combine(window_start.date(), time.min, tzinfo=window_start.tzinfo)
    next_day = datetime.combine(window_end.date() + timedelta(days=1), time.min, tzinfo=window_end.tzinfo)

    warnings: list[WarningEvent] = []
    for resource_id, total in totals.items():
        if not total.is_over:
            continue
        hours = f"{total.total_hours:.1f}"
        warnings.append(
            WarningEvent(
                id=warning_id(resource_id, window_start),
                resource_id=resource_id,
                start=day_start,
                end=next_day,
                title=f"Overload warning ({hours}h)",
                total_hours=total.total_hours,
                plan_id=f"warning-{resource_id}",
                description=f"Resource overload: {hours} hours",
            )
        )

    if warnings:
        logger.info("Generated %d overload warning(s) for %s", len(warnings), day_start.date())
    return warnings
