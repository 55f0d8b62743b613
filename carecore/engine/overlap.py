"""
Interval overlap checker for bookings placed on a shared resource.

Decides whether a booking may be dropped (moved / resized) onto a resource,
or whether a fresh selection may become a new booking. Rejections are
returned as a ``DropDecision``; nothing here raises.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from carecore.engine.intervals import ensure_utc, overlaps
from carecore.schemas.scheduling import DropDecision, ProposedRange, ResourceBooking

logger = logging.getLogger(__name__)

REASON_INVALID_RANGE = "start must precede end"
REASON_ACTUALIZED = "booking with recorded actuals cannot be moved"
REASON_NO_RESOURCE = "no resource"
REASON_DUPLICATE = "duplicate time range for this resource"

ALLOWED = DropDecision(allowed=True)


def find_conflict(
    bookings: Iterable[ResourceBooking],
    resource_id: str,
    start: datetime,
    end: datetime,
    ignore_id: str | None = None,
) -> ResourceBooking | None:
    """Return the first booking on ``resource_id`` that overlaps ``[start, end)``."""
    for booking in bookings:
        if ignore_id is not None and booking.id == ignore_id:
            continue
        if booking.is_background:
            continue
        if booking.resource_id != resource_id:
            continue
        if booking.start is None or booking.end is None:
            continue
        if overlaps(start, end, booking.start, booking.end):
            return booking
    return None


def _valid_range(proposed: ProposedRange) -> bool:
    return ensure_utc(proposed.start) < ensure_utc(proposed.end)


def check_drop_allowed(
    candidate: ResourceBooking,
    proposed: ProposedRange,
    all_bookings: Iterable[ResourceBooking],
) -> DropDecision:
    """Can ``candidate`` be moved to ``proposed``?

    The drop target's resource wins over the booking's current one.
    """
    if not _valid_range(proposed):
        return DropDecision(allowed=False, reason=REASON_INVALID_RANGE)

    if candidate.actual_start is not None:
        return DropDecision(allowed=False, reason=REASON_ACTUALIZED)

    resource_id = proposed.resource_id if proposed.resource_id is not None else candidate.resource_id
    if not resource_id:
        return DropDecision(allowed=False, reason=REASON_NO_RESOURCE)

    conflict = find_conflict(all_bookings, resource_id, proposed.start, proposed.end, ignore_id=candidate.id)
    if conflict is not None:
        logger.debug("Drop of %s on %s blocked by %s", candidate.id, resource_id, conflict.id)
        return DropDecision(allowed=False, reason=REASON_DUPLICATE)

    return ALLOWED


def check_select_allowed(
    proposed: ProposedRange,
    all_bookings: Iterable[ResourceBooking],
) -> DropDecision:
    """Can a brand-new booking be created over ``proposed``?"""
    if not _valid_range(proposed):
        return DropDecision(allowed=False, reason=REASON_INVALID_RANGE)

    if not proposed.resource_id:
        return DropDecision(allowed=False, reason=REASON_NO_RESOURCE)

    conflict = find_conflict(all_bookings, proposed.resource_id, proposed.start, proposed.end)
    if conflict is not None:
        logger.debug("Selection on %s blocked by %s", proposed.resource_id, conflict.id)
        return DropDecision(allowed=False, reason=REASON_DUPLICATE)

    return ALLOWED
