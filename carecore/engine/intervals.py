"""
Interval algebra shared by the overlap checker and the workload aggregator.

Intervals are half-open: ``[start, end)``. Two intervals that only touch
(one ends exactly when the other starts) do not overlap. Naive datetimes
are interpreted as UTC so mixed naive/aware input never raises.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone

DEFAULT_UTC_OFFSET = "+09:00"

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalise a potentially-naive timestamp to UTC-aware."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_instant(value: datetime | str | None) -> datetime | None:
    """Accept a datetime or an ISO-8601 string; ``None`` when unusable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    text = str(value).strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def overlaps(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """``True`` iff ``[start_a, end_a)`` and ``[start_b, end_b)`` intersect."""
    s1, e1 = ensure_utc(start_a), ensure_utc(end_a)
    s2, e2 = ensure_utc(start_b), ensure_utc(end_b)
    return s1 < e2 and s2 < e1


def duration_hours(start: datetime, end: datetime) -> float:
    """Length of ``[start, end)`` in hours; malformed (negative) spans clamp to 0."""
    seconds = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    return max(0.0, seconds / 3600)


def round_half_up(value: float, digits: int) -> float:
    """Round with halves going up, independent of binary float ties."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def epoch_millis(dt: datetime) -> int:
    return (ensure_utc(dt) - _EPOCH) // timedelta(milliseconds=1)


def parse_utc_offset(offset: str) -> timezone | None:
    """``"+09:00"`` -> ``timezone(timedelta(hours=9))``; ``None`` when malformed."""
    match = _OFFSET_RE.match((offset or "").strip())
    if not match:
        return None
    sign, hours, minutes = match.groups()
    if int(hours) > 23 or int(minutes) > 59:
        return None
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    return timezone(-delta if sign == "-" else delta)


def to_facility_time(dt: datetime, utc_offset: str = DEFAULT_UTC_OFFSET) -> datetime:
    """Convert an absolute instant to facility wall-clock time.

    Falls back to UTC when the configured offset is malformed.
    """
    tz = parse_utc_offset(utc_offset) or timezone.utc
    return ensure_utc(dt).astimezone(tz)
