"""Epoch-millisecond timestamp helpers.

Orders store ``created_at`` as integer milliseconds since the Unix epoch.
"Local" always means the Django ``TIME_ZONE`` setting.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from datetime import timezone as dt_timezone
from typing import Tuple

from django.utils import timezone

EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


def now_millis() -> int:
    """Current time in epoch milliseconds."""
    return to_millis(timezone.now())


def to_millis(value: datetime) -> int:
    """Convert a datetime to epoch milliseconds.

    Naive datetimes are interpreted in the local time zone.
    """
    if timezone.is_naive(value):
        value = timezone.make_aware(value, timezone.get_current_timezone())
    return (value - EPOCH) // timedelta(milliseconds=1)


def from_millis(millis: int) -> datetime:
    """Convert epoch milliseconds to an aware datetime in the local time zone."""
    tz = timezone.get_current_timezone()
    return (EPOCH + timedelta(milliseconds=millis)).astimezone(tz)


def local_day_bounds(day: date) -> Tuple[int, int]:
    """Return inclusive ``(start, end)`` epoch-ms bounds of a local calendar day.

    ``end`` is one millisecond before the next local midnight, so the
    bounds are correct on DST transition days too.
    """
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(day, time.min), tz)
    next_start = timezone.make_aware(
        datetime.combine(day + timedelta(days=1), time.min), tz
    )
    return to_millis(start), to_millis(next_start) - 1
