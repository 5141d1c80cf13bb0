"""Clock arithmetic on "HH:MM" strings and aware datetimes."""

from __future__ import annotations

from datetime import date
from datetime import datetime
from datetime import time

from django.utils import timezone

MINUTES_PER_DAY = 24 * 60
STANDARD_SHIFT_HOURS = 8


def parse_hhmm(value: str) -> time:
    hours, minutes = (int(part) for part in value.split(":"))
    return time(hours, minutes)


def _to_minutes(value: str) -> int:
    parsed = parse_hhmm(value)
    return parsed.hour * 60 + parsed.minute


def working_hours(time_in: str, time_out: str) -> float:
    """Hours between two clock times; a time_out before time_in wraps overnight."""
    total = _to_minutes(time_out) - _to_minutes(time_in)
    if total < 0:
        total += MINUTES_PER_DAY
    return total / 60


def lateness_minutes(actual: str, scheduled: str) -> int:
    return max(_to_minutes(actual) - _to_minutes(scheduled), 0)


def overtime_hours(actual_hours: float, scheduled_hours: float = STANDARD_SHIFT_HOURS):
    return max(actual_hours - scheduled_hours, 0)


def format_time(value: str) -> str:
    """``"13:05"`` -> ``"1:05 PM"``."""
    hours, minutes = value.split(":")
    hour = int(hours)
    suffix = "PM" if hour >= 12 else "AM"  # noqa: PLR2004
    return f"{hour % 12 or 12}:{minutes} {suffix}"


def at_local(day: date, hhmm: str) -> datetime:
    """Aware datetime for ``hhmm`` on ``day`` in the current time zone."""
    naive = datetime.combine(day, parse_hhmm(hhmm))
    return timezone.make_aware(naive, timezone.get_current_timezone())


def whole_minutes_between(start: datetime, end: datetime) -> int:
    """Floor of the minutes from ``start`` to ``end`` (0 when end is earlier)."""
    seconds = (end - start).total_seconds()
    return int(seconds // 60) if seconds > 0 else 0
