"""Parsing helpers for query-string and body values."""

from datetime import date
from datetime import datetime


def parse_iso_date(value) -> date | None:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def month_start(day: date, months_back: int = 0) -> date:
    """First day of the month ``months_back`` calendar months before ``day``."""
    index = day.year * 12 + day.month - 1 - months_back
    return date(index // 12, index % 12 + 1, 1)
