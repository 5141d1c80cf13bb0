import logging

from celery import shared_task
from django.utils import timezone

from pyrol.attendance.models import Attendance
from pyrol.utils.dates import parse_iso_date

logger = logging.getLogger(__name__)


def clear_attendance_for(target_date) -> int:
    deleted, _ = Attendance.objects.filter(date=target_date).delete()
    logger.info("Cleared %s attendance records for %s", deleted, target_date)
    return deleted


@shared_task(name="attendance.clear_day")
def clear_day(date_iso: str | None = None) -> int:
    """Delete the attendance rows of one date.

    Args:
        date_iso: ISO date string (YYYY-MM-DD). Defaults to today in TIME_ZONE.

    Returns:
        Number of attendance records deleted.
    """
    if date_iso:
        target_date = parse_iso_date(date_iso)
        if target_date is None:
            msg = f"Invalid date: {date_iso!r}"
            raise ValueError(msg)
    else:
        target_date = timezone.localdate()
    return clear_attendance_for(target_date)
