"""Punch handling for the daily attendance record.

Each employee has at most one ``Attendance`` row per local date. A punch moves
that row through IN -> (BREAK_OUT -> BREAK_IN) -> OUT; out-of-order punches
raise ``PunchError`` with the message shown to the user.
"""

from __future__ import annotations

import logging

from django.db import IntegrityError
from django.db import transaction
from django.utils import timezone

from pyrol.attendance.models import Attendance
from pyrol.attendance.models import PunchType
from pyrol.attendance.timecalc import at_local
from pyrol.attendance.timecalc import whole_minutes_between

logger = logging.getLogger(__name__)


class PunchError(ValueError):
    """A punch that the current state of the day's record does not allow."""


def _clock_in(employee, record, now):
    if record is not None and record.time_in:
        raise PunchError("Already clocked in today")
    if record is None:
        record = Attendance(employee=employee, date=timezone.localdate(now))
    record.time_in = now
    record.late_minutes = 0
    record.status = Attendance.Status.PRESENT
    schedule = employee.schedule
    if schedule is not None:
        scheduled = at_local(record.date, schedule.time_in)
        if now > scheduled:
            record.late_minutes = whole_minutes_between(scheduled, now)
            record.status = Attendance.Status.LATE
    return record


def _clock_out(employee, record, now):
    if record is None or not record.time_in:
        raise PunchError("Must clock in first")
    if record.time_out:
        raise PunchError("Already clocked out today")
    record.time_out = now
    record.overtime_minutes = 0
    record.undertime_minutes = 0
    schedule = employee.schedule
    if schedule is not None:
        scheduled_end = at_local(record.date, schedule.time_out)
        if now > scheduled_end:
            record.overtime_minutes = whole_minutes_between(scheduled_end, now)
        elif now < scheduled_end:
            record.undertime_minutes = whole_minutes_between(now, scheduled_end)
    return record


def _break_out(employee, record, now):
    if record is None or not record.time_in:
        raise PunchError("Must clock in first before taking a break")
    if record.break_out and not record.break_in:
        raise PunchError("Already on break")
    if record.time_out:
        raise PunchError("Cannot take break after clocking out")
    record.break_out = now
    return record


def _break_in(employee, record, now):
    if record is None or not record.time_in:
        raise PunchError("Must clock in first")
    if not record.break_out:
        raise PunchError("Must go on break first")
    if record.break_in:
        raise PunchError("Already returned from break")
    if record.time_out:
        raise PunchError("Cannot return from break after clocking out")
    record.break_in = now
    record.break_minutes = whole_minutes_between(record.break_out, now)
    return record


_HANDLERS = {
    PunchType.IN: _clock_in,
    PunchType.OUT: _clock_out,
    PunchType.BREAK_OUT: _break_out,
    PunchType.BREAK_IN: _break_in,
}


def apply_punch(employee, punch, now=None) -> Attendance:
    """Apply one punch for ``employee`` and return the saved record.

    Args:
        employee: the ``Employee`` punching.
        punch: a ``PunchType`` value.
        now: aware datetime of the punch; defaults to ``timezone.now()``.

    Raises:
        PunchError: when the punch is not allowed in the record's state.
    """
    try:
        handler = _HANDLERS[PunchType(punch)]
    except ValueError:
        raise PunchError("Invalid attendance type") from None
    now = now or timezone.now()
    today = timezone.localdate(now)
    try:
        with transaction.atomic():
            record = (
                Attendance.objects.select_for_update()
                .filter(employee=employee, date=today)
                .first()
            )
            record = handler(employee, record, now)
            record.save()
    except IntegrityError:
        # A concurrent IN created the row between our read and our insert.
        raise PunchError("Already clocked in today") from None
    logger.info(
        "Punch %s recorded for employee %s on %s",
        punch,
        employee.employee_id,
        today,
    )
    return record
