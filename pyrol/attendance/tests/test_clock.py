from datetime import date
from datetime import timedelta

import pytest

from pyrol.attendance.clock import PunchError
from pyrol.attendance.clock import apply_punch
from pyrol.attendance.models import Attendance
from pyrol.attendance.models import PunchType
from pyrol.attendance.timecalc import at_local
from tests.factories import create_employee
from tests.factories import create_schedule

pytestmark = pytest.mark.django_db

DAY = date(2025, 3, 10)


def _at(hhmm):
    return at_local(DAY, hhmm)


@pytest.fixture
def employee():
    return create_employee(schedule=create_schedule(time_in="08:00", time_out="17:00"))


def test_clock_in_on_time_is_present(employee):
    record = apply_punch(employee, PunchType.IN, now=_at("07:55"))
    assert record.date == DAY
    assert record.status == Attendance.Status.PRESENT
    assert record.late_minutes == 0


def test_clock_in_late_counts_whole_minutes(employee):
    record = apply_punch(employee, PunchType.IN, now=_at("08:05") + timedelta(seconds=40))
    assert record.status == Attendance.Status.LATE
    assert record.late_minutes == 5  # noqa: PLR2004


def test_clock_in_twice_is_rejected(employee):
    apply_punch(employee, PunchType.IN, now=_at("08:00"))
    with pytest.raises(PunchError, match="Already clocked in today"):
        apply_punch(employee, PunchType.IN, now=_at("08:10"))
    assert Attendance.objects.filter(employee=employee).count() == 1


def test_clock_in_fills_existing_row_without_time_in(employee):
    Attendance.objects.create(employee=employee, date=DAY, notes="pre-created")
    record = apply_punch(employee, PunchType.IN, now=_at("08:00"))
    assert record.notes == "pre-created"
    assert record.time_in == _at("08:00")


def test_clock_out_requires_clock_in(employee):
    with pytest.raises(PunchError, match="Must clock in first"):
        apply_punch(employee, PunchType.OUT, now=_at("17:00"))


def test_clock_out_records_overtime(employee):
    apply_punch(employee, PunchType.IN, now=_at("08:00"))
    record = apply_punch(employee, PunchType.OUT, now=_at("18:30"))
    assert record.overtime_minutes == 90  # noqa: PLR2004
    assert record.undertime_minutes == 0


def test_clock_out_records_undertime(employee):
    apply_punch(employee, PunchType.IN, now=_at("08:00"))
    record = apply_punch(employee, PunchType.OUT, now=_at("16:15"))
    assert record.undertime_minutes == 45  # noqa: PLR2004
    assert record.overtime_minutes == 0


def test_clock_out_twice_is_rejected(employee):
    apply_punch(employee, PunchType.IN, now=_at("08:00"))
    apply_punch(employee, PunchType.OUT, now=_at("17:00"))
    with pytest.raises(PunchError, match="Already clocked out today"):
        apply_punch(employee, PunchType.OUT, now=_at("17:05"))


def test_without_schedule_no_minutes_are_counted():
    employee = create_employee()
    record = apply_punch(employee, PunchType.IN, now=_at("11:00"))
    assert record.status == Attendance.Status.PRESENT
    record = apply_punch(employee, PunchType.OUT, now=_at("12:00"))
    assert (record.overtime_minutes, record.undertime_minutes) == (0, 0)


def test_break_cycle_records_break_minutes(employee):
    apply_punch(employee, PunchType.IN, now=_at("08:00"))
    apply_punch(employee, PunchType.BREAK_OUT, now=_at("12:00"))
    record = apply_punch(employee, PunchType.BREAK_IN, now=_at("12:45"))
    assert record.break_minutes == 45  # noqa: PLR2004


@pytest.mark.parametrize(
    ("punches", "punch", "message"),
    [
        ([], PunchType.BREAK_OUT, "Must clock in first before taking a break"),
        ([PunchType.BREAK_OUT], PunchType.BREAK_OUT, "Already on break"),
        ([PunchType.OUT], PunchType.BREAK_OUT, "Cannot take break after clocking out"),
        ([], PunchType.BREAK_IN, "Must clock in first"),
        ([PunchType.OUT], PunchType.BREAK_IN, "Must go on break first"),
        (
            [PunchType.BREAK_OUT, PunchType.BREAK_IN],
            PunchType.BREAK_IN,
            "Already returned from break",
        ),
        (
            [PunchType.BREAK_OUT, PunchType.OUT],
            PunchType.BREAK_IN,
            "Cannot return from break after clocking out",
        ),
    ],
)
def test_break_rules(employee, punches, punch, message):
    times = iter(["09:00", "10:00", "11:00"])
    if punches:
        apply_punch(employee, PunchType.IN, now=_at("08:00"))
    for earlier in punches:
        apply_punch(employee, earlier, now=_at(next(times)))
    with pytest.raises(PunchError, match=message):
        apply_punch(employee, punch, now=_at("13:00"))


def test_unknown_punch_type_is_rejected(employee):
    with pytest.raises(PunchError):
        apply_punch(employee, "LUNCH", now=_at("12:00"))
