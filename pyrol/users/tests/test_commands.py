from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from pyrol.attendance.models import Attendance
from pyrol.employees.models import Employee
from pyrol.org.models import Department
from pyrol.payroll.models import DeductionType
from pyrol.users.models import User

pytestmark = pytest.mark.django_db


def test_seed_loads_demo_accounts():
    out = StringIO()
    call_command("seed_pyrol", stdout=out)

    assert set(User.objects.values_list("email", "role")) == {
        ("admin@pyrol.com", "ADMIN"),
        ("depthead@pyrol.com", "DEPARTMENT_HEAD"),
        ("employee@pyrol.com", "EMPLOYEE"),
    }
    assert User.objects.get(email="admin@pyrol.com").check_password("admin123")
    assert set(Employee.objects.values_list("employee_id", flat=True)) == {
        "ADMIN001",
        "DEPT001",
        "EMP001",
    }
    it = Department.objects.get(name="IT")
    assert it.head.employee_id == "DEPT001"
    assert DeductionType.objects.count() == 4  # noqa: PLR2004
    assert "Seeded 3 employees" in out.getvalue()


def test_seed_with_it_staff_and_attendance_range():
    # 2025-03-07 is a Friday, so the range holds two weekdays.
    call_command(
        "seed_pyrol",
        "--it-staff",
        "2",
        "--start",
        "2025-03-07",
        "--end",
        "2025-03-10",
        "--seed",
        "7",
        stdout=StringIO(),
    )
    assert set(
        Employee.objects.filter(employee_id__startswith="IT").values_list(
            "employee_id", flat=True
        )
    ) == {"IT001", "IT002"}
    assert Attendance.objects.count() == 4  # noqa: PLR2004
    for row in Attendance.objects.all():
        assert (row.status == "LATE") == (row.late_minutes > 0)


def test_seed_is_repeatable():
    call_command("seed_pyrol", "--it-staff", "1", stdout=StringIO())
    call_command("seed_pyrol", "--it-staff", "1", stdout=StringIO())
    assert Employee.objects.count() == 4  # noqa: PLR2004


def test_seed_rejects_bad_range():
    with pytest.raises(CommandError):
        call_command(
            "seed_pyrol", "--start", "2025-03-10", "--end", "2025-03-01", stdout=StringIO()
        )
