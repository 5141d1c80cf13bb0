from datetime import date
from datetime import datetime
from decimal import Decimal

import pytest
from django.utils import timezone

from pyrol.attendance.models import Attendance
from pyrol.dashboard import selectors
from pyrol.org.models import Department
from pyrol.payroll.models import PayrollItem
from pyrol.payroll.models import PayrollPeriod
from pyrol.utils.dates import month_start
from tests.factories import create_employee
from tests.factories import create_salary_grade

pytestmark = pytest.mark.django_db

TODAY = date(2025, 3, 12)


def _at(day, hour):
    return timezone.make_aware(datetime(day.year, day.month, day.day, hour))


def _punch(employee, day, *, status=Attendance.Status.PRESENT, overtime=0):
    return Attendance.objects.create(
        employee=employee,
        date=day,
        time_in=_at(day, 8),
        time_out=_at(day, 17),
        status=status,
        overtime_minutes=overtime,
    )


@pytest.fixture
def staff():
    it = Department.objects.create(name="IT")
    Department.objects.create(name="HR")
    grade = create_salary_grade("S1", "40000.00")
    first = create_employee(department=it, salary_grade=grade, first_name="Ana")
    second = create_employee(department=it, salary_grade=grade, first_name="Ben")
    create_employee(department=it, is_active=False)
    return it, first, second


@pytest.mark.parametrize(
    ("months_back", "expected"),
    [(0, date(2025, 3, 1)), (1, date(2025, 2, 1)), (3, date(2024, 12, 1))],
)
def test_month_start(months_back, expected):
    assert month_start(TODAY, months_back) == expected


def test_company_dashboard(staff):
    _, first, second = staff
    _punch(first, TODAY, overtime=90)
    _punch(second, TODAY, status=Attendance.Status.LATE)
    _punch(first, date(2025, 3, 10))
    _punch(first, date(2025, 2, 20))
    # A row without a clock in is not attendance.
    Attendance.objects.create(employee=second, date=date(2025, 3, 11))
    period = PayrollPeriod.objects.create(
        name="Mar A", start_date=date(2025, 3, 1), end_date=date(2025, 3, 15)
    )
    PayrollItem.objects.create(
        period=period,
        employee=first,
        basic_pay=Decimal(20000),
        overtime_pay=Decimal(0),
        holiday_pay=Decimal(0),
        total_earnings=Decimal(1000),
        total_deductions=Decimal(200),
        net_pay=Decimal(800),
    )

    data = selectors.company_dashboard(TODAY)

    overview = data["overview"]
    assert overview["total_employees"] == 3  # noqa: PLR2004
    assert overview["active_employees"] == 2  # noqa: PLR2004
    assert overview["total_departments"] == 2  # noqa: PLR2004
    assert overview["attendance_rate"] == 100  # noqa: PLR2004
    # Three rows this month against one last month.
    assert overview["attendance_change"] == 200  # noqa: PLR2004
    assert overview["late_arrivals"] == 1
    assert overview["total_overtime_hours"] == 1.5  # noqa: PLR2004

    trends = data["attendance"]["trends"]
    assert [t["date"] for t in trends][0] == date(2025, 3, 6)
    assert trends[-1] == {"date": TODAY, "count": 2}
    assert sum(t["count"] for t in trends) == 3  # noqa: PLR2004

    assert data["payroll"] == {
        "total_earnings": Decimal(1000),
        "total_deductions": Decimal(200),
        "total_net_pay": Decimal(800),
        "period_active": True,
    }
    assert {d["name"]: d["employee_count"] for d in data["departments"]} == {
        "HR": 0,
        "IT": 2,
    }
    recent = data["recent_activity"]
    assert len(recent) == 4  # noqa: PLR2004
    assert recent[0]["department"] == "IT"


def test_company_dashboard_without_data():
    data = selectors.company_dashboard(TODAY)
    assert data["overview"]["attendance_rate"] == 0
    assert data["overview"]["attendance_change"] == 0
    assert data["payroll"]["period_active"] is False
    assert len(data["attendance"]["trends"]) == 7  # noqa: PLR2004


def test_employee_dashboard_stats(staff):
    _, first, _ = staff
    _punch(first, date(2025, 3, 3), overtime=30)
    _punch(first, date(2025, 3, 4), status=Attendance.Status.LATE)
    _punch(first, date(2025, 2, 28))

    data = selectors.employee_dashboard(first, TODAY)

    assert data["employee"]["department"] == {"name": "IT"}
    assert len(data["employee"]["attendances"]) == 3  # noqa: PLR2004
    assert data["stats"] == {
        "present_this_month": 1,
        "total_hours": 18.0,
        "overtime_hours": 0.5,
        "last_net_pay": Decimal(0),
    }


def test_department_head_dashboard(staff):
    _, first, second = staff
    _punch(first, TODAY, overtime=120)
    _punch(second, TODAY, status=Attendance.Status.LATE)
    _punch(second, date(2025, 1, 2))

    data = selectors.department_head_dashboard(first, TODAY)

    department = data["employee"]["department"]
    assert department["name"] == "IT"
    members = {m["first_name"]: m for m in department["employees"]}
    # Attendance older than thirty days is left out.
    assert len(members["Ben"]["attendances"]) == 1
    assert data["department_stats"] == {
        "total_employees": 3,
        "present_today": 1,
        "late_today": 1,
        "absent_today": 1,
        "total_overtime": 2.0,
    }


def test_analytics(staff):
    _, first, second = staff
    for day in (3, 4, 5):
        _punch(first, date(2025, 3, day))
    _punch(second, date(2025, 3, 3), status=Attendance.Status.LATE)
    _punch(second, date(2025, 2, 3))
    _punch(first, date(2024, 6, 3))

    data = selectors.analytics(TODAY)

    assert data["overview"]["attendance_this_month"] == 4  # noqa: PLR2004
    assert data["overview"]["attendance_last_month"] == 1
    assert data["overview"]["attendance_rate_change"] == 300  # noqa: PLR2004
    assert data["overview"]["late_arrivals_this_month"] == 1

    by_name = {d["name"]: d for d in data["departments"]}
    assert by_name["IT"]["employee_count"] == 2  # noqa: PLR2004
    assert by_name["IT"]["attendance_count"] == 4  # noqa: PLR2004
    assert by_name["IT"]["attendance_rate"] == 7  # noqa: PLR2004
    assert by_name["HR"]["attendance_rate"] == 0

    assert data["trends"]["attendance"] == [
        {"month": "2025-02", "attendance": 1, "employees": 1},
        {"month": "2025-03", "attendance": 4, "employees": 2},
    ]

    distribution = {d["department"]: d for d in data["salary"]["distribution"]}
    assert distribution["IT"]["total_salary_budget"] == Decimal(80000)
    assert distribution["IT"]["average_salary"] == Decimal(40000)
    assert data["salary"]["total_budget"] == Decimal(80000)
    assert data["salary"]["average_across_company"] == Decimal(20000)

    performers = data["top_performers"]
    assert [p["id"] for p in performers] == [first.pk, second.pk]
    assert performers[0]["attendance_rate"] == 10  # noqa: PLR2004
