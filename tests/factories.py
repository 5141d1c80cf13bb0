from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from itertools import count
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model

from pyrol.employees.models import Employee
from pyrol.employees.models import SalaryGrade
from pyrol.org.models import Schedule

if TYPE_CHECKING:
    from pyrol.org.models import Department

User = get_user_model()

_sequence = count(1)


@dataclass
class RoleContext:
    user: User
    employee: Employee


def create_user(username: str, *, role: str = User.Role.EMPLOYEE) -> User:
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="TestPass123!",  # noqa: S106
        role=role,
    )


def create_schedule(
    name: str = "Day Shift", time_in: str = "08:00", time_out: str = "17:00"
) -> Schedule:
    schedule, _ = Schedule.objects.get_or_create(
        name=name, defaults={"time_in": time_in, "time_out": time_out}
    )
    return schedule


def create_salary_grade(
    grade: str = "A1", salary_rate: Decimal | str = "30000.00"
) -> SalaryGrade:
    salary_grade, _ = SalaryGrade.objects.get_or_create(
        grade=grade, defaults={"salary_rate": Decimal(str(salary_rate))}
    )
    return salary_grade


def create_employee(
    *,
    user: User | None = None,
    department: Department | None = None,
    schedule: Schedule | None = None,
    salary_grade: SalaryGrade | None = None,
    salary_type: str = Employee.SalaryType.MONTHLY,
    is_active: bool = True,
    **overrides,
) -> Employee:
    n = next(_sequence)
    fields = {
        "employee_id": f"EMP{n:03d}",
        "first_name": "Test",
        "last_name": f"Person{n}",
        "email": f"employee{n}@example.com",
        "position": "Staff",
        "hire_date": date(2024, 1, 15),
    }
    fields.update(overrides)
    return Employee.objects.create(
        user=user,
        department=department,
        schedule=schedule,
        salary_grade=salary_grade,
        salary_type=salary_type,
        is_active=is_active,
        **fields,
    )


def create_user_with_role(
    username: str,
    *,
    role: str = User.Role.EMPLOYEE,
    department: Department | None = None,
    schedule: Schedule | None = None,
    salary_grade: SalaryGrade | None = None,
) -> RoleContext:
    user = create_user(username, role=role)
    employee = create_employee(
        user=user,
        department=department,
        schedule=schedule,
        salary_grade=salary_grade,
        first_name=username.capitalize(),
        email=f"{username}.staff@example.com",
    )
    return RoleContext(user=user, employee=employee)
