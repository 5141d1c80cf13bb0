"""Stand-alone payroll arithmetic shared by the calculation service and reports."""

from __future__ import annotations

from datetime import timedelta
from decimal import ROUND_HALF_UP
from decimal import Decimal

from pyrol.org.models import DEFAULT_WORKING_DAYS
from pyrol.org.models import WEEKDAY_NAMES

CENTAVO = Decimal("0.01")
WORK_DAYS_PER_MONTH = 22
HOURS_PER_DAY = 8
SIMPLE_OVERTIME_MULTIPLIER = Decimal("1.25")

DEFAULT_DEDUCTION_RATES = {
    "sss": Decimal("4.5"),  # percent of basic pay
    "philhealth": Decimal("2.75"),  # percent of basic pay
    "pagibig": Decimal(100),  # fixed pesos
    "tax": Decimal(15),  # percent of taxable income
}


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTAVO, rounding=ROUND_HALF_UP)


def calculate_employee_payroll(
    basic_salary, attendance_records, rates=None
) -> dict[str, Decimal]:
    """Flat-rate payroll estimate for a monthly employee.

    ``attendance_records`` is an iterable of mappings carrying
    ``overtime_hours``. Overtime is paid at 1.25x an hourly rate derived from a
    22 day, 8 hour month; tax is a flat rate on earnings net of contributions.
    """
    rates = {**DEFAULT_DEDUCTION_RATES, **(rates or {})}
    basic_pay = Decimal(str(basic_salary))
    hourly = basic_pay / (WORK_DAYS_PER_MONTH * HOURS_PER_DAY)
    overtime_hours = sum(
        (Decimal(str(r.get("overtime_hours", 0))) for r in attendance_records),
        Decimal(0),
    )
    overtime_pay = overtime_hours * hourly * SIMPLE_OVERTIME_MULTIPLIER
    total_earnings = basic_pay + overtime_pay

    sss = basic_pay * rates["sss"] / 100
    philhealth = basic_pay * rates["philhealth"] / 100
    pagibig = rates["pagibig"]
    taxable = total_earnings - sss - philhealth - pagibig
    tax = taxable * rates["tax"] / 100
    total_deductions = sss + philhealth + pagibig + tax

    return {
        "basic_pay": money(basic_pay),
        "overtime_pay": money(overtime_pay),
        "total_earnings": money(total_earnings),
        "sss_deduction": money(sss),
        "philhealth_deduction": money(philhealth),
        "pagibig_deduction": money(pagibig),
        "tax_deduction": money(tax),
        "total_deductions": money(total_deductions),
        "net_pay": money(total_earnings - total_deductions),
    }


def format_currency(amount) -> str:
    return f"₱{money(amount):,.2f}"


def work_days_in_period(start, end, working_days_csv: str | None = None) -> int:
    """Count the dates from ``start`` to ``end`` inclusive whose weekday is listed."""
    listed = {
        day.strip().upper()
        for day in (working_days_csv or DEFAULT_WORKING_DAYS).split(",")
        if day.strip()
    }
    count = 0
    current = start
    while current <= end:
        if WEEKDAY_NAMES[current.weekday()] in listed:
            count += 1
        current += timedelta(days=1)
    return count
