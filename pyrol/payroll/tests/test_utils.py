from datetime import date
from decimal import Decimal

from pyrol.payroll.utils import calculate_employee_payroll
from pyrol.payroll.utils import format_currency
from pyrol.payroll.utils import money
from pyrol.payroll.utils import work_days_in_period


def test_money_rounds_half_up():
    assert money("3092.625") == Decimal("3092.63")
    assert money(1) == Decimal("1.00")


def test_format_currency():
    assert format_currency(1234.5) == "₱1,234.50"
    assert format_currency(Decimal("1000000")) == "₱1,000,000.00"


def test_employee_payroll_with_default_rates():
    result = calculate_employee_payroll(
        22000, [{"overtime_hours": 1.5}, {"overtime_hours": 0.5}, {}]
    )
    assert result == {
        "basic_pay": Decimal("22000.00"),
        "overtime_pay": Decimal("312.50"),
        "total_earnings": Decimal("22312.50"),
        "sss_deduction": Decimal("990.00"),
        "philhealth_deduction": Decimal("605.00"),
        "pagibig_deduction": Decimal("100.00"),
        "tax_deduction": Decimal("3092.63"),
        "total_deductions": Decimal("4787.63"),
        "net_pay": Decimal("17524.88"),
    }


def test_employee_payroll_rate_overrides():
    result = calculate_employee_payroll(
        10000, [], {"sss": Decimal(0), "philhealth": Decimal(0), "tax": Decimal(0)}
    )
    assert result["total_deductions"] == Decimal("100.00")
    assert result["net_pay"] == Decimal("9900.00")


def test_work_days_in_period():
    start, end = date(2025, 3, 1), date(2025, 3, 15)
    assert work_days_in_period(start, end) == 10  # noqa: PLR2004
    assert work_days_in_period(start, end, "SATURDAY") == 3  # noqa: PLR2004
    assert work_days_in_period(end, start) == 0
