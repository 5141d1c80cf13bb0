import io
from datetime import date
from datetime import datetime
from decimal import Decimal

import pytest
from django.utils import timezone
from openpyxl import load_workbook
from rest_framework import status

from pyrol.attendance.models import Attendance
from pyrol.audit.models import AuditLog
from pyrol.payroll.models import CashAdvance
from pyrol.payroll.models import DeductionType
from pyrol.payroll.models import PayrollItem
from pyrol.payroll.models import PayrollPeriod
from pyrol.payroll.services import calculate_payroll
from tests.factories import create_employee
from tests.factories import create_salary_grade

pytestmark = pytest.mark.django_db

PERIODS_URL = "/api/v1/payroll/periods/"
ITEMS_URL = "/api/v1/payroll/items/"
CALCULATE_URL = "/api/v1/payroll/calculate/"
PAYSLIP_URL = "/api/v1/payroll/generate-payslip/"
EXPORT_URL = "/api/v1/payroll/export/"
TOGGLE_URL = "/api/v1/payroll/periods/toggle-deductions/"
DEDUCTION_TYPES_URL = "/api/v1/payroll/deduction-types/"
CASH_ADVANCES_URL = "/api/v1/payroll/cash-advances/"


def _period(name="March 2025 A", start=date(2025, 3, 1), end=date(2025, 3, 15), **extra):
    return PayrollPeriod.objects.create(
        name=name, start_date=start, end_date=end, **extra
    )


def _worked_day(employee, day):
    Attendance.objects.create(
        employee=employee,
        date=date(2025, 3, day),
        time_in=timezone.make_aware(datetime(2025, 3, day, 8)),
        time_out=timezone.make_aware(datetime(2025, 3, day, 17)),
    )


@pytest.fixture
def calculated(employee_ctx):
    """A period with items for the signed-up employee and one colleague."""
    grade = create_salary_grade("P1", "30000.00")
    employee = employee_ctx.employee
    employee.salary_grade = grade
    employee.save()
    colleague = create_employee(salary_grade=grade)
    period = _period()
    for day in (3, 4):
        _worked_day(employee, day)
        _worked_day(colleague, day)
    calculate_payroll(period.pk)
    return period


class TestPeriods:
    def test_list_is_open_to_any_signed_in_user(self, employee_client, calculated):
        res = employee_client.get(PERIODS_URL)
        assert res.status_code == status.HTTP_200_OK
        (row,) = res.data["results"]
        assert row["name"] == "March 2025 A"
        assert row["employee_count"] == 2  # noqa: PLR2004
        assert Decimal(row["total_amount"]) == sum(
            PayrollItem.objects.values_list("net_pay", flat=True), Decimal(0)
        )
        assert len(row["payroll_items"]) == 2  # noqa: PLR2004

    def test_anonymous_is_rejected(self, api_client):
        assert api_client.get(PERIODS_URL).status_code == status.HTTP_401_UNAUTHORIZED

    def test_filters_and_sorting(self, admin_client):
        _period("Jan A", date(2025, 1, 1), date(2025, 1, 15))
        _period("Feb A", date(2025, 2, 1), date(2025, 2, 15), status="CLOSED")
        _period("Bonus", date(2025, 1, 1), date(2025, 12, 31), is_thirteenth_month=True)

        res = admin_client.get(PERIODS_URL, {"status": "closed"})
        assert [r["name"] for r in res.data["results"]] == ["Feb A"]

        res = admin_client.get(PERIODS_URL, {"search": "a"})
        assert {r["name"] for r in res.data["results"]} == {"Jan A", "Feb A"}

        res = admin_client.get(
            PERIODS_URL, {"sort_field": "start_date", "sort_direction": "asc"}
        )
        assert [r["name"] for r in res.data["results"]][-1] == "Feb A"

        res = admin_client.get(PERIODS_URL, {"min_employees": 1})
        assert res.data["results"] == []

    def test_create(self, admin_client):
        body = {"name": "April A", "start_date": "2025-04-01", "end_date": "2025-04-15"}
        res = admin_client.post(PERIODS_URL, body, format="json")
        assert res.status_code == status.HTTP_201_CREATED, res.data
        assert res.data["status"] == "DRAFT"
        assert res.data["deductions_enabled"] is True
        assert res.data["employee_count"] == 0

    def test_create_validates_dates_and_overlap(self, admin_client):
        _period()
        res = admin_client.post(
            PERIODS_URL,
            {"name": "Bad", "start_date": "2025-04-15", "end_date": "2025-04-15"},
            format="json",
        )
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data["detail"] == "End date must be after start date"

        res = admin_client.post(
            PERIODS_URL,
            {"name": "Overlap", "start_date": "2025-03-10", "end_date": "2025-03-25"},
            format="json",
        )
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data["detail"] == "Payroll period overlaps with existing period"

        res = admin_client.post(
            PERIODS_URL,
            {
                "name": "13th month",
                "start_date": "2025-01-01",
                "end_date": "2025-12-31",
                "is_thirteenth_month": True,
            },
            format="json",
        )
        assert res.status_code == status.HTTP_201_CREATED

    def test_employee_cannot_create(self, employee_client):
        body = {"name": "April A", "start_date": "2025-04-01", "end_date": "2025-04-15"}
        res = employee_client.post(PERIODS_URL, body, format="json")
        assert res.status_code == status.HTTP_401_UNAUTHORIZED

    def test_close(self, admin_client, calculated):
        url = f"{PERIODS_URL}{calculated.pk}/close/"
        res = admin_client.post(url)
        assert res.status_code == status.HTTP_200_OK, res.data
        assert res.data["period"]["status"] == "CLOSED"
        assert res.data["period"]["total_employees"] == 3  # noqa: PLR2004
        assert AuditLog.objects.filter(action="payroll_closed").exists()

        res = admin_client.post(url)
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data["detail"] == "Payroll period is already closed"

    def test_close_without_items_and_missing(self, admin_client):
        period = _period()
        res = admin_client.post(f"{PERIODS_URL}{period.pk}/close/")
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data["detail"].startswith("Cannot close payroll period")
        res = admin_client.post(f"{PERIODS_URL}{period.pk + 99}/close/")
        assert res.status_code == status.HTTP_404_NOT_FOUND

    def test_toggle_deductions(self, admin_client):
        period = _period()
        res = admin_client.put(
            TOGGLE_URL,
            {"payroll_period_id": period.pk, "deductions_enabled": False},
            format="json",
        )
        assert res.status_code == status.HTTP_200_OK, res.data
        assert res.data["detail"] == "Deductions disabled for payroll period"
        assert res.data["payroll_period"]["deductions_enabled"] is False
        period.refresh_from_db()
        assert period.deductions_enabled is False

        res = admin_client.put(
            TOGGLE_URL,
            {"payroll_period_id": period.pk + 99, "deductions_enabled": True},
            format="json",
        )
        assert res.status_code == status.HTTP_404_NOT_FOUND


class TestCalculate:
    def test_admin_calculates(self, admin_client, employee_ctx):
        period = _period()
        res = admin_client.post(
            CALCULATE_URL,
            {"payroll_period_id": period.pk, "employee_ids": [employee_ctx.employee.pk]},
            format="json",
        )
        assert res.status_code == status.HTTP_200_OK, res.data
        assert res.data["detail"] == "Payroll calculated successfully"
        assert res.data["summary"]["total_employees"] == 1
        assert res.data["summary"]["total_net_pay"] == "0.00"
        assert res.data["summary"]["total_earnings"] == "0.00"
        (item,) = res.data["payroll_items"]
        assert item["employee"]["id"] == employee_ctx.employee.pk
        assert item["total_worked_hours"] == 0
        assert AuditLog.objects.filter(action="payroll_calculated").count() == 1

    def test_closed_period_is_rejected(self, admin_client):
        period = _period(status="CLOSED")
        res = admin_client.post(
            CALCULATE_URL, {"payroll_period_id": period.pk}, format="json"
        )
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data["detail"] == "Cannot calculate payroll for closed period"

    def test_missing_period(self, admin_client):
        res = admin_client.post(CALCULATE_URL, {"payroll_period_id": 999}, format="json")
        assert res.status_code == status.HTTP_404_NOT_FOUND

    def test_employee_role_is_unauthorized(self, employee_client):
        res = employee_client.post(CALCULATE_URL, {"payroll_period_id": 1}, format="json")
        assert res.status_code == status.HTTP_401_UNAUTHORIZED


class TestItemsAndPayslips:
    def test_employee_sees_only_own_items(self, employee_client, employee_ctx, calculated):
        res = employee_client.get(ITEMS_URL)
        assert res.status_code == status.HTTP_200_OK
        assert [r["employee"]["id"] for r in res.data["results"]] == [
            employee_ctx.employee.pk
        ]
        assert res.data["results"][0]["payroll_period"]["name"] == "March 2025 A"

    def test_admin_filters_items(self, admin_client, employee_ctx, calculated):
        res = admin_client.get(ITEMS_URL, {"payroll_period_id": calculated.pk})
        assert res.data["pagination"]["total"] == 3  # noqa: PLR2004
        res = admin_client.get(ITEMS_URL, {"search": "employee"})
        assert [r["employee"]["id"] for r in res.data["results"]] == [
            employee_ctx.employee.pk
        ]

    def test_payslip_for_own_item(self, employee_client, employee_ctx, calculated):
        item = PayrollItem.objects.get(employee=employee_ctx.employee)
        res = employee_client.post(
            PAYSLIP_URL, {"payroll_item_id": item.pk}, format="json"
        )
        assert res.status_code == status.HTTP_200_OK, res.data
        assert res.data["detail"] == "Payslip generated successfully"
        payslip = res.data["payslip_data"]
        assert payslip["employee"]["id"] == employee_ctx.employee.pk
        assert payslip["period"]["id"] == calculated.pk

    def test_payslip_of_someone_else_is_forbidden(self, employee_client, employee_ctx, calculated):
        item = PayrollItem.objects.exclude(employee=employee_ctx.employee).first()
        res = employee_client.post(
            PAYSLIP_URL, {"payroll_item_id": item.pk}, format="json"
        )
        assert res.status_code == status.HTTP_403_FORBIDDEN

    def test_missing_payslip(self, admin_client):
        res = admin_client.post(PAYSLIP_URL, {"payroll_item_id": 999}, format="json")
        assert res.status_code == status.HTTP_404_NOT_FOUND
        assert res.data["detail"] == "Payroll item not found"


class TestExport:
    def test_excel(self, admin_client, calculated):
        res = admin_client.post(
            EXPORT_URL, {"payroll_period_id": calculated.pk}, format="json"
        )
        assert res.status_code == status.HTTP_200_OK
        assert res["Content-Disposition"] == (
            'attachment; filename="payroll_report_March_2025_A.xlsx"'
        )
        wb = load_workbook(io.BytesIO(res.content))
        assert wb.sheetnames == ["Payroll Report", "Summary"]
        sheet = wb["Payroll Report"]
        assert sheet["B1"].value == "Employee ID"
        assert sheet.max_row == 4  # noqa: PLR2004
        assert wb["Summary"]["B1"].value == "March 2025 A"

    def test_csv(self, admin_client, calculated):
        res = admin_client.post(
            EXPORT_URL,
            {"payroll_period_id": calculated.pk, "format": "csv"},
            format="json",
        )
        assert res.status_code == status.HTTP_200_OK
        assert res["Content-Type"].startswith("text/csv")
        lines = res.content.decode().strip().splitlines()
        assert lines[0].startswith("No.,Employee ID,Employee Name")
        assert len(lines) == 4  # noqa: PLR2004

    def test_unknown_format_and_missing_period(self, admin_client, calculated):
        res = admin_client.post(
            EXPORT_URL,
            {"payroll_period_id": calculated.pk, "format": "pdf"},
            format="json",
        )
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        res = admin_client.post(EXPORT_URL, {"payroll_period_id": 999}, format="json")
        assert res.status_code == status.HTTP_404_NOT_FOUND


class TestDeductionTypesAndAdvances:
    def test_deduction_type_crud(self, admin_client):
        body = {"name": "SSS Contribution", "amount": "4.50", "is_fixed": False}
        res = admin_client.post(DEDUCTION_TYPES_URL, body, format="json")
        assert res.status_code == status.HTTP_201_CREATED, res.data

        res = admin_client.post(DEDUCTION_TYPES_URL, body, format="json")
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data["detail"] == "Deduction type already exists"

        pk = DeductionType.objects.get(name="SSS Contribution").pk
        res = admin_client.patch(
            f"{DEDUCTION_TYPES_URL}{pk}/", {"amount": "5.00"}, format="json"
        )
        assert res.status_code == status.HTTP_200_OK
        assert res.data["amount"] == "5.00"

        res = admin_client.delete(f"{DEDUCTION_TYPES_URL}{pk}/")
        assert res.status_code == status.HTTP_200_OK
        assert not DeductionType.objects.filter(pk=pk).exists()

    def test_cash_advance_crud(self, admin_client, employee_ctx):
        res = admin_client.post(
            CASH_ADVANCES_URL,
            {
                "employee_id": employee_ctx.employee.pk,
                "amount": "2500.00",
                "date_issued": "2025-03-05",
            },
            format="json",
        )
        assert res.status_code == status.HTTP_201_CREATED, res.data
        advance = CashAdvance.objects.get()
        assert advance.is_paid is False

        advance.is_paid = True
        advance.save()
        res = admin_client.delete(f"{CASH_ADVANCES_URL}{advance.pk}/")
        assert res.status_code == status.HTTP_400_BAD_REQUEST

    def test_resources_are_admin_only(self, employee_client):
        assert employee_client.get(DEDUCTION_TYPES_URL).status_code == 401  # noqa: PLR2004
        assert employee_client.get(CASH_ADVANCES_URL).status_code == 401  # noqa: PLR2004
