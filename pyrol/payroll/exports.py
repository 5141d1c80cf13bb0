"""Payroll period reports as an Excel workbook or a CSV file."""

from __future__ import annotations

import csv
import io
import re

from openpyxl import Workbook
from openpyxl.styles import Alignment
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from pyrol.payroll.models import PayrollPeriod
from pyrol.payroll.services import period_totals

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_CONTENT_TYPE = "text/csv"

BASE_HEADERS = [
    "No.",
    "Employee ID",
    "Employee Name",
    "Department",
    "Position",
    "Basic Pay",
    "Overtime Pay",
    "Holiday Pay",
    "Gross Pay",
    "Total Deductions",
    "Net Pay",
]
FIRST_MONEY_COLUMN = BASE_HEADERS.index("Basic Pay") + 1


def report_filename(period: PayrollPeriod, extension: str) -> str:
    slug = re.sub(r"\s+", "_", period.name.strip())
    return f"payroll_report_{slug}.{extension}"


def report_rows(period: PayrollPeriod) -> tuple[list[str], list[list]]:
    """Header and one row per payroll item, plus a column per deduction type."""
    items = list(
        period.payroll_items.select_related(
            "employee", "employee__department"
        ).prefetch_related("deductions__deduction_type").order_by(
            "employee__employee_id"
        )
    )
    deduction_names = sorted(
        {d.deduction_type.name for item in items for d in item.deductions.all()}
    )
    header = BASE_HEADERS + deduction_names
    rows = []
    for number, item in enumerate(items, start=1):
        employee = item.employee
        by_name = {d.deduction_type.name: d.amount for d in item.deductions.all()}
        rows.append(
            [
                number,
                employee.employee_id,
                employee.full_name,
                employee.department.name if employee.department else "N/A",
                employee.position,
                item.basic_pay,
                item.overtime_pay,
                item.holiday_pay,
                item.total_earnings,
                item.total_deductions,
                item.net_pay,
                *(by_name.get(name, 0) for name in deduction_names),
            ]
        )
    return header, rows


def build_workbook(period: PayrollPeriod) -> bytes:
    header, rows = report_rows(period)
    wb = Workbook()
    ws = wb.active
    ws.title = "Payroll Report"
    ws.append(header)
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(vertical="center")
    for row in rows:
        ws.append(row)
    for i, title in enumerate(header, start=1):
        ws.column_dimensions[get_column_letter(i)].width = max(12, len(title) + 2)
    for row in ws.iter_rows(min_row=2, min_col=FIRST_MONEY_COLUMN):
        for cell in row:
            cell.number_format = "#,##0.00"

    totals = period_totals(period)
    summary = wb.create_sheet("Summary")
    summary_rows = [
        ("Period", period.name),
        ("Start Date", period.start_date.isoformat()),
        ("End Date", period.end_date.isoformat()),
        ("Status", period.status),
        ("Total Employees", totals["total_employees"]),
        ("Total Gross Pay", totals["total_earnings"]),
        ("Total Deductions", totals["total_deductions"]),
        ("Total Net Pay", totals["total_net_pay"]),
    ]
    for label, value in summary_rows:
        summary.append([label, value])
        summary.cell(row=summary.max_row, column=1).font = Font(bold=True)
    summary.column_dimensions["A"].width = 20
    summary.column_dimensions["B"].width = 28

    buff = io.BytesIO()
    wb.save(buff)
    return buff.getvalue()


def build_csv(period: PayrollPeriod) -> str:
    header, rows = report_rows(period)
    buff = io.StringIO()
    writer = csv.writer(buff)
    writer.writerow(header)
    writer.writerows(rows)
    return buff.getvalue()
