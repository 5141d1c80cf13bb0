"""Payroll calculation, period closing and payslip assembly."""

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import Count
from django.db.models import Q
from django.db.models import Sum
from django.utils import timezone

from pyrol.employees.models import Employee
from pyrol.org.models import Holiday
from pyrol.payroll.models import CashAdvance
from pyrol.payroll.models import DeductionType
from pyrol.payroll.models import PayrollDeduction
from pyrol.payroll.models import PayrollItem
from pyrol.payroll.models import PayrollPeriod
from pyrol.payroll.tax import calculate_philippine_tax
from pyrol.payroll.utils import HOURS_PER_DAY
from pyrol.payroll.utils import money
from pyrol.payroll.utils import work_days_in_period

logger = logging.getLogger(__name__)

OVERTIME_MULTIPLIER = Decimal("1.5")
WITHHOLDING_TAX = "Withholding Tax"
CASH_ADVANCE = "Cash Advance"
ZERO = Decimal(0)


class PayrollError(ValueError):
    """A payroll operation that the period's state does not allow."""


class PayrollNotFound(PayrollError):
    pass


def _hours(minutes) -> Decimal:
    return Decimal(minutes) / 60


def _worked_hours(record) -> Decimal:
    seconds = int((record.time_out - record.time_in).total_seconds())
    return Decimal(max(seconds // 60, 0)) / 60


def _rates(employee: Employee, period: PayrollPeriod, attended) -> dict:
    """Basic pay, gross, daily and hourly rates for the employee's salary type."""
    rate = Decimal(employee.salary_rate)
    salary_type = employee.salary_type
    if salary_type == Employee.SalaryType.HOURLY:
        hourly = rate
        daily = hourly * HOURS_PER_DAY
        basic = sum((_worked_hours(a) * hourly for a in attended), ZERO)
        return {"basic": basic, "gross": basic, "daily": daily, "hourly": hourly}
    if salary_type == Employee.SalaryType.DAILY:
        daily = rate
        basic = daily * len(attended)
        return {
            "basic": basic,
            "gross": basic,
            "daily": daily,
            "hourly": daily / HOURS_PER_DAY,
        }
    # MONTHLY: periods are semi-monthly, so the period's basic is half the rate.
    basic = rate / 2
    schedule = employee.schedule
    expected_days = work_days_in_period(
        period.start_date,
        period.end_date,
        schedule.working_days if schedule else None,
    )
    daily = basic / expected_days if expected_days else ZERO
    return {
        "basic": basic,
        "gross": daily * len(attended),
        "daily": daily,
        "hourly": daily / HOURS_PER_DAY,
    }


def compute_earnings(employee: Employee, period: PayrollPeriod, attendances, holidays):
    """Earnings of one employee from their attendance rows inside the period."""
    attended = [a for a in attendances if a.time_in and a.time_out]
    rates = _rates(employee, period, attended)
    hourly = rates["hourly"]

    adjustment_minutes = 0
    if employee.schedule_id:
        adjustment_minutes = sum(a.late_minutes + a.undertime_minutes for a in attended)
    adjustments = _hours(adjustment_minutes) * hourly

    overtime_minutes = sum(a.overtime_minutes for a in attended)
    overtime_pay = _hours(overtime_minutes) * hourly * OVERTIME_MULTIPLIER

    worked_dates = {a.date for a in attended}
    holiday_pay = sum(
        (rates["daily"] * h.pay_rate for h in holidays if h.date in worked_dates),
        ZERO,
    )

    total = rates["gross"] + overtime_pay + holiday_pay - adjustments
    return {
        "basic_pay": rates["basic"],
        "overtime_pay": overtime_pay,
        "holiday_pay": holiday_pay,
        "total_earnings": max(ZERO, total),
        "total_worked_hours": sum((_worked_hours(a) for a in attended), ZERO),
        "total_overtime_hours": _hours(overtime_minutes),
    }


def _deduction_type(name: str, description: str) -> DeductionType:
    deduction_type, _ = DeductionType.objects.get_or_create(
        name=name,
        defaults={"description": description, "amount": ZERO, "is_fixed": False},
    )
    return deduction_type


def compute_deductions(employee, period, total_earnings, enrolments, advances):
    """Deduction lines for one employee; empty when the period has them disabled.

    Returns a list of ``(DeductionType, amount)`` pairs in booking order.
    """
    if not period.deductions_enabled:
        return []
    lines = []
    running = ZERO

    tax = money(calculate_philippine_tax(total_earnings, employee.salary_type).monthly_tax)
    if tax > 0:
        lines.append(
            (_deduction_type(WITHHOLDING_TAX, "Progressive income tax withheld"), tax)
        )
        running += tax

    for enrolment in enrolments:
        benefit = enrolment.benefit
        contribution = benefit.employee_contribution
        if not benefit.is_active or contribution <= 0:
            continue
        if total_earnings - (running + contribution) < 0:
            logger.debug(
                "Skipping %s for %s: net pay would go negative",
                benefit.name,
                employee.employee_id,
            )
            continue
        deduction_type = _deduction_type(
            benefit.name, f"Employee contribution for {benefit.name} benefit"
        )
        lines.append((deduction_type, contribution))
        running += contribution

    advance_total = sum((a.amount for a in advances), ZERO)
    if advance_total > 0:
        lines.append(
            (_deduction_type(CASH_ADVANCE, "Repayment of cash advances"), advance_total)
        )
    return lines


def _period_or_error(period_id) -> PayrollPeriod:
    try:
        return PayrollPeriod.objects.get(pk=period_id)
    except PayrollPeriod.DoesNotExist:
        msg = "Payroll period not found"
        raise PayrollNotFound(msg) from None


@transaction.atomic
def calculate_payroll(period_id, employee_ids=None) -> dict:
    """(Re)calculate the payroll items of a DRAFT period.

    Args:
        period_id: primary key of the ``PayrollPeriod``.
        employee_ids: optional employee primary keys; all active employees
            when omitted or empty.

    Returns:
        ``{"items": [PayrollItem, ...], "summary": {...}}``. Each item also
        carries ``total_worked_hours``, ``total_overtime_hours`` and
        ``cash_advance_total`` attributes.

    Raises:
        PayrollNotFound: the period does not exist.
        PayrollError: the period is closed.
    """
    period = _period_or_error(period_id)
    if period.is_closed:
        msg = "Cannot calculate payroll for closed period"
        raise PayrollError(msg)

    start, end = period.start_date, period.end_date
    employees = Employee.objects.filter(is_active=True).select_related(
        "schedule", "salary_grade"
    )
    if employee_ids:
        employees = employees.filter(pk__in=employee_ids)
    holidays = list(
        Holiday.objects.filter(is_active=True, date__gte=start, date__lte=end)
    )

    items = []
    for employee in employees.order_by("employee_id"):
        attendances = list(
            employee.attendances.filter(date__gte=start, date__lte=end)
        )
        advances = list(
            CashAdvance.objects.filter(
                employee=employee,
                is_paid=False,
                date_issued__gte=start,
                date_issued__lte=end,
            )
        )
        enrolments = (
            employee.benefits.filter(is_active=True)
            .filter(Q(end_date__isnull=True) | Q(end_date__gte=start))
            .select_related("benefit")
            .order_by("id")
        )

        earnings = compute_earnings(employee, period, attendances, holidays)
        total_earnings = money(earnings["total_earnings"])
        lines = compute_deductions(
            employee, period, total_earnings, enrolments, advances
        )
        total_deductions = money(sum((amount for _, amount in lines), ZERO))

        item, _ = PayrollItem.objects.update_or_create(
            employee=employee,
            period=period,
            defaults={
                "basic_pay": money(earnings["basic_pay"]),
                "overtime_pay": money(earnings["overtime_pay"]),
                "holiday_pay": money(earnings["holiday_pay"]),
                "total_earnings": total_earnings,
                "total_deductions": total_deductions,
                "net_pay": money(max(ZERO, total_earnings - total_deductions)),
            },
        )
        item.deductions.all().delete()
        PayrollDeduction.objects.bulk_create(
            PayrollDeduction(
                payroll_item=item, deduction_type=deduction_type, amount=money(amount)
            )
            for deduction_type, amount in lines
        )
        if period.deductions_enabled and advances:
            CashAdvance.objects.filter(pk__in=[a.pk for a in advances]).update(
                is_paid=True
            )

        item.total_worked_hours = round(float(earnings["total_worked_hours"]), 2)
        item.total_overtime_hours = round(float(earnings["total_overtime_hours"]), 2)
        item.cash_advance_total = money(sum((a.amount for a in advances), ZERO))
        items.append(item)

    summary = {
        "total_employees": len(items),
        "total_earnings": money(sum((i.total_earnings for i in items), ZERO)),
        "total_deductions": money(sum((i.total_deductions for i in items), ZERO)),
        "total_net_pay": money(sum((i.net_pay for i in items), ZERO)),
    }
    logger.info(
        "Payroll calculated for period %s: %s employees, net %s",
        period.pk,
        summary["total_employees"],
        summary["total_net_pay"],
    )
    return {"period": period, "items": items, "summary": summary}


def period_totals(period: PayrollPeriod) -> dict:
    totals = period.payroll_items.aggregate(
        total_employees=Count("id"),
        total_earnings=Sum("total_earnings"),
        total_deductions=Sum("total_deductions"),
        total_net_pay=Sum("net_pay"),
    )
    return {key: value or ZERO for key, value in totals.items()}


@transaction.atomic
def close_period(period_id) -> tuple[PayrollPeriod, dict]:
    period = (
        PayrollPeriod.objects.select_for_update().filter(pk=period_id).first()
    )
    if period is None:
        msg = "Payroll period not found"
        raise PayrollNotFound(msg)
    if period.is_closed:
        msg = "Payroll period is already closed"
        raise PayrollError(msg)
    if not period.payroll_items.exists():
        msg = (
            "Cannot close payroll period without payroll items. "
            "Please calculate payroll first."
        )
        raise PayrollError(msg)
    period.status = PayrollPeriod.Status.CLOSED
    period.save(update_fields=["status", "updated_at"])
    totals = period_totals(period)
    logger.info("Payroll period %s closed", period.pk)
    return period, totals


def set_deductions_enabled(period_id, enabled: bool) -> PayrollPeriod:
    period = _period_or_error(period_id)
    period.deductions_enabled = enabled
    period.save(update_fields=["deductions_enabled", "updated_at"])
    logger.info(
        "Deductions %s for payroll period %s",
        "enabled" if enabled else "disabled",
        period.pk,
    )
    return period


def build_payslip(item: PayrollItem) -> dict:
    """Everything a client needs to render one payslip."""
    employee = item.employee
    period = item.period
    department = employee.department
    deductions = [
        {
            "id": d.pk,
            "name": d.deduction_type.name,
            "description": d.deduction_type.description,
            "amount": d.amount,
        }
        for d in item.deductions.select_related("deduction_type")
    ]
    company = settings.PYROL_COMPANY_NAME
    return {
        "company_name": company,
        "company_full_name": f"{company.upper()} - EMPLOYEE PAYROLL MANAGEMENT SYSTEM",
        "employee": {
            "id": employee.pk,
            "employee_id": employee.employee_id,
            "name": employee.full_name,
            "position": employee.position,
            "department": department.name if department else None,
            "salary_type": employee.salary_type,
        },
        "period": {
            "id": period.pk,
            "name": period.name,
            "start_date": period.start_date,
            "end_date": period.end_date,
            "status": period.status,
            "is_thirteenth_month": period.is_thirteenth_month,
        },
        "earnings": {
            "basic_pay": item.basic_pay,
            "overtime_pay": item.overtime_pay,
            "holiday_pay": item.holiday_pay,
            "gross_pay": item.total_earnings,
        },
        "deductions": deductions,
        "total_deductions": item.total_deductions,
        "net_pay": item.net_pay,
        "generated_at": timezone.now(),
    }
