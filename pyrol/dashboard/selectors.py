"""Read-only aggregates behind the dashboard and analytics endpoints.

Every figure comes from ORM aggregates; "attendance" always means rows with a
clock-in.
"""

from __future__ import annotations

from datetime import datetime
from datetime import time
from datetime import timedelta
from decimal import Decimal

from django.db.models import Count
from django.db.models import DecimalField
from django.db.models import Prefetch
from django.db.models import Q
from django.db.models import Sum
from django.db.models import Value
from django.db.models.functions import Coalesce
from django.db.models.functions import TruncMonth
from django.utils import timezone

from pyrol.attendance.models import Attendance
from pyrol.employees.models import Employee
from pyrol.org.models import Department
from pyrol.payroll.models import PayrollItem
from pyrol.payroll.models import PayrollPeriod
from pyrol.utils.dates import month_start

ZERO = Decimal(0)
RECENT_ACTIVITY = 10
TREND_DAYS = 7
TREND_MONTHS = 6
PERFORMER_SLOTS = 5
DAYS_IN_MONTH = 30
EMPLOYEE_HISTORY = 30

attended = Attendance.objects.filter(time_in__isnull=False)


def _percent_change(current: int, previous: int) -> int:
    if not previous:
        return 0
    return round((current - previous) / previous * 100)


def _overtime_hours(queryset) -> float:
    minutes = queryset.aggregate(total=Sum("overtime_minutes"))["total"] or 0
    return round(minutes / 60, 1)


def _money_sum(field: str, *, prefix: str = ""):
    return Coalesce(
        Sum(f"{prefix}{field}"),
        Value(ZERO),
        output_field=DecimalField(max_digits=16, decimal_places=2),
    )


def attendance_row(record: Attendance) -> dict:
    return {
        "id": record.pk,
        "date": record.date,
        "time_in": record.time_in,
        "time_out": record.time_out,
        "status": record.status,
        "late_minutes": record.late_minutes,
        "overtime_minutes": record.overtime_minutes,
    }


def payroll_row(item: PayrollItem, *, with_dates: bool = False) -> dict:
    period = {"name": item.period.name, "status": item.period.status}
    if with_dates:
        period["start_date"] = item.period.start_date
        period["end_date"] = item.period.end_date
    return {
        "id": item.pk,
        "basic_pay": item.basic_pay,
        "net_pay": item.net_pay,
        "payroll_period": period,
    }


def company_dashboard(today=None) -> dict:
    today = today or timezone.localdate()
    this_month = month_start(today)
    last_month = month_start(today, 1)

    total_employees = Employee.objects.count()
    active_employees = Employee.objects.filter(is_active=True).count()
    today_count = attended.filter(date=today).count()
    this_month_count = attended.filter(date__gte=this_month).count()
    last_month_count = attended.filter(
        date__gte=last_month, date__lt=this_month
    ).count()

    daily = dict(
        attended.filter(date__gt=today - timedelta(days=TREND_DAYS), date__lte=today)
        .values_list("date")
        .annotate(count=Count("id"))
        .order_by()
    )
    trends = [
        {"date": day, "count": daily.get(day, 0)}
        for day in (today - timedelta(days=n) for n in range(TREND_DAYS - 1, -1, -1))
    ]

    period = PayrollPeriod.objects.filter(
        start_date__lte=today, end_date__gte=today
    ).first()
    payroll = {
        "total_earnings": ZERO,
        "total_deductions": ZERO,
        "total_net_pay": ZERO,
        "period_active": period is not None,
    }
    if period is not None:
        payroll.update(
            period.payroll_items.aggregate(
                total_earnings=_money_sum("total_earnings"),
                total_deductions=_money_sum("total_deductions"),
                total_net_pay=_money_sum("net_pay"),
            )
        )

    departments = Department.objects.annotate(
        employee_count=Count("employees", filter=Q(employees__is_active=True))
    ).order_by("name")

    recent = attended.select_related("employee", "employee__department").order_by(
        "-time_in"
    )[:RECENT_ACTIVITY]

    return {
        "overview": {
            "total_employees": total_employees,
            "active_employees": active_employees,
            "total_departments": Department.objects.count(),
            "attendance_rate": (
                round(today_count / active_employees * 100) if active_employees else 0
            ),
            "attendance_change": _percent_change(this_month_count, last_month_count),
            "late_arrivals": Attendance.objects.filter(
                date=today, status=Attendance.Status.LATE
            ).count(),
            "total_overtime_hours": _overtime_hours(
                Attendance.objects.filter(date__gte=this_month)
            ),
        },
        "attendance": {
            "today": today_count,
            "this_month": this_month_count,
            "trends": trends,
        },
        "payroll": payroll,
        "departments": [
            {"id": d.pk, "name": d.name, "employee_count": d.employee_count}
            for d in departments
        ],
        "recent_activity": [
            {
                "id": record.pk,
                "employee_name": record.employee.full_name,
                "position": record.employee.position,
                "department": (
                    record.employee.department.name
                    if record.employee.department
                    else "N/A"
                ),
                "time_in": record.time_in,
                "time_out": record.time_out,
                "status": record.status,
                "date": record.date,
            }
            for record in recent
        ],
    }


def employee_dashboard(employee: Employee, today=None) -> dict:
    today = today or timezone.localdate()
    this_month = month_start(today)
    attendances = list(employee.attendances.order_by("-date")[:EMPLOYEE_HISTORY])
    items = list(
        employee.payroll_items.select_related("period").order_by("-created_at", "-id")
    )

    current = [a for a in attendances if a.date >= this_month]
    total_hours = sum(a.worked_hours for a in current)
    return {
        "employee": {
            "id": employee.pk,
            "first_name": employee.first_name,
            "last_name": employee.last_name,
            "position": employee.position,
            "department": {
                "name": employee.department.name
                if employee.department
                else "No Department"
            },
            "attendances": [attendance_row(a) for a in attendances],
            "payroll_items": [payroll_row(i) for i in items],
        },
        "stats": {
            "present_this_month": sum(
                1 for a in current if a.status == Attendance.Status.PRESENT
            ),
            "total_hours": round(total_hours, 2),
            "overtime_hours": sum(a.overtime_minutes for a in current) / 60,
            "last_net_pay": items[0].net_pay if items else ZERO,
        },
    }


def department_head_dashboard(head: Employee, today=None) -> dict:
    today = today or timezone.localdate()
    since = today - timedelta(days=EMPLOYEE_HISTORY)
    department = head.department
    recent_attendance = Prefetch(
        "attendances",
        queryset=Attendance.objects.filter(date__gte=since).order_by("-date"),
        to_attr="recent_attendances",
    )
    newest_items = Prefetch(
        "payroll_items",
        queryset=PayrollItem.objects.select_related("period").order_by(
            "-created_at", "-id"
        ),
        to_attr="newest_items",
    )
    members = list(
        department.employees.prefetch_related(recent_attendance, newest_items).order_by(
            "last_name", "first_name"
        )
    )

    todays = Attendance.objects.filter(employee__department=department, date=today)
    stats = todays.aggregate(
        rows=Count("id"),
        present=Count("id", filter=Q(status=Attendance.Status.PRESENT)),
        late=Count("id", filter=Q(status=Attendance.Status.LATE)),
        overtime=Sum("overtime_minutes"),
    )

    own_items = head.payroll_items.select_related("period").order_by(
        "-created_at", "-id"
    )
    return {
        "employee": {
            "id": head.pk,
            "first_name": head.first_name,
            "last_name": head.last_name,
            "position": head.position,
            "attendances": [
                attendance_row(a)
                for a in head.attendances.filter(date__gte=since).order_by("-date")
            ],
            "payroll_items": [payroll_row(i, with_dates=True) for i in own_items],
            "department": {
                "id": department.pk,
                "name": department.name,
                "employees": [
                    {
                        "id": member.pk,
                        "first_name": member.first_name,
                        "last_name": member.last_name,
                        "position": member.position,
                        "attendances": [
                            attendance_row(a) for a in member.recent_attendances
                        ],
                        "payroll_items": [
                            payroll_row(i, with_dates=True)
                            for i in member.newest_items[:1]
                        ],
                    }
                    for member in members
                ],
            },
        },
        "department_stats": {
            "total_employees": len(members),
            "present_today": stats["present"],
            "late_today": stats["late"],
            "absent_today": len(members) - stats["rows"],
            "total_overtime": (stats["overtime"] or 0) / 60,
        },
    }


def analytics(today=None) -> dict:
    today = today or timezone.localdate()
    this_month = month_start(today)
    last_month = month_start(today, 1)
    window_start = month_start(today, TREND_MONTHS)

    this_month_count = attended.filter(date__gte=this_month).count()
    last_month_count = attended.filter(
        date__gte=last_month, date__lt=this_month
    ).count()

    month_attendance = Q(
        employees__attendances__date__gte=this_month,
        employees__attendances__time_in__isnull=False,
        employees__is_active=True,
    )
    departments = Department.objects.annotate(
        employee_count=Count(
            "employees", filter=Q(employees__is_active=True), distinct=True
        ),
        attendance_count=Count("employees__attendances", filter=month_attendance),
    ).order_by("name")
    department_rows = [
        {
            "name": d.name,
            "employee_count": d.employee_count,
            "attendance_count": d.attendance_count,
            "attendance_rate": (
                round(d.attendance_count / (d.employee_count * DAYS_IN_MONTH) * 100)
                if d.employee_count
                else 0
            ),
        }
        for d in departments
    ]

    monthly = (
        attended.filter(date__gte=window_start)
        .annotate(month=TruncMonth("date"))
        .values("month")
        .annotate(attendance=Count("id"), employees=Count("employee", distinct=True))
        .order_by("month")
    )
    attendance_trends = [
        {
            "month": row["month"].strftime("%Y-%m"),
            "attendance": row["attendance"],
            "employees": row["employees"],
        }
        for row in monthly
    ]

    window_start_at = timezone.make_aware(datetime.combine(window_start, time.min))
    periods = (
        PayrollPeriod.objects.filter(created_at__gte=window_start_at)
        .annotate(
            total_earnings=_money_sum("total_earnings", prefix="payroll_items__"),
            total_deductions=_money_sum("total_deductions", prefix="payroll_items__"),
            total_net_pay=_money_sum("net_pay", prefix="payroll_items__"),
            basic_pay=_money_sum("basic_pay", prefix="payroll_items__"),
            overtime_pay=_money_sum("overtime_pay", prefix="payroll_items__"),
            employee_count=Count("payroll_items"),
        )
        .order_by("start_date")
    )
    payroll_trends = [
        {
            "period": p.name,
            "date": p.start_date,
            "total_earnings": p.total_earnings,
            "total_deductions": p.total_deductions,
            "total_net_pay": p.total_net_pay,
            "basic_pay": p.basic_pay,
            "overtime_pay": p.overtime_pay,
            "employee_count": p.employee_count,
        }
        for p in periods
    ]

    active = Q(employees__is_active=True)
    salaries = Department.objects.annotate(
        employee_count=Count("employees", filter=active),
        total_salary_budget=Coalesce(
            Sum("employees__salary_grade__salary_rate", filter=active),
            Value(ZERO),
            output_field=DecimalField(max_digits=16, decimal_places=2),
        ),
    ).order_by("name")
    distribution = [
        {
            "department": d.name,
            "average_salary": (
                d.total_salary_budget / d.employee_count if d.employee_count else ZERO
            ),
            "employee_count": d.employee_count,
            "total_salary_budget": d.total_salary_budget,
        }
        for d in salaries
    ]

    performers = (
        Employee.objects.filter(is_active=True)
        .select_related("department")
        .annotate(
            attendance_count=Count(
                "attendances",
                filter=Q(
                    attendances__date__gte=this_month,
                    attendances__time_in__isnull=False,
                ),
            )
        )
        .order_by("-attendance_count", "id")[:PERFORMER_SLOTS]
    )

    return {
        "overview": {
            "total_employees": Employee.objects.count(),
            "active_employees": Employee.objects.filter(is_active=True).count(),
            "attendance_this_month": this_month_count,
            "attendance_last_month": last_month_count,
            "attendance_rate_change": _percent_change(
                this_month_count, last_month_count
            ),
            "late_arrivals_this_month": Attendance.objects.filter(
                date__gte=this_month, status=Attendance.Status.LATE
            ).count(),
            "total_overtime_hours": _overtime_hours(
                Attendance.objects.filter(date__gte=this_month)
            ),
        },
        "departments": department_rows,
        "trends": {"attendance": attendance_trends, "payroll": payroll_trends},
        "salary": {
            "distribution": distribution,
            "total_budget": sum((d["total_salary_budget"] for d in distribution), ZERO),
            "average_across_company": (
                sum((d["average_salary"] for d in distribution), ZERO)
                / len(distribution)
                if distribution
                else ZERO
            ),
        },
        "top_performers": [
            {
                "id": e.pk,
                "name": e.full_name,
                "position": e.position,
                "department": e.department.name if e.department else "N/A",
                "attendance_count": e.attendance_count,
                "attendance_rate": round(e.attendance_count / DAYS_IN_MONTH * 100),
            }
            for e in performers
        ],
    }
