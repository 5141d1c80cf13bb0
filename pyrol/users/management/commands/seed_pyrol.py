import random
from datetime import date
from datetime import datetime
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _

from pyrol.attendance.models import Attendance
from pyrol.benefits.models import Benefit
from pyrol.employees.models import Employee
from pyrol.employees.models import SalaryGrade
from pyrol.org.models import Department
from pyrol.org.models import Holiday
from pyrol.org.models import Schedule
from pyrol.payroll.models import DeductionType
from pyrol.payroll.models import PayrollPeriod
from pyrol.utils.dates import parse_iso_date

DEMO_USERS = (
    # email, password, role, employee_id, first name, last name, position
    ("admin@pyrol.com", "admin123", "ADMIN", "ADMIN001", "System", "Admin", "HR Manager"),
    (
        "depthead@pyrol.com",
        "dept123",
        "DEPARTMENT_HEAD",
        "DEPT001",
        "Dana",
        "Cruz",
        "IT Department Head",
    ),
    ("employee@pyrol.com", "emp123", "EMPLOYEE", "EMP001", "Juan", "Dela Cruz", "Developer"),
)

DEDUCTION_TYPES = (
    ("SSS Contribution", "Social Security System", Decimal("4.50"), False),
    ("PhilHealth", "Philippine Health Insurance", Decimal("2.75"), False),
    ("Pag-IBIG", "Home Development Mutual Fund", Decimal("100.00"), True),
    ("Withholding Tax", "Progressive income tax withheld", Decimal("0.00"), False),
)

IT_POSITIONS = (
    "Software Developer",
    "Frontend Developer",
    "Backend Developer",
    "DevOps Engineer",
    "QA Engineer",
    "System Administrator",
)
FIRST_NAMES = ("Maria", "Jose", "Ana", "Mark", "Grace", "Paolo", "Liza", "Carlo")
LAST_NAMES = ("Santos", "Reyes", "Garcia", "Mendoza", "Torres", "Flores", "Ramos")

STAFF_PASSWORD = "password123"  # noqa: S105


class Command(BaseCommand):
    help = _("Reset the database and load Pyrol demo data")

    def add_arguments(self, parser):
        parser.add_argument(
            "--it-staff",
            type=int,
            default=0,
            help="Number of extra IT employees (IT001...) to create",
        )
        parser.add_argument("--start", help="First attendance date, YYYY-MM-DD")
        parser.add_argument("--end", help="Last attendance date, YYYY-MM-DD")
        parser.add_argument(
            "--seed", type=int, default=None, help="Random seed for repeatable data"
        )

    def handle(self, *args, **options):
        if options["it_staff"] < 0:
            msg = "--it-staff must not be negative"
            raise CommandError(msg)
        start, end = self._date_range(options)
        rng = random.Random(options["seed"])

        with transaction.atomic():
            self._reset()
            refs = self._load_base()
            staff = self._load_it_staff(options["it_staff"], refs)
            rows = self._load_attendance(staff, start, end, rng)

        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {Employee.objects.count()} employees "
                f"and {rows} attendance records"
            )
        )

    def _date_range(self, options):
        today = timezone.localdate()
        start = parse_iso_date(options["start"]) if options["start"] else None
        end = parse_iso_date(options["end"]) if options["end"] else None
        if options["start"] and start is None:
            msg = f"Invalid date: {options['start']}"
            raise CommandError(msg)
        if options["end"] and end is None:
            msg = f"Invalid date: {options['end']}"
            raise CommandError(msg)
        start = start or today.replace(day=1)
        end = end or today
        if end < start:
            msg = "--end must not be before --start"
            raise CommandError(msg)
        return start, end

    def _reset(self):
        user_model = get_user_model()
        PayrollPeriod.objects.all().delete()
        DeductionType.objects.all().delete()
        Benefit.objects.all().delete()
        Employee.objects.all().delete()
        Department.objects.all().delete()
        Schedule.objects.all().delete()
        SalaryGrade.objects.all().delete()
        Holiday.objects.all().delete()
        user_model.objects.filter(is_superuser=False).delete()

    def _load_base(self) -> dict:
        user_model = get_user_model()
        it = Department.objects.create(name="IT", description="Information Technology")
        Department.objects.create(name="HR", description="Human Resources")
        schedule = Schedule.objects.create(
            name="Regular Day Shift",
            time_in="08:00",
            time_out="17:00",
        )
        senior = SalaryGrade.objects.create(grade="A1", salary_rate=Decimal(80000))
        regular = SalaryGrade.objects.create(grade="B1", salary_rate=Decimal(50000))
        for name, description, amount, is_fixed in DEDUCTION_TYPES:
            DeductionType.objects.create(
                name=name, description=description, amount=amount, is_fixed=is_fixed
            )

        departments = {"ADMIN": None, "DEPARTMENT_HEAD": it, "EMPLOYEE": it}
        grades = {"ADMIN": senior, "DEPARTMENT_HEAD": senior, "EMPLOYEE": regular}
        employees = {}
        for email, password, role, employee_id, first, last, position in DEMO_USERS:
            user = user_model.objects.create_user(
                username=email.split("@")[0],
                email=email,
                password=password,
                role=role,
                first_name=first,
                last_name=last,
            )
            employees[role] = Employee.objects.create(
                user=user,
                employee_id=employee_id,
                first_name=first,
                last_name=last,
                email=email,
                position=position,
                hire_date=date(2024, 1, 15),
                department=departments[role],
                schedule=schedule,
                salary_grade=grades[role],
            )
        it.head = employees["DEPARTMENT_HEAD"]
        it.save(update_fields=["head", "updated_at"])
        return {"department": it, "schedule": schedule, "grade": regular}

    def _load_it_staff(self, count: int, refs: dict) -> list[Employee]:
        user_model = get_user_model()
        staff = []
        for n in range(1, count + 1):
            email = f"it.employee{n}@pyrol.com"
            user = user_model.objects.create_user(
                username=f"it.employee{n}",
                email=email,
                password=STAFF_PASSWORD,
                role="EMPLOYEE",
            )
            staff.append(
                Employee.objects.create(
                    user=user,
                    employee_id=f"IT{n:03d}",
                    first_name=FIRST_NAMES[n % len(FIRST_NAMES)],
                    last_name=LAST_NAMES[n % len(LAST_NAMES)],
                    email=email,
                    position=IT_POSITIONS[n % len(IT_POSITIONS)],
                    hire_date=date(2024, 1, 15),
                    department=refs["department"],
                    schedule=refs["schedule"],
                    salary_grade=refs["grade"],
                )
            )
        return staff

    def _load_attendance(self, staff, start: date, end: date, rng) -> int:
        rows = []
        day = start
        while day <= end:
            if day.weekday() < 5:  # noqa: PLR2004
                rows.extend(self._attendance_row(e, day, rng) for e in staff)
            day += timedelta(days=1)
        Attendance.objects.bulk_create(rows)
        return len(rows)

    def _attendance_row(self, employee, day, rng) -> Attendance:
        late = rng.randint(5, 60) if rng.random() < 0.3 else 0  # noqa: PLR2004
        undertime = rng.randint(15, 60) if rng.random() < 0.25 else 0  # noqa: PLR2004

        def at(minutes):
            naive = datetime.combine(day, datetime.min.time()) + timedelta(
                minutes=minutes
            )
            return timezone.make_aware(naive)

        break_out = 12 * 60 + rng.randint(-15, 15)
        break_in = 13 * 60 + rng.randint(-15, 15)
        return Attendance(
            employee=employee,
            date=day,
            time_in=at(8 * 60 + late),
            break_out=at(break_out),
            break_in=at(break_in),
            time_out=at(17 * 60 - undertime),
            status=Attendance.Status.LATE if late else Attendance.Status.PRESENT,
            late_minutes=late,
            undertime_minutes=undertime,
            break_minutes=break_in - break_out,
        )
