from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class SalaryGrade(models.Model):
    grade = models.CharField(max_length=20, unique=True)
    description = models.TextField(blank=True)
    salary_rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
        help_text=_(
            "Monthly salary, daily rate or hourly rate depending on the "
            "employee's salary type."
        ),
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["grade"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.grade} ({self.salary_rate})"


class Employee(models.Model):
    class SalaryType(models.TextChoices):
        MONTHLY = "MONTHLY", _("Monthly")
        DAILY = "DAILY", _("Daily")
        HOURLY = "HOURLY", _("Hourly")

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employee",
    )
    employee_id = models.CharField(max_length=50, unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=50, blank=True)
    address = models.TextField(blank=True)
    position = models.CharField(max_length=150)
    job_description = models.TextField(blank=True)
    salary_type = models.CharField(
        max_length=10,
        choices=SalaryType.choices,
        default=SalaryType.MONTHLY,
    )
    hire_date = models.DateField()
    department = models.ForeignKey(
        "org.Department",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employees",
    )
    schedule = models.ForeignKey(
        "org.Schedule",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employees",
    )
    salary_grade = models.ForeignKey(
        SalaryGrade,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employees",
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.employee_id} {self.full_name}"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def salary_rate(self) -> Decimal:
        grade = self.salary_grade
        return grade.salary_rate if grade is not None else Decimal("0.00")
