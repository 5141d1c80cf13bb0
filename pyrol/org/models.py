from decimal import Decimal

from django.core.validators import MinValueValidator
from django.core.validators import RegexValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

DEFAULT_WORKING_DAYS = "MONDAY,TUESDAY,WEDNESDAY,THURSDAY,FRIDAY"

WEEKDAY_NAMES = (
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
)

hhmm_validator = RegexValidator(
    regex=r"^([01]?\d|2[0-3]):[0-5]\d$",
    message=_("Time must be in HH:MM format"),
)


class Department(models.Model):
    name = models.CharField(max_length=150, unique=True, db_index=True)
    description = models.TextField(blank=True)
    head = models.ForeignKey(
        "employees.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="headed_departments",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class Schedule(models.Model):
    """Expected daily shift.

    ``time_in``/``time_out`` are kept as "HH:MM" strings in local time; lateness,
    overtime and undertime are measured against them on the punch date.
    """

    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    time_in = models.CharField(max_length=5, validators=[hhmm_validator])
    time_out = models.CharField(max_length=5, validators=[hhmm_validator])
    working_days = models.CharField(
        max_length=100,
        default=DEFAULT_WORKING_DAYS,
        help_text=_("Comma-separated upper-case weekday names."),
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.name} ({self.time_in}-{self.time_out})"

    @property
    def working_days_array(self) -> list[str]:
        return [d.strip() for d in (self.working_days or "").split(",") if d.strip()]


class Holiday(models.Model):
    class Type(models.TextChoices):
        REGULAR = "REGULAR", _("Regular")
        SPECIAL = "SPECIAL", _("Special")

    name = models.CharField(max_length=150)
    date = models.DateField(db_index=True)
    type = models.CharField(max_length=10, choices=Type.choices, default=Type.REGULAR)
    description = models.TextField(blank=True)
    pay_rate = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        default=Decimal("1.00"),
        validators=[MinValueValidator(Decimal("0.1"))],
        help_text=_("Multiplier of the daily rate paid for working on this day."),
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.name} ({self.date})"
