from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

_money = {"max_digits": 14, "decimal_places": 2, "default": Decimal("0.00")}


class PayrollPeriod(models.Model):
    """Date range over which payroll is calculated and then closed.

    Thirteenth-month periods are special runs and may overlap regular periods.
    """

    class Status(models.TextChoices):
        DRAFT = "DRAFT", _("Draft")
        CLOSED = "CLOSED", _("Closed")

    name = models.CharField(max_length=150)
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(
        max_length=10, choices=Status.choices, default=Status.DRAFT
    )
    is_thirteenth_month = models.BooleanField(default=False)
    deductions_enabled = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.name} ({self.start_date} - {self.end_date})"

    @property
    def is_closed(self) -> bool:
        return self.status == self.Status.CLOSED


class PayrollItem(models.Model):
    period = models.ForeignKey(
        PayrollPeriod,
        on_delete=models.CASCADE,
        related_name="payroll_items",
    )
    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="payroll_items",
    )
    basic_pay = models.DecimalField(**_money)
    overtime_pay = models.DecimalField(**_money)
    holiday_pay = models.DecimalField(**_money)
    total_earnings = models.DecimalField(**_money)
    total_deductions = models.DecimalField(**_money)
    net_pay = models.DecimalField(**_money)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        unique_together = (("employee", "period"),)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"PayrollItem({self.employee_id}@{self.period_id})"


class DeductionType(models.Model):
    """A named deduction; ``amount`` is a peso value when ``is_fixed`` else a percent."""

    name = models.CharField(max_length=150, unique=True)
    description = models.TextField(blank=True)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0)],
    )
    is_fixed = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class PayrollDeduction(models.Model):
    payroll_item = models.ForeignKey(
        PayrollItem,
        on_delete=models.CASCADE,
        related_name="deductions",
    )
    deduction_type = models.ForeignKey(
        DeductionType,
        on_delete=models.PROTECT,
        related_name="payroll_deductions",
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.deduction_type} {self.amount}"


class CashAdvance(models.Model):
    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="cash_advances",
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    date_issued = models.DateField()
    is_paid = models.BooleanField(default=False)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date_issued", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"CashAdvance({self.employee_id}, {self.amount})"
