from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

_money = {
    "max_digits": 12,
    "decimal_places": 2,
    "validators": [MinValueValidator(0)],
}


class Benefit(models.Model):
    """A benefit plan employees can be enrolled in.

    ``employee_contribution`` is withheld from each payroll item of an
    enrolled employee.
    """

    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=100)
    coverage_amount = models.DecimalField(**_money)
    employee_contribution = models.DecimalField(**_money)
    employer_contribution = models.DecimalField(**_money)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class EmployeeBenefit(models.Model):
    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="benefits",
    )
    benefit = models.ForeignKey(
        Benefit,
        on_delete=models.CASCADE,
        related_name="enrolments",
    )
    start_date = models.DateField(default=timezone.localdate)
    end_date = models.DateField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        unique_together = (("employee", "benefit"),)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.employee_id} -> {self.benefit_id}"
