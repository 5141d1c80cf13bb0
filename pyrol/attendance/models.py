from django.db import models
from django.utils.translation import gettext_lazy as _


class PunchType(models.TextChoices):
    IN = "IN", _("Clock in")
    OUT = "OUT", _("Clock out")
    BREAK_OUT = "BREAK_OUT", _("Start break")
    BREAK_IN = "BREAK_IN", _("End break")


class Attendance(models.Model):
    """One employee's attendance for one local date.

    Punch timestamps are stored as aware datetimes; the minute counters are
    filled in by ``pyrol.attendance.clock`` as the punches arrive.
    """

    class Status(models.TextChoices):
        PRESENT = "PRESENT", _("Present")
        LATE = "LATE", _("Late")
        ABSENT = "ABSENT", _("Absent")
        OVERTIME = "OVERTIME", _("Overtime")

    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.CASCADE,
        related_name="attendances",
    )
    date = models.DateField(db_index=True)
    time_in = models.DateTimeField(null=True, blank=True)
    time_out = models.DateTimeField(null=True, blank=True)
    break_out = models.DateTimeField(null=True, blank=True)
    break_in = models.DateTimeField(null=True, blank=True)
    status = models.CharField(
        max_length=10, choices=Status.choices, default=Status.PRESENT
    )
    late_minutes = models.PositiveIntegerField(default=0)
    overtime_minutes = models.PositiveIntegerField(default=0)
    undertime_minutes = models.PositiveIntegerField(default=0)
    break_minutes = models.PositiveIntegerField(default=0)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]
        unique_together = (("employee", "date"),)

    def __str__(self) -> str:  # pragma: no cover - simple repr
        return f"Attendance({self.employee_id}@{self.date})"

    @property
    def worked_hours(self) -> float:
        """Hours between clock in and clock out; 0 while the day is open."""
        if not (self.time_in and self.time_out):
            return 0.0
        return max((self.time_out - self.time_in).total_seconds(), 0) / 3600
