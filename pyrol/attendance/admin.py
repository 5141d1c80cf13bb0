from django.contrib import admin

from pyrol.attendance import models


@admin.register(models.Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "employee",
        "date",
        "time_in",
        "time_out",
        "status",
        "late_minutes",
        "overtime_minutes",
    ]
    search_fields = ["employee__employee_id", "employee__first_name", "notes"]
    list_filter = ["status", "date"]
    raw_id_fields = ["employee"]
