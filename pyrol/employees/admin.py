from django.contrib import admin

from pyrol.employees import models


@admin.register(models.Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "employee_id",
        "first_name",
        "last_name",
        "position",
        "department",
        "is_active",
    ]
    search_fields = ["employee_id", "first_name", "last_name", "email", "position"]
    list_filter = ["salary_type", "is_active", "department", "hire_date"]
    raw_id_fields = ["user"]


@admin.register(models.SalaryGrade)
class SalaryGradeAdmin(admin.ModelAdmin):
    list_display = ["id", "grade", "salary_rate", "is_active"]
    search_fields = ["grade", "description"]
    list_filter = ["is_active"]
