from django.contrib import admin

from pyrol.org import models


@admin.register(models.Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "head", "created_at"]
    search_fields = ["name", "description"]
    list_filter = ["created_at", "updated_at"]


@admin.register(models.Schedule)
class ScheduleAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "time_in", "time_out", "working_days", "is_active"]
    search_fields = ["name", "description"]
    list_filter = ["is_active"]


@admin.register(models.Holiday)
class HolidayAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "date", "type", "pay_rate", "is_active"]
    search_fields = ["name", "description"]
    list_filter = ["type", "is_active", "date"]
