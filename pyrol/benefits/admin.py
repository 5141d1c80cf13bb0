from django.contrib import admin

from pyrol.benefits import models


class EmployeeBenefitInline(admin.TabularInline):
    model = models.EmployeeBenefit
    extra = 0
    autocomplete_fields = ["employee"]


@admin.register(models.Benefit)
class BenefitAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "name",
        "type",
        "coverage_amount",
        "employee_contribution",
        "employer_contribution",
        "is_active",
    ]
    search_fields = ["name", "description", "type"]
    list_filter = ["type", "is_active"]
    inlines = [EmployeeBenefitInline]


@admin.register(models.EmployeeBenefit)
class EmployeeBenefitAdmin(admin.ModelAdmin):
    list_display = ["id", "employee", "benefit", "start_date", "end_date", "is_active"]
    list_filter = ["is_active", "benefit"]
    autocomplete_fields = ["employee", "benefit"]
