from django.contrib import admin

from pyrol.payroll import models


class PayrollDeductionInline(admin.TabularInline):
    model = models.PayrollDeduction
    extra = 0


@admin.register(models.PayrollPeriod)
class PayrollPeriodAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "name",
        "start_date",
        "end_date",
        "status",
        "is_thirteenth_month",
        "deductions_enabled",
    ]
    search_fields = ["name"]
    list_filter = ["status", "is_thirteenth_month", "deductions_enabled"]


@admin.register(models.PayrollItem)
class PayrollItemAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "period",
        "employee",
        "basic_pay",
        "total_earnings",
        "total_deductions",
        "net_pay",
    ]
    list_filter = ["period"]
    search_fields = ["employee__employee_id", "employee__last_name"]
    inlines = [PayrollDeductionInline]


@admin.register(models.DeductionType)
class DeductionTypeAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "amount", "is_fixed", "is_active"]
    search_fields = ["name", "description"]


@admin.register(models.CashAdvance)
class CashAdvanceAdmin(admin.ModelAdmin):
    list_display = ["id", "employee", "amount", "date_issued", "is_paid"]
    list_filter = ["is_paid", "date_issued"]
    search_fields = ["employee__employee_id", "employee__last_name"]
