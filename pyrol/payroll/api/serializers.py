from rest_framework import serializers

from pyrol.employees.api.serializers import EmployeeSummarySerializer
from pyrol.employees.models import Employee
from pyrol.payroll.models import CashAdvance
from pyrol.payroll.models import DeductionType
from pyrol.payroll.models import PayrollDeduction
from pyrol.payroll.models import PayrollItem
from pyrol.payroll.models import PayrollPeriod

_money = {"max_digits": 16, "decimal_places": 2, "read_only": True}


class DeductionTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeductionType
        fields = [
            "id",
            "name",
            "description",
            "amount",
            "is_fixed",
            "is_active",
            "created_at",
            "updated_at",
        ]
        extra_kwargs = {"name": {"validators": []}}


class PayrollDeductionSerializer(serializers.ModelSerializer):
    deduction_type = serializers.SerializerMethodField()

    class Meta:
        model = PayrollDeduction
        fields = ["id", "deduction_type", "amount"]

    def get_deduction_type(self, obj: PayrollDeduction) -> dict:
        dtype = obj.deduction_type
        return {
            "id": dtype.pk,
            "name": dtype.name,
            "description": dtype.description,
            "is_fixed": dtype.is_fixed,
        }


class _PeriodBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = PayrollPeriod
        fields = ["id", "name", "start_date", "end_date", "status"]


class PayrollItemSerializer(serializers.ModelSerializer):
    employee = EmployeeSummarySerializer(read_only=True)
    payroll_period = _PeriodBriefSerializer(source="period", read_only=True)
    deductions = PayrollDeductionSerializer(many=True, read_only=True)

    class Meta:
        model = PayrollItem
        fields = [
            "id",
            "employee",
            "payroll_period",
            "basic_pay",
            "overtime_pay",
            "holiday_pay",
            "total_earnings",
            "total_deductions",
            "net_pay",
            "deductions",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CalculatedPayrollItemSerializer(PayrollItemSerializer):
    total_worked_hours = serializers.FloatField(read_only=True)
    total_overtime_hours = serializers.FloatField(read_only=True)
    cash_advance_total = serializers.DecimalField(**_money)

    class Meta(PayrollItemSerializer.Meta):
        fields = [
            *PayrollItemSerializer.Meta.fields,
            "total_worked_hours",
            "total_overtime_hours",
            "cash_advance_total",
        ]
        read_only_fields = fields


class _PeriodItemSerializer(serializers.ModelSerializer):
    employee = EmployeeSummarySerializer(read_only=True)

    class Meta:
        model = PayrollItem
        fields = [
            "id",
            "employee",
            "basic_pay",
            "overtime_pay",
            "holiday_pay",
            "total_earnings",
            "total_deductions",
            "net_pay",
        ]


class PayrollPeriodSerializer(serializers.ModelSerializer):
    payroll_items = _PeriodItemSerializer(many=True, read_only=True)
    total_amount = serializers.DecimalField(**_money)
    total_earnings = serializers.DecimalField(**_money)
    total_deductions = serializers.DecimalField(**_money)
    employee_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = PayrollPeriod
        fields = [
            "id",
            "name",
            "start_date",
            "end_date",
            "status",
            "is_thirteenth_month",
            "deductions_enabled",
            "payroll_items",
            "total_amount",
            "total_earnings",
            "total_deductions",
            "employee_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["status", "deductions_enabled", "created_at", "updated_at"]


class PayrollPeriodWriteSerializer(serializers.ModelSerializer):
    class Meta:
        model = PayrollPeriod
        fields = ["name", "start_date", "end_date", "is_thirteenth_month"]


class CashAdvanceSerializer(serializers.ModelSerializer):
    employee = EmployeeSummarySerializer(read_only=True)
    employee_id = serializers.PrimaryKeyRelatedField(
        source="employee",
        queryset=Employee.objects.all(),
        write_only=True,
        error_messages={"does_not_exist": "Employee not found"},
    )

    class Meta:
        model = CashAdvance
        fields = [
            "id",
            "employee",
            "employee_id",
            "amount",
            "date_issued",
            "is_paid",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]


class CalculatePayrollSerializer(serializers.Serializer):
    payroll_period_id = serializers.IntegerField()
    employee_ids = serializers.ListField(
        child=serializers.IntegerField(), required=False, allow_empty=True
    )


class CalculationSummarySerializer(serializers.Serializer):
    total_employees = serializers.IntegerField(read_only=True)
    total_earnings = serializers.DecimalField(**_money)
    total_deductions = serializers.DecimalField(**_money)
    total_net_pay = serializers.DecimalField(**_money)


class ToggleDeductionsSerializer(serializers.Serializer):
    payroll_period_id = serializers.IntegerField()
    deductions_enabled = serializers.BooleanField()


class GeneratePayslipSerializer(serializers.Serializer):
    payroll_item_id = serializers.IntegerField()


class ExportPayrollSerializer(serializers.Serializer):
    payroll_period_id = serializers.IntegerField()
    format = serializers.CharField(required=False, default="excel")
