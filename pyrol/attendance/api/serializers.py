from rest_framework import serializers

from pyrol.attendance.models import Attendance
from pyrol.attendance.models import PunchType
from pyrol.employees.api.serializers import EmployeeSummarySerializer
from pyrol.employees.models import Employee


class AttendanceSerializer(serializers.ModelSerializer):
    employee = EmployeeSummarySerializer(read_only=True)
    department_name = serializers.SerializerMethodField()
    worked_hours = serializers.SerializerMethodField()

    class Meta:
        model = Attendance
        fields = [
            "id",
            "employee",
            "department_name",
            "date",
            "time_in",
            "time_out",
            "break_out",
            "break_in",
            "status",
            "late_minutes",
            "overtime_minutes",
            "undertime_minutes",
            "break_minutes",
            "worked_hours",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_department_name(self, obj: Attendance) -> str | None:
        department = obj.employee.department
        return department.name if department else None

    def get_worked_hours(self, obj: Attendance) -> float:
        return round(obj.worked_hours, 2)


class PunchSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    type = serializers.ChoiceField(choices=PunchType.choices)


class ManualAttendanceSerializer(serializers.ModelSerializer):
    """Admin-entered attendance row; no punch rules apply."""

    employee_id = serializers.PrimaryKeyRelatedField(
        source="employee",
        queryset=Employee.objects.all(),
        error_messages={"does_not_exist": "Employee not found"},
    )

    class Meta:
        model = Attendance
        fields = ["employee_id", "date", "time_in", "time_out", "status", "notes"]
        # The (employee, date) duplicate is answered by the view.
        validators = []

    def validate(self, attrs):
        time_in = attrs.get("time_in")
        time_out = attrs.get("time_out")
        if time_in and time_out and time_out < time_in:
            raise serializers.ValidationError(
                {"time_out": "Time out must be after time in"}
            )
        return attrs


class QRScanSerializer(serializers.Serializer):
    employee_id = serializers.CharField(
        error_messages={"blank": "Employee ID is required"},
    )
    type = serializers.ChoiceField(choices=PunchType.choices)
