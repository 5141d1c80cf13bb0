from rest_framework import serializers

from pyrol.employees.models import Employee
from pyrol.org.models import WEEKDAY_NAMES
from pyrol.org.models import Department
from pyrol.org.models import Holiday
from pyrol.org.models import Schedule


class OrgEmployeeSerializer(serializers.ModelSerializer):
    """Employee row as listed under a department or a schedule."""

    department_name = serializers.CharField(
        source="department.name", read_only=True, default=None
    )

    class Meta:
        model = Employee
        fields = [
            "id",
            "employee_id",
            "first_name",
            "last_name",
            "position",
            "is_active",
            "department_name",
        ]


class DepartmentSerializer(serializers.ModelSerializer):
    employees = OrgEmployeeSerializer(many=True, read_only=True)
    head = OrgEmployeeSerializer(read_only=True)
    employee_count = serializers.SerializerMethodField()

    class Meta:
        model = Department
        fields = [
            "id",
            "name",
            "description",
            "head",
            "employees",
            "employee_count",
            "created_at",
            "updated_at",
        ]
        # Duplicate names are answered by the view with a plain message.
        extra_kwargs = {"name": {"validators": []}}

    def get_employee_count(self, obj: Department) -> int:
        annotated = getattr(obj, "employee_count", None)
        if annotated is not None:
            return annotated
        return obj.employees.count()


class DepartmentHeadSerializer(serializers.Serializer):
    department_id = serializers.IntegerField(required=False, allow_null=True)
    head_id = serializers.IntegerField(required=False, allow_null=True)


class ScheduleSerializer(serializers.ModelSerializer):
    working_days_array = serializers.ListField(
        child=serializers.CharField(), read_only=True
    )
    employee_count = serializers.SerializerMethodField()

    class Meta:
        model = Schedule
        fields = [
            "id",
            "name",
            "description",
            "time_in",
            "time_out",
            "working_days",
            "working_days_array",
            "is_active",
            "employee_count",
            "created_at",
            "updated_at",
        ]
        extra_kwargs = {"name": {"validators": []}}

    def get_employee_count(self, obj: Schedule) -> int:
        annotated = getattr(obj, "employee_count", None)
        if annotated is not None:
            return annotated
        return obj.employees.count()

    def to_internal_value(self, data):
        # Accept working days as a list as well as the stored CSV form.
        days = data.get("working_days") if hasattr(data, "get") else None
        if isinstance(days, list | tuple):
            data = {**data, "working_days": ",".join(str(d) for d in days)}
        return super().to_internal_value(data)

    def validate_working_days(self, value: str) -> str:
        days = [d.strip().upper() for d in value.split(",") if d.strip()]
        if not days:
            msg = "Working days are required"
            raise serializers.ValidationError(msg)
        unknown = [d for d in days if d not in WEEKDAY_NAMES]
        if unknown:
            msg = f"Unknown working day(s): {', '.join(unknown)}"
            raise serializers.ValidationError(msg)
        return ",".join(days)


class ScheduleDetailSerializer(ScheduleSerializer):
    employees = serializers.SerializerMethodField()

    class Meta(ScheduleSerializer.Meta):
        fields = [*ScheduleSerializer.Meta.fields, "employees"]

    def get_employees(self, obj: Schedule) -> list[dict]:
        active = obj.employees.filter(is_active=True).select_related("department")
        return OrgEmployeeSerializer(active, many=True).data


class HolidaySerializer(serializers.ModelSerializer):
    class Meta:
        model = Holiday
        fields = [
            "id",
            "name",
            "date",
            "type",
            "description",
            "pay_rate",
            "is_active",
            "created_at",
            "updated_at",
        ]
