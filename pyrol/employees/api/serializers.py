from rest_framework import serializers

from pyrol.employees.models import Employee
from pyrol.employees.models import SalaryGrade
from pyrol.org.models import Department
from pyrol.org.models import Schedule
from pyrol.users.models import User


class SalaryGradeSerializer(serializers.ModelSerializer):
    employee_count = serializers.SerializerMethodField()

    class Meta:
        model = SalaryGrade
        fields = [
            "id",
            "grade",
            "description",
            "salary_rate",
            "is_active",
            "employee_count",
            "created_at",
            "updated_at",
        ]
        extra_kwargs = {"grade": {"validators": []}}

    def get_employee_count(self, obj: SalaryGrade) -> int:
        annotated = getattr(obj, "employee_count", None)
        if annotated is not None:
            return annotated
        return obj.employees.count()


class _DepartmentBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Department
        fields = ["id", "name"]


class _ScheduleBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Schedule
        fields = ["id", "name", "time_in", "time_out", "working_days"]


class _SalaryGradeBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = SalaryGrade
        fields = ["id", "grade", "salary_rate"]


class _UserBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "role"]


class EmployeeSummarySerializer(serializers.ModelSerializer):
    """Compact employee block embedded in attendance and payroll rows."""

    department = _DepartmentBriefSerializer(read_only=True)

    class Meta:
        model = Employee
        fields = [
            "id",
            "employee_id",
            "first_name",
            "last_name",
            "position",
            "department",
        ]


class EmployeeSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    department = _DepartmentBriefSerializer(read_only=True)
    schedule = _ScheduleBriefSerializer(read_only=True)
    salary_grade = _SalaryGradeBriefSerializer(read_only=True)
    user = _UserBriefSerializer(read_only=True)

    department_id = serializers.PrimaryKeyRelatedField(
        source="department",
        queryset=Department.objects.all(),
        required=False,
        allow_null=True,
        write_only=True,
    )
    schedule_id = serializers.PrimaryKeyRelatedField(
        source="schedule",
        queryset=Schedule.objects.all(),
        required=False,
        allow_null=True,
        write_only=True,
    )
    salary_grade_id = serializers.PrimaryKeyRelatedField(
        source="salary_grade",
        queryset=SalaryGrade.objects.all(),
        write_only=True,
    )
    user_id = serializers.PrimaryKeyRelatedField(
        source="user",
        queryset=User.objects.all(),
        required=False,
        allow_null=True,
        write_only=True,
    )

    class Meta:
        model = Employee
        fields = [
            "id",
            "employee_id",
            "first_name",
            "last_name",
            "full_name",
            "email",
            "phone",
            "address",
            "position",
            "job_description",
            "salary_type",
            "hire_date",
            "is_active",
            "department",
            "schedule",
            "salary_grade",
            "user",
            "department_id",
            "schedule_id",
            "salary_grade_id",
            "user_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]
        # Duplicate ids and e-mails are answered by the view with a plain message.
        extra_kwargs = {
            "employee_id": {"validators": []},
            "email": {"validators": []},
        }


class EmployeeDetailSerializer(EmployeeSerializer):
    recent_attendances = serializers.SerializerMethodField()
    recent_payroll_items = serializers.SerializerMethodField()

    class Meta(EmployeeSerializer.Meta):
        fields = [
            *EmployeeSerializer.Meta.fields,
            "recent_attendances",
            "recent_payroll_items",
        ]

    def get_recent_attendances(self, obj: Employee) -> list[dict]:
        rows = obj.attendances.order_by("-date")[:10]
        return [
            {
                "id": a.pk,
                "date": a.date,
                "time_in": a.time_in,
                "time_out": a.time_out,
                "status": a.status,
                "late_minutes": a.late_minutes,
                "overtime_minutes": a.overtime_minutes,
            }
            for a in rows
        ]

    def get_recent_payroll_items(self, obj: Employee) -> list[dict]:
        rows = obj.payroll_items.select_related("period").order_by("-created_at")[:5]
        return [
            {
                "id": item.pk,
                "basic_pay": item.basic_pay,
                "total_earnings": item.total_earnings,
                "total_deductions": item.total_deductions,
                "net_pay": item.net_pay,
                "payroll_period": {
                    "id": item.period_id,
                    "name": item.period.name,
                    "status": item.period.status,
                },
            }
            for item in rows
        ]
