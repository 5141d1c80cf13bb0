from rest_framework import serializers

from pyrol.benefits.models import Benefit
from pyrol.benefits.models import EmployeeBenefit
from pyrol.employees.models import Employee


class BenefitSerializer(serializers.ModelSerializer):
    active_enrolments = serializers.SerializerMethodField()

    class Meta:
        model = Benefit
        fields = [
            "id",
            "name",
            "description",
            "type",
            "coverage_amount",
            "employee_contribution",
            "employer_contribution",
            "is_active",
            "active_enrolments",
            "created_at",
            "updated_at",
        ]

    def get_active_enrolments(self, obj: Benefit) -> int:
        annotated = getattr(obj, "active_enrolments", None)
        if annotated is not None:
            return annotated
        return obj.enrolments.filter(is_active=True).count()


class _EnrolledEmployeeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = ["id", "employee_id", "first_name", "last_name"]


class _BenefitBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Benefit
        fields = ["id", "name", "type", "employee_contribution", "employer_contribution"]


class EmployeeBenefitSerializer(serializers.ModelSerializer):
    employee = _EnrolledEmployeeSerializer(read_only=True)
    benefit = _BenefitBriefSerializer(read_only=True)

    class Meta:
        model = EmployeeBenefit
        fields = [
            "id",
            "employee",
            "benefit",
            "start_date",
            "end_date",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]


class EmployeeBenefitAssignSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    benefit_id = serializers.IntegerField()
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):
        start = attrs.get("start_date")
        end = attrs.get("end_date")
        if start and end and end < start:
            raise serializers.ValidationError(
                {"end_date": "End date must be after start date"}
            )
        return attrs
