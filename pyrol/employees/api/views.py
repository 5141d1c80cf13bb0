"""Views for Employees API."""

import logging

from django.db.models import Count
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework import viewsets
from rest_framework.response import Response

from pyrol.audit.utils import log_action
from pyrol.employees.models import Employee
from pyrol.employees.models import SalaryGrade
from pyrol.users.api.permissions import IsAdmin
from pyrol.users.api.permissions import IsAdminOrReadOnly
from pyrol.utils.views import NotFoundMessageMixin

from .filters import EmployeeFilter
from .filters import SalaryGradeFilter
from .serializers import EmployeeDetailSerializer
from .serializers import EmployeeSerializer
from .serializers import SalaryGradeSerializer

logger = logging.getLogger(__name__)


def _snapshot(employee: Employee) -> dict:
    return {
        "employee_id": employee.employee_id,
        "first_name": employee.first_name,
        "last_name": employee.last_name,
        "email": employee.email,
        "position": employee.position,
        "salary_type": employee.salary_type,
        "department_id": employee.department_id,
        "schedule_id": employee.schedule_id,
        "salary_grade_id": employee.salary_grade_id,
        "is_active": employee.is_active,
    }


def _client_ip(request) -> str:
    return request.META.get("REMOTE_ADDR", "") if request else ""


def _duplicate_employee_message(data: dict, exclude_pk=None) -> str | None:
    others = Employee.objects.all()
    if exclude_pk is not None:
        others = others.exclude(pk=exclude_pk)
    employee_id = data.get("employee_id")
    if employee_id and others.filter(employee_id=employee_id).exists():
        return "Employee ID already exists"
    email = data.get("email")
    if email and others.filter(email__iexact=email).exists():
        return "Email already exists"
    return None


@extend_schema_view(
    list=extend_schema(tags=["Employees"]),
    retrieve=extend_schema(tags=["Employees"]),
    create=extend_schema(tags=["Employees"]),
    update=extend_schema(tags=["Employees"]),
    partial_update=extend_schema(tags=["Employees"]),
    destroy=extend_schema(tags=["Employees"]),
)
class EmployeeViewSet(NotFoundMessageMixin, viewsets.ModelViewSet):
    queryset = Employee.objects.select_related(
        "department", "schedule", "salary_grade", "user"
    ).order_by("-created_at")
    serializer_class = EmployeeSerializer
    permission_classes = [IsAdminOrReadOnly]
    search_fields = ["first_name", "last_name", "email", "employee_id", "position"]
    filterset_class = EmployeeFilter
    ordering_fields = ["created_at", "employee_id", "last_name", "hire_date"]
    not_found_message = "Employee not found"

    def get_serializer_class(self):
        if getattr(self, "action", None) == "retrieve":
            return EmployeeDetailSerializer
        return super().get_serializer_class()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        duplicate = _duplicate_employee_message(serializer.validated_data)
        if duplicate:
            return Response({"detail": duplicate}, status=status.HTTP_400_BAD_REQUEST)
        employee = serializer.save()
        log_action(
            "employee_created",
            actor=request.user,
            message=f"employee_id={employee.employee_id}",
            model_name="employees.Employee",
            record_id=employee.pk,
            after=_snapshot(employee),
            ip_address=_client_ip(request),
        )
        logger.info("Employee created: %s", employee.employee_id)
        return Response(
            self.get_serializer(employee).data, status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        employee = self.get_object()
        before = _snapshot(employee)
        serializer = self.get_serializer(employee, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        duplicate = _duplicate_employee_message(
            serializer.validated_data, exclude_pk=employee.pk
        )
        if duplicate:
            return Response({"detail": duplicate}, status=status.HTTP_400_BAD_REQUEST)
        employee = serializer.save()
        log_action(
            "employee_updated",
            actor=request.user,
            message=f"employee_id={employee.employee_id}",
            model_name="employees.Employee",
            record_id=employee.pk,
            before=before,
            after=_snapshot(employee),
            ip_address=_client_ip(request),
        )
        return Response(self.get_serializer(employee).data)

    def destroy(self, request, *args, **kwargs):
        # Employees are never hard-deleted: attendance and payroll refer to them.
        employee = self.get_object()
        employee.is_active = False
        employee.save(update_fields=["is_active", "updated_at"])
        log_action(
            "employee_deactivated",
            actor=request.user,
            message=f"employee_id={employee.employee_id}",
            model_name="employees.Employee",
            record_id=employee.pk,
            ip_address=_client_ip(request),
        )
        logger.info("Employee deactivated: %s", employee.employee_id)
        return Response({"detail": "Employee deactivated successfully"})


@extend_schema_view(
    list=extend_schema(tags=["Salary Grades"]),
    retrieve=extend_schema(tags=["Salary Grades"]),
    create=extend_schema(tags=["Salary Grades"]),
    update=extend_schema(tags=["Salary Grades"]),
    partial_update=extend_schema(tags=["Salary Grades"]),
    destroy=extend_schema(tags=["Salary Grades"]),
)
class SalaryGradeViewSet(NotFoundMessageMixin, viewsets.ModelViewSet):
    queryset = SalaryGrade.objects.annotate(
        employee_count=Count("employees")
    ).order_by("grade")
    serializer_class = SalaryGradeSerializer
    permission_classes = [IsAdmin]
    search_fields = ["grade", "description"]
    filterset_class = SalaryGradeFilter
    not_found_message = "Salary grade not found"

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if SalaryGrade.objects.filter(grade=serializer.validated_data["grade"]).exists():
            return Response({"detail": "Salary grade already exists"}, status=400)
        grade = serializer.save()
        return Response(self.get_serializer(grade).data, status=201)

    def update(self, request, *args, **kwargs):
        grade = self.get_object()
        serializer = self.get_serializer(grade, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        new_grade = serializer.validated_data.get("grade")
        if (
            new_grade
            and SalaryGrade.objects.filter(grade=new_grade)
            .exclude(pk=grade.pk)
            .exists()
        ):
            return Response({"detail": "Salary grade already exists"}, status=400)
        serializer.save()
        return Response(self.get_serializer(self.get_object()).data)

    def destroy(self, request, *args, **kwargs):
        grade = self.get_object()
        if grade.employees.exists():
            return Response(
                {"detail": "Cannot delete salary grade that is assigned to employees"},
                status=400,
            )
        grade.delete()
        return Response({"detail": "Salary grade deleted successfully"})
