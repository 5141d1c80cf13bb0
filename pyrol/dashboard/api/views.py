from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from pyrol.dashboard import selectors
from pyrol.employees.models import Employee
from pyrol.users.api.permissions import IsDepartmentHead
from pyrol.users.api.permissions import IsEmployeeRole


def _own_employee(user):
    return Employee.objects.select_related("department").filter(user=user).first()


class DashboardView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Dashboard"], responses={200: dict})
    def get(self, request):
        return Response(selectors.company_dashboard())


class EmployeeDashboardView(APIView):
    permission_classes = [IsEmployeeRole]

    @extend_schema(tags=["Dashboard"], responses={200: dict})
    def get(self, request):
        employee = _own_employee(request.user)
        if employee is None:
            return Response(
                {"detail": "Employee not found"}, status=status.HTTP_404_NOT_FOUND
            )
        return Response(selectors.employee_dashboard(employee))


class DepartmentHeadDashboardView(APIView):
    permission_classes = [IsDepartmentHead]

    @extend_schema(tags=["Dashboard"], responses={200: dict})
    def get(self, request):
        head = _own_employee(request.user)
        if head is None or head.department is None:
            return Response(
                {"detail": "Department head not found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(selectors.department_head_dashboard(head))


class AnalyticsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Analytics"], responses={200: dict})
    def get(self, request):
        return Response(selectors.analytics())
