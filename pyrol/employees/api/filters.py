import django_filters

from pyrol.employees.models import Employee
from pyrol.employees.models import SalaryGrade


class EmployeeFilter(django_filters.FilterSet):
    department_id = django_filters.NumberFilter(field_name="department_id")
    schedule_id = django_filters.NumberFilter(field_name="schedule_id")
    is_active = django_filters.BooleanFilter(field_name="is_active")

    class Meta:
        model = Employee
        fields = ["department_id", "schedule_id", "is_active", "salary_type"]


class SalaryGradeFilter(django_filters.FilterSet):
    is_active = django_filters.BooleanFilter(field_name="is_active")

    class Meta:
        model = SalaryGrade
        fields = ["is_active"]
