import django_filters

from pyrol.benefits.models import EmployeeBenefit


class EmployeeBenefitFilter(django_filters.FilterSet):
    employee_id = django_filters.NumberFilter(field_name="employee_id")
    benefit_id = django_filters.NumberFilter(field_name="benefit_id")

    class Meta:
        model = EmployeeBenefit
        fields = ["employee_id", "benefit_id"]
