import django_filters
from django.db.models import Q

from pyrol.payroll.models import PayrollItem
from pyrol.payroll.models import PayrollPeriod


class PayrollPeriodFilter(django_filters.FilterSet):
    """Filters over a queryset annotated with ``total_amount``/``employee_count``."""

    status = django_filters.CharFilter(method="filter_status")
    start_date = django_filters.DateFilter(field_name="start_date", lookup_expr="gte")
    end_date = django_filters.DateFilter(field_name="end_date", lookup_expr="lte")
    min_amount = django_filters.NumberFilter(field_name="total_amount", lookup_expr="gte")
    max_amount = django_filters.NumberFilter(field_name="total_amount", lookup_expr="lte")
    min_employees = django_filters.NumberFilter(
        field_name="employee_count", lookup_expr="gte"
    )
    max_employees = django_filters.NumberFilter(
        field_name="employee_count", lookup_expr="lte"
    )

    class Meta:
        model = PayrollPeriod
        fields = ["status", "is_thirteenth_month"]

    def filter_status(self, queryset, name, value):
        if not value or value.lower() == "all":
            return queryset
        return queryset.filter(status=value.upper())


class PayrollItemFilter(django_filters.FilterSet):
    payroll_period_id = django_filters.NumberFilter(field_name="period_id")
    employee_id = django_filters.NumberFilter(field_name="employee_id")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = PayrollItem
        fields = ["payroll_period_id", "employee_id"]

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(employee__first_name__icontains=value)
            | Q(employee__last_name__icontains=value)
            | Q(employee__employee_id__icontains=value)
        )
