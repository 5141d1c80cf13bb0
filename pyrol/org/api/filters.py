import django_filters

from pyrol.org.models import Holiday


class HolidayFilter(django_filters.FilterSet):
    type = django_filters.CharFilter(method="filter_type")
    year = django_filters.NumberFilter(field_name="date", lookup_expr="year")

    class Meta:
        model = Holiday
        fields = ["type", "year", "is_active"]

    def filter_type(self, queryset, name, value):
        # The holiday calendar sends "all" for no filter.
        if not value or value.lower() == "all":
            return queryset
        return queryset.filter(type=value.upper())
