import django_filters

from pyrol.attendance.models import Attendance


class AttendanceFilter(django_filters.FilterSet):
    employee_id = django_filters.NumberFilter(field_name="employee_id")
    start_date = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    end_date = django_filters.DateFilter(field_name="date", lookup_expr="lte")
    status = django_filters.ChoiceFilter(choices=Attendance.Status.choices)

    class Meta:
        model = Attendance
        fields = ["employee_id", "start_date", "end_date", "status"]
