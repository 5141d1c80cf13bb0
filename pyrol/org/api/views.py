import logging

from django.db.models import Count
from django.db.models import Prefetch
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework import viewsets
from rest_framework.response import Response

from pyrol.employees.models import Employee
from pyrol.org.models import Department
from pyrol.org.models import Holiday
from pyrol.org.models import Schedule
from pyrol.users.api.permissions import IsAdmin
from pyrol.users.api.permissions import IsAdminOrReadOnly
from pyrol.utils.views import NotFoundMessageMixin

from .filters import HolidayFilter
from .serializers import DepartmentHeadSerializer
from .serializers import DepartmentSerializer
from .serializers import HolidaySerializer
from .serializers import ScheduleDetailSerializer
from .serializers import ScheduleSerializer

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(tags=["Departments"]),
    retrieve=extend_schema(tags=["Departments"]),
    create=extend_schema(tags=["Departments"]),
    update=extend_schema(tags=["Departments"]),
    partial_update=extend_schema(tags=["Departments"]),
    destroy=extend_schema(tags=["Departments"]),
)
class DepartmentViewSet(NotFoundMessageMixin, viewsets.ModelViewSet):
    not_found_message = "Department not found"
    queryset = (
        Department.objects.select_related("head")
        .prefetch_related(
            Prefetch("employees", queryset=Employee.objects.order_by("last_name"))
        )
        .annotate(employee_count=Count("employees"))
        .order_by("name")
    )
    serializer_class = DepartmentSerializer
    permission_classes = [IsAdminOrReadOnly]
    # The department list is short and the UI renders it whole.
    pagination_class = None

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        name = serializer.validated_data["name"]
        if Department.objects.filter(name=name).exists():
            return Response(
                {"detail": "Department name already exists"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        department = serializer.save()
        logger.info("Department created: %s", department.name)
        return Response(
            self.get_serializer(department).data, status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        department = self.get_object()
        partial = kwargs.pop("partial", False)
        serializer = self.get_serializer(department, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        name = serializer.validated_data.get("name")
        if (
            name
            and Department.objects.filter(name=name).exclude(pk=department.pk).exists()
        ):
            return Response(
                {"detail": "Department name already exists"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        serializer.save()
        return Response(self.get_serializer(self.get_object()).data)

    def destroy(self, request, *args, **kwargs):
        department = self.get_object()
        if department.employees.exists():
            return Response(
                {"detail": "Cannot delete department that has employees"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        department.delete()
        return Response({"detail": "Department deleted successfully"})

    @extend_schema(
        tags=["Departments"],
        description="Assign (or clear, with head_id null) a department head.",
        request=DepartmentHeadSerializer,
        responses={200: DepartmentSerializer},
    )
    def assign_head(self, request):
        payload = DepartmentHeadSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        department_id = payload.validated_data.get("department_id")
        head_id = payload.validated_data.get("head_id")
        if not department_id:
            return Response({"detail": "Department ID is required"}, status=400)
        try:
            department = Department.objects.get(pk=department_id)
        except Department.DoesNotExist:
            return Response({"detail": "Department not found"}, status=404)

        head = None
        if head_id:
            try:
                head = Employee.objects.get(pk=head_id)
            except Employee.DoesNotExist:
                return Response({"detail": "Employee not found"}, status=404)
            if head.department_id != department.pk:
                return Response(
                    {"detail": "Employee is not in this department"}, status=400
                )

        department.head = head
        department.save(update_fields=["head", "updated_at"])
        logger.info(
            "Department %s head set to %s",
            department.pk,
            head.employee_id if head else None,
        )
        refreshed = self.get_queryset().get(pk=department.pk)
        return Response(self.get_serializer(refreshed).data, status=200)


@extend_schema_view(
    list=extend_schema(tags=["Schedules"]),
    retrieve=extend_schema(tags=["Schedules"]),
    create=extend_schema(tags=["Schedules"]),
    update=extend_schema(tags=["Schedules"]),
    partial_update=extend_schema(tags=["Schedules"]),
    destroy=extend_schema(tags=["Schedules"]),
)
class ScheduleViewSet(NotFoundMessageMixin, viewsets.ModelViewSet):
    not_found_message = "Schedule not found"
    queryset = Schedule.objects.annotate(employee_count=Count("employees")).order_by(
        "name"
    )
    serializer_class = ScheduleSerializer
    permission_classes = [IsAdminOrReadOnly]
    search_fields = ["name", "description"]
    filterset_fields = ["is_active"]
    ordering_fields = ["name", "time_in", "created_at"]

    def get_serializer_class(self):
        if getattr(self, "action", None) in {"retrieve", "update", "partial_update"}:
            return ScheduleDetailSerializer
        return super().get_serializer_class()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if Schedule.objects.filter(name=serializer.validated_data["name"]).exists():
            return Response({"detail": "Schedule name already exists"}, status=400)
        schedule = serializer.save()
        return Response(self.get_serializer(schedule).data, status=201)

    def update(self, request, *args, **kwargs):
        # Updates are always partial; clients send only what changed.
        schedule = self.get_object()
        serializer = self.get_serializer(schedule, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        name = serializer.validated_data.get("name")
        if (
            name
            and name != schedule.name
            and Schedule.objects.filter(name=name).exclude(pk=schedule.pk).exists()
        ):
            return Response({"detail": "Schedule name already exists"}, status=400)
        serializer.save()
        return Response(self.get_serializer(self.get_object()).data)

    def destroy(self, request, *args, **kwargs):
        schedule = self.get_object()
        if schedule.employees.exists():
            return Response(
                {"detail": "Cannot delete schedule that is assigned to employees"},
                status=400,
            )
        schedule.delete()
        return Response({"detail": "Schedule deleted successfully"})


@extend_schema_view(
    list=extend_schema(tags=["Holidays"]),
    retrieve=extend_schema(tags=["Holidays"]),
    create=extend_schema(tags=["Holidays"]),
    update=extend_schema(tags=["Holidays"]),
    partial_update=extend_schema(tags=["Holidays"]),
    destroy=extend_schema(tags=["Holidays"]),
)
class HolidayViewSet(NotFoundMessageMixin, viewsets.ModelViewSet):
    not_found_message = "Holiday not found"
    queryset = Holiday.objects.order_by("date")
    serializer_class = HolidaySerializer
    permission_classes = [IsAdmin]
    search_fields = ["name", "description"]
    filterset_class = HolidayFilter

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        day = serializer.validated_data["date"]
        if Holiday.objects.filter(date=day, is_active=True).exists():
            return Response(
                {"detail": "A holiday already exists on this date"}, status=400
            )
        holiday = serializer.save()
        return Response(self.get_serializer(holiday).data, status=201)

    def update(self, request, *args, **kwargs):
        holiday = self.get_object()
        serializer = self.get_serializer(holiday, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        day = serializer.validated_data.get("date")
        if (
            day
            and Holiday.objects.filter(date=day, is_active=True)
            .exclude(pk=holiday.pk)
            .exists()
        ):
            return Response(
                {"detail": "A holiday already exists on this date"}, status=400
            )
        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({"detail": "Holiday deleted successfully"})
