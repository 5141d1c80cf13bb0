import logging

from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from pyrol.attendance.clock import PunchError
from pyrol.attendance.clock import apply_punch
from pyrol.attendance.models import Attendance
from pyrol.attendance.models import PunchType
from pyrol.employees.models import Employee
from pyrol.users.api.permissions import ROLE_ADMIN
from pyrol.users.api.permissions import ROLE_DEPARTMENT_HEAD
from pyrol.users.api.permissions import ROLE_EMPLOYEE
from pyrol.users.api.permissions import RoleNotAllowed
from pyrol.users.api.permissions import user_has_role

from .filters import AttendanceFilter
from .serializers import AttendanceSerializer
from .serializers import ManualAttendanceSerializer
from .serializers import PunchSerializer
from .serializers import QRScanSerializer

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "date": "date",
    "time_in": "time_in",
    "time_out": "time_out",
    "status": "status",
    "late_minutes": "late_minutes",
    "overtime_minutes": "overtime_minutes",
    "created_at": "created_at",
    "employee": "employee__last_name",
}


def _own_employee(user):
    return Employee.objects.filter(user=user).first()


def _clock_label(moment) -> str:
    return timezone.localtime(moment).strftime("%I:%M %p")


def _scan_message(record: Attendance, punch: str) -> str:
    if punch == PunchType.IN:
        at = _clock_label(record.time_in)
        if record.late_minutes > 0:
            return f"Clocked in at {at} ({record.late_minutes} minutes late)"
        return f"Clocked in successfully at {at}"
    if punch == PunchType.OUT:
        return f"Clocked out successfully at {_clock_label(record.time_out)}"
    if punch == PunchType.BREAK_OUT:
        return f"Break started at {_clock_label(record.break_out)}"
    return (
        f"Break ended at {_clock_label(record.break_in)} "
        f"({record.break_minutes} minutes)"
    )


@extend_schema_view(
    list=extend_schema(
        tags=["Attendance"],
        parameters=[
            OpenApiParameter("sort_field", str, enum=sorted(SORTABLE_FIELDS)),
            OpenApiParameter("sort_direction", str, enum=["asc", "desc"]),
        ],
    ),
)
class AttendanceViewSet(mixins.ListModelMixin, GenericViewSet):
    queryset = Attendance.objects.select_related(
        "employee", "employee__department"
    )
    serializer_class = AttendanceSerializer
    filterset_class = AttendanceFilter
    # Ordering is driven by sort_field/sort_direction instead.
    filter_backends = [DjangoFilterBackend]

    def get_queryset(self):
        qs = super().get_queryset()
        user = self.request.user
        if user_has_role(user, (ROLE_EMPLOYEE, ROLE_DEPARTMENT_HEAD)):
            qs = qs.filter(employee__user=user)
        params = self.request.query_params
        field = SORTABLE_FIELDS.get(params.get("sort_field", ""))
        if field is None:
            return qs.order_by("-date", "-id")
        prefix = "-" if params.get("sort_direction") == "desc" else ""
        return qs.order_by(f"{prefix}{field}", "-id")

    @extend_schema(
        tags=["Attendance"],
        request=PunchSerializer,
        responses={200: AttendanceSerializer, 201: AttendanceSerializer},
        description=(
            "With ``type`` set, record a punch (IN, OUT, BREAK_OUT, BREAK_IN) "
            "for today. Without it, an ADMIN creates an attendance row by hand."
        ),
    )
    def create(self, request, *args, **kwargs):
        if request.data.get("type"):
            return self._punch(request)
        return self._manual_create(request)

    def _punch(self, request):
        payload = PunchSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        employee_pk = payload.validated_data["employee_id"]
        if not user_has_role(request.user, (ROLE_ADMIN,)):
            own = _own_employee(request.user)
            if own is None or own.pk != employee_pk:
                raise RoleNotAllowed
        employee = (
            Employee.objects.select_related("schedule").filter(pk=employee_pk).first()
        )
        if employee is None:
            return Response({"detail": "Employee not found"}, status=404)
        try:
            record = apply_punch(employee, payload.validated_data["type"])
        except PunchError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(record).data)

    def _manual_create(self, request):
        if not user_has_role(request.user, (ROLE_ADMIN,)):
            raise RoleNotAllowed
        serializer = ManualAttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if Attendance.objects.filter(
            employee=data["employee"], date=data["date"]
        ).exists():
            return Response(
                {"detail": "Attendance record already exists for this date"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        record = serializer.save()
        logger.info(
            "Manual attendance created for employee %s on %s",
            record.employee.employee_id,
            record.date,
        )
        return Response(
            self.get_serializer(record).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        tags=["Attendance"],
        request=QRScanSerializer,
        description="Public kiosk endpoint: the QR code carries the employee code.",
    )
    @action(
        detail=False,
        methods=["post"],
        url_path="qr-scan",
        permission_classes=[AllowAny],
        authentication_classes=[],
    )
    def qr_scan(self, request):
        payload = QRScanSerializer(data=request.data)
        if not payload.is_valid():
            return Response(
                {
                    "success": False,
                    "detail": "Validation error",
                    "message": "Invalid request",
                    "errors": payload.errors,
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        code = payload.validated_data["employee_id"]
        punch = payload.validated_data["type"]
        employee = (
            Employee.objects.select_related("schedule").filter(employee_id=code).first()
        )
        if employee is None:
            return Response(
                {
                    "success": False,
                    "detail": "Employee not found",
                    "message": "Invalid QR code. Please scan a valid employee QR code.",
                },
                status=status.HTTP_404_NOT_FOUND,
            )
        if not employee.is_active:
            return Response(
                {
                    "success": False,
                    "detail": "Employee is inactive",
                    "message": (
                        "This employee account is inactive. "
                        "Please contact your administrator."
                    ),
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        now = timezone.now()
        try:
            record = apply_punch(employee, punch, now=now)
        except PunchError as exc:
            return Response(
                {
                    "success": False,
                    "detail": str(exc),
                    "message": str(exc),
                    "employee_name": employee.full_name,
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(
            {
                "success": True,
                "message": _scan_message(record, punch),
                "employee_name": employee.full_name,
                "employee_id": employee.employee_id,
                "type": punch,
                "timestamp": now,
            },
        )
