import logging
from decimal import Decimal

from django.db.models import Count
from django.db.models import DecimalField
from django.db.models import Sum
from django.db.models import Value
from django.db.models.functions import Coalesce
from django.http import HttpResponse
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import filters
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from pyrol.audit.utils import log_action
from pyrol.payroll import exports
from pyrol.payroll.models import CashAdvance
from pyrol.payroll.models import DeductionType
from pyrol.payroll.models import PayrollItem
from pyrol.payroll.models import PayrollPeriod
from pyrol.payroll.services import PayrollError
from pyrol.payroll.services import PayrollNotFound
from pyrol.payroll.services import build_payslip
from pyrol.payroll.services import calculate_payroll
from pyrol.payroll.services import close_period
from pyrol.payroll.services import set_deductions_enabled
from pyrol.users.api.permissions import ROLE_EMPLOYEE
from pyrol.users.api.permissions import IsAdmin
from pyrol.users.api.permissions import IsAdminOrReadOnly
from pyrol.users.api.permissions import user_has_role
from pyrol.utils.views import NotFoundMessageMixin

from .filters import PayrollItemFilter
from .filters import PayrollPeriodFilter
from .serializers import CalculatedPayrollItemSerializer
from .serializers import CalculationSummarySerializer
from .serializers import CalculatePayrollSerializer
from .serializers import CashAdvanceSerializer
from .serializers import DeductionTypeSerializer
from .serializers import ExportPayrollSerializer
from .serializers import GeneratePayslipSerializer
from .serializers import PayrollItemSerializer
from .serializers import PayrollPeriodSerializer
from .serializers import PayrollPeriodWriteSerializer
from .serializers import ToggleDeductionsSerializer

logger = logging.getLogger(__name__)

PERIOD_SORT_FIELDS = {
    "name",
    "start_date",
    "end_date",
    "status",
    "created_at",
    "total_amount",
    "employee_count",
}


def _money_sum(field):
    return Coalesce(
        Sum(f"payroll_items__{field}"),
        Value(Decimal("0.00")),
        output_field=DecimalField(max_digits=16, decimal_places=2),
    )


def annotated_periods():
    return PayrollPeriod.objects.annotate(
        total_amount=_money_sum("net_pay"),
        total_earnings=_money_sum("total_earnings"),
        total_deductions=_money_sum("total_deductions"),
        employee_count=Count("payroll_items"),
    ).prefetch_related("payroll_items__employee__department")


def _error_response(exc: PayrollError) -> Response:
    code = (
        status.HTTP_404_NOT_FOUND
        if isinstance(exc, PayrollNotFound)
        else status.HTTP_400_BAD_REQUEST
    )
    return Response({"detail": str(exc)}, status=code)


def _client_ip(request) -> str:
    return request.META.get("REMOTE_ADDR", "")


@extend_schema_view(
    list=extend_schema(
        tags=["Payroll"],
        parameters=[
            OpenApiParameter("sort_field", str, enum=sorted(PERIOD_SORT_FIELDS)),
            OpenApiParameter("sort_direction", str, enum=["asc", "desc"]),
        ],
    ),
    retrieve=extend_schema(tags=["Payroll"]),
    create=extend_schema(
        tags=["Payroll"],
        request=PayrollPeriodWriteSerializer,
        responses={201: PayrollPeriodSerializer},
    ),
)
class PayrollPeriodViewSet(
    NotFoundMessageMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    queryset = PayrollPeriod.objects.all()
    serializer_class = PayrollPeriodSerializer
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_class = PayrollPeriodFilter
    search_fields = ["name"]
    not_found_message = "Payroll period not found"

    def get_queryset(self):
        qs = annotated_periods()
        field = self.request.query_params.get("sort_field")
        if field not in PERIOD_SORT_FIELDS:
            return qs.order_by("-created_at", "-id")
        direction = self.request.query_params.get("sort_direction", "desc")
        prefix = "" if direction == "asc" else "-"
        return qs.order_by(f"{prefix}{field}", "-id")

    def create(self, request, *args, **kwargs):
        serializer = PayrollPeriodWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        start, end = data["start_date"], data["end_date"]
        if end <= start:
            return Response(
                {"detail": "End date must be after start date"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if not data.get("is_thirteenth_month"):
            overlaps = PayrollPeriod.objects.filter(
                is_thirteenth_month=False,
                start_date__lte=end,
                end_date__gte=start,
            ).exists()
            if overlaps:
                return Response(
                    {"detail": "Payroll period overlaps with existing period"},
                    status=status.HTTP_400_BAD_REQUEST,
                )
        period = serializer.save()
        logger.info("Payroll period created: %s", period.name)
        return Response(
            PayrollPeriodSerializer(annotated_periods().get(pk=period.pk)).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(tags=["Payroll"], request=None)
    @action(detail=True, methods=["post"], permission_classes=[IsAdmin])
    def close(self, request, pk=None):
        try:
            period, totals = close_period(pk)
        except PayrollError as exc:
            return _error_response(exc)
        log_action(
            "payroll_closed",
            actor=request.user,
            message=f"period={period.name}",
            model_name="payroll.PayrollPeriod",
            record_id=period.pk,
            ip_address=_client_ip(request),
        )
        payload = PayrollPeriodSerializer(annotated_periods().get(pk=period.pk)).data
        payload.update(totals)
        return Response(
            {"detail": "Payroll period closed successfully", "period": payload}
        )

    @extend_schema(tags=["Payroll"], request=ToggleDeductionsSerializer)
    @action(
        detail=False,
        methods=["put"],
        url_path="toggle-deductions",
        permission_classes=[IsAdmin],
    )
    def toggle_deductions(self, request):
        payload = ToggleDeductionsSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        enabled = payload.validated_data["deductions_enabled"]
        try:
            period = set_deductions_enabled(
                payload.validated_data["payroll_period_id"], enabled
            )
        except PayrollError as exc:
            return _error_response(exc)
        log_action(
            "payroll_deductions_toggled",
            actor=request.user,
            message=f"period={period.name} enabled={enabled}",
            model_name="payroll.PayrollPeriod",
            record_id=period.pk,
            after={"deductions_enabled": enabled},
            ip_address=_client_ip(request),
        )
        word = "enabled" if enabled else "disabled"
        return Response(
            {
                "detail": f"Deductions {word} for payroll period",
                "payroll_period": PayrollPeriodSerializer(
                    annotated_periods().get(pk=period.pk)
                ).data,
            }
        )


@extend_schema_view(list=extend_schema(tags=["Payroll"]))
class PayrollItemViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    queryset = (
        PayrollItem.objects.select_related(
            "employee", "employee__department", "period"
        )
        .prefetch_related("deductions__deduction_type")
        .order_by("-created_at", "-id")
    )
    serializer_class = PayrollItemSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = PayrollItemFilter

    def get_queryset(self):
        qs = super().get_queryset()
        user = self.request.user
        if user_has_role(user, (ROLE_EMPLOYEE,)):
            qs = qs.filter(employee__user=user)
        return qs


@extend_schema_view(
    list=extend_schema(tags=["Payroll"]),
    retrieve=extend_schema(tags=["Payroll"]),
    create=extend_schema(tags=["Payroll"]),
    update=extend_schema(tags=["Payroll"]),
    partial_update=extend_schema(tags=["Payroll"]),
    destroy=extend_schema(tags=["Payroll"]),
)
class DeductionTypeViewSet(NotFoundMessageMixin, viewsets.ModelViewSet):
    queryset = DeductionType.objects.order_by("name")
    serializer_class = DeductionTypeSerializer
    permission_classes = [IsAdmin]
    search_fields = ["name", "description"]
    not_found_message = "Deduction type not found"

    def _duplicate(self, name, exclude_pk=None) -> bool:
        qs = DeductionType.objects.filter(name=name)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        return qs.exists()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if self._duplicate(serializer.validated_data["name"]):
            return Response({"detail": "Deduction type already exists"}, status=400)
        dtype = serializer.save()
        return Response(self.get_serializer(dtype).data, status=201)

    def update(self, request, *args, **kwargs):
        dtype = self.get_object()
        serializer = self.get_serializer(dtype, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        name = serializer.validated_data.get("name")
        if name and self._duplicate(name, exclude_pk=dtype.pk):
            return Response({"detail": "Deduction type already exists"}, status=400)
        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, *args, **kwargs):
        dtype = self.get_object()
        if dtype.payroll_deductions.exists():
            return Response(
                {"detail": "Cannot delete deduction type that is used in payroll"},
                status=400,
            )
        dtype.delete()
        return Response({"detail": "Deduction type deleted successfully"})


@extend_schema_view(
    list=extend_schema(tags=["Payroll"]),
    retrieve=extend_schema(tags=["Payroll"]),
    create=extend_schema(tags=["Payroll"]),
    update=extend_schema(tags=["Payroll"]),
    partial_update=extend_schema(tags=["Payroll"]),
    destroy=extend_schema(tags=["Payroll"]),
)
class CashAdvanceViewSet(NotFoundMessageMixin, viewsets.ModelViewSet):
    queryset = CashAdvance.objects.select_related(
        "employee", "employee__department"
    ).order_by("-date_issued", "-id")
    serializer_class = CashAdvanceSerializer
    permission_classes = [IsAdmin]
    filterset_fields = ["employee", "is_paid"]
    not_found_message = "Cash advance not found"

    def destroy(self, request, *args, **kwargs):
        advance = self.get_object()
        if advance.is_paid:
            return Response(
                {"detail": "Cannot delete a cash advance that has been paid"},
                status=400,
            )
        advance.delete()
        return Response({"detail": "Cash advance deleted successfully"})


class CalculatePayrollView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        tags=["Payroll"],
        request=CalculatePayrollSerializer,
        responses={200: CalculatedPayrollItemSerializer(many=True)},
    )
    def post(self, request):
        payload = CalculatePayrollSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        period_id = payload.validated_data["payroll_period_id"]
        try:
            result = calculate_payroll(
                period_id, payload.validated_data.get("employee_ids")
            )
        except PayrollError as exc:
            return _error_response(exc)
        summary = result["summary"]
        log_action(
            "payroll_calculated",
            actor=request.user,
            message=f"period={result['period'].name} employees={summary['total_employees']}",
            model_name="payroll.PayrollPeriod",
            record_id=period_id,
            after={key: str(value) for key, value in summary.items()},
            ip_address=_client_ip(request),
        )
        return Response(
            {
                "detail": "Payroll calculated successfully",
                "payroll_items": CalculatedPayrollItemSerializer(
                    result["items"], many=True
                ).data,
                "summary": CalculationSummarySerializer(summary).data,
            }
        )


class GeneratePayslipView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Payroll"], request=GeneratePayslipSerializer)
    def post(self, request):
        payload = GeneratePayslipSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        item = (
            PayrollItem.objects.select_related(
                "employee", "employee__department", "period"
            )
            .filter(pk=payload.validated_data["payroll_item_id"])
            .first()
        )
        if item is None:
            return Response({"detail": "Payroll item not found"}, status=404)
        if user_has_role(request.user, (ROLE_EMPLOYEE,)) and (
            item.employee.user_id != request.user.pk
        ):
            return Response(
                {"detail": "You can only access your own payslips"},
                status=status.HTTP_403_FORBIDDEN,
            )
        return Response(
            {
                "detail": "Payslip generated successfully",
                "payslip_data": build_payslip(item),
            }
        )


class ExportPayrollView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        tags=["Payroll"],
        request=ExportPayrollSerializer,
        responses={(200, exports.XLSX_CONTENT_TYPE): bytes},
    )
    def post(self, request):
        payload = ExportPayrollSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        period = PayrollPeriod.objects.filter(
            pk=payload.validated_data["payroll_period_id"]
        ).first()
        if period is None:
            return Response({"detail": "Payroll period not found"}, status=404)

        fmt = payload.validated_data["format"].lower()
        if fmt == "excel":
            body = exports.build_workbook(period)
            content_type, extension = exports.XLSX_CONTENT_TYPE, "xlsx"
        elif fmt == "csv":
            body = exports.build_csv(period)
            content_type, extension = exports.CSV_CONTENT_TYPE, "csv"
        else:
            return Response(
                {"detail": "Unsupported export format"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        response = HttpResponse(body, content_type=content_type)
        filename = exports.report_filename(period, extension)
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        logger.info("Payroll period %s exported as %s", period.pk, fmt)
        return response
