import logging

from django.db.models import Count
from django.db.models import Q
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.response import Response

from pyrol.benefits.models import Benefit
from pyrol.benefits.models import EmployeeBenefit
from pyrol.employees.models import Employee
from pyrol.users.api.permissions import IsAdmin
from pyrol.utils.views import NotFoundMessageMixin

from .filters import EmployeeBenefitFilter
from .serializers import BenefitSerializer
from .serializers import EmployeeBenefitAssignSerializer
from .serializers import EmployeeBenefitSerializer

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(tags=["Benefits"]),
    retrieve=extend_schema(tags=["Benefits"]),
    create=extend_schema(tags=["Benefits"]),
    update=extend_schema(tags=["Benefits"]),
    partial_update=extend_schema(tags=["Benefits"]),
    destroy=extend_schema(tags=["Benefits"]),
)
class BenefitViewSet(NotFoundMessageMixin, viewsets.ModelViewSet):
    queryset = Benefit.objects.annotate(
        active_enrolments=Count("enrolments", filter=Q(enrolments__is_active=True))
    ).order_by("-created_at")
    serializer_class = BenefitSerializer
    permission_classes = [IsAdmin]
    search_fields = ["name", "description", "type"]
    not_found_message = "Benefit not found"

    def destroy(self, request, *args, **kwargs):
        benefit = self.get_object()
        if benefit.enrolments.filter(is_active=True).exists():
            return Response(
                {"detail": "Cannot delete benefit that is assigned to employees"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        benefit.delete()
        return Response({"detail": "Benefit deleted successfully"})


@extend_schema_view(
    list=extend_schema(tags=["Benefits"]),
    create=extend_schema(
        tags=["Benefits"],
        request=EmployeeBenefitAssignSerializer,
        responses={201: EmployeeBenefitSerializer},
    ),
    update=extend_schema(tags=["Benefits"]),
    partial_update=extend_schema(tags=["Benefits"]),
    destroy=extend_schema(tags=["Benefits"]),
)
class EmployeeBenefitViewSet(
    NotFoundMessageMixin,
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = EmployeeBenefit.objects.select_related("employee", "benefit").order_by(
        "-created_at"
    )
    serializer_class = EmployeeBenefitSerializer
    permission_classes = [IsAdmin]
    filterset_class = EmployeeBenefitFilter
    pagination_class = None
    not_found_message = "Employee benefit not found"

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action == "list":
            qs = qs.filter(is_active=True)
        return qs

    def create(self, request, *args, **kwargs):
        payload = EmployeeBenefitAssignSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data
        employee = Employee.objects.filter(pk=data["employee_id"]).first()
        if employee is None:
            return Response({"detail": "Employee not found"}, status=404)
        benefit = Benefit.objects.filter(pk=data["benefit_id"]).first()
        if benefit is None:
            return Response({"detail": "Benefit not found"}, status=404)

        enrolment = EmployeeBenefit.objects.filter(
            employee=employee, benefit=benefit
        ).first()
        if enrolment is not None and enrolment.is_active:
            return Response(
                {"detail": "Employee already has this benefit"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if enrolment is None:
            enrolment = EmployeeBenefit(employee=employee, benefit=benefit)
        enrolment.start_date = data.get("start_date") or timezone.localdate()
        enrolment.end_date = data.get("end_date")
        enrolment.is_active = True
        enrolment.save()
        logger.info(
            "Benefit %s assigned to employee %s", benefit.name, employee.employee_id
        )
        return Response(
            EmployeeBenefitSerializer(enrolment).data, status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        kwargs["partial"] = True
        return super().update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        enrolment = self.get_object()
        enrolment.is_active = False
        enrolment.save(update_fields=["is_active", "updated_at"])
        return Response({"detail": "Benefit removed successfully"})
