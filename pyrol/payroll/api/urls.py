from django.urls import path
from rest_framework.routers import SimpleRouter

from .views import CalculatePayrollView
from .views import CashAdvanceViewSet
from .views import DeductionTypeViewSet
from .views import ExportPayrollView
from .views import GeneratePayslipView
from .views import PayrollItemViewSet
from .views import PayrollPeriodViewSet

router = SimpleRouter()
router.register("periods", PayrollPeriodViewSet, basename="payroll-period")
router.register("items", PayrollItemViewSet, basename="payroll-item")
router.register("deduction-types", DeductionTypeViewSet, basename="deduction-type")
router.register("cash-advances", CashAdvanceViewSet, basename="cash-advance")

urlpatterns = [
    path("calculate/", CalculatePayrollView.as_view(), name="payroll-calculate"),
    path(
        "generate-payslip/",
        GeneratePayslipView.as_view(),
        name="payroll-generate-payslip",
    ),
    path("export/", ExportPayrollView.as_view(), name="payroll-export"),
    *router.urls,
]
