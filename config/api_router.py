from django.conf import settings
from django.urls import include
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from pyrol.attendance.api.views import AttendanceViewSet
from pyrol.benefits.api.views import BenefitViewSet
from pyrol.benefits.api.views import EmployeeBenefitViewSet
from pyrol.dashboard.api.views import AnalyticsView
from pyrol.dashboard.api.views import DashboardView
from pyrol.dashboard.api.views import DepartmentHeadDashboardView
from pyrol.dashboard.api.views import EmployeeDashboardView
from pyrol.employees.api.views import EmployeeViewSet
from pyrol.employees.api.views import SalaryGradeViewSet
from pyrol.org.api.views import DepartmentViewSet
from pyrol.org.api.views import HolidayViewSet
from pyrol.org.api.views import ScheduleViewSet
from pyrol.users.api.views import UserViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("users", UserViewSet)
router.register("schedules", ScheduleViewSet)
router.register("holidays", HolidayViewSet)
router.register("employees", EmployeeViewSet)
router.register("salary-grades", SalaryGradeViewSet)
router.register("attendance", AttendanceViewSet)
router.register("benefits", BenefitViewSet)
router.register("employee-benefits", EmployeeBenefitViewSet)

# The department collection also answers PUT (head assignment), which the
# router cannot map, so it is wired by hand.
department_list = DepartmentViewSet.as_view(
    {"get": "list", "post": "create", "put": "assign_head"},
)
department_detail = DepartmentViewSet.as_view(
    {
        "get": "retrieve",
        "put": "update",
        "patch": "partial_update",
        "delete": "destroy",
    },
)

app_name = "api"
urlpatterns = [
    path("departments/", department_list, name="department-list"),
    path("departments/<int:pk>/", department_detail, name="department-detail"),
    path("payroll/", include("pyrol.payroll.api.urls")),
    path(
        "audit/",
        include(("pyrol.audit.api.urls", "audit"), namespace="audit"),
    ),
    path("dashboard/", DashboardView.as_view(), name="dashboard"),
    path(
        "employee-dashboard/",
        EmployeeDashboardView.as_view(),
        name="employee-dashboard",
    ),
    path(
        "department-head-dashboard/",
        DepartmentHeadDashboardView.as_view(),
        name="department-head-dashboard",
    ),
    path("analytics/", AnalyticsView.as_view(), name="analytics"),
    *router.urls,
]
