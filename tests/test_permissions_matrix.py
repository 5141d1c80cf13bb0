"""Role gates across the API: who may read and who may write each resource."""

import pytest
from rest_framework import status

pytestmark = pytest.mark.django_db

OK = status.HTTP_200_OK
UNAUTHORIZED = status.HTTP_401_UNAUTHORIZED

READ_MATRIX = [
    # url, admin, department head, employee
    ("/api/v1/departments/", OK, OK, OK),
    ("/api/v1/schedules/", OK, OK, OK),
    ("/api/v1/employees/", OK, OK, OK),
    ("/api/v1/attendance/", OK, OK, OK),
    ("/api/v1/payroll/periods/", OK, OK, OK),
    ("/api/v1/payroll/items/", OK, OK, OK),
    ("/api/v1/dashboard/", OK, OK, OK),
    ("/api/v1/analytics/", OK, OK, OK),
    ("/api/v1/holidays/", OK, UNAUTHORIZED, UNAUTHORIZED),
    ("/api/v1/salary-grades/", OK, UNAUTHORIZED, UNAUTHORIZED),
    ("/api/v1/benefits/", OK, UNAUTHORIZED, UNAUTHORIZED),
    ("/api/v1/employee-benefits/", OK, UNAUTHORIZED, UNAUTHORIZED),
    ("/api/v1/payroll/deduction-types/", OK, UNAUTHORIZED, UNAUTHORIZED),
    ("/api/v1/payroll/cash-advances/", OK, UNAUTHORIZED, UNAUTHORIZED),
    ("/api/v1/users/", OK, UNAUTHORIZED, UNAUTHORIZED),
    ("/api/v1/audit/recent/", OK, UNAUTHORIZED, UNAUTHORIZED),
]

ADMIN_ONLY_WRITES = [
    ("post", "/api/v1/departments/"),
    ("post", "/api/v1/schedules/"),
    ("post", "/api/v1/employees/"),
    ("post", "/api/v1/payroll/periods/"),
    ("post", "/api/v1/payroll/calculate/"),
    ("post", "/api/v1/payroll/export/"),
    ("put", "/api/v1/payroll/periods/toggle-deductions/"),
]


@pytest.fixture
def client_for(api_client, admin_ctx, head_ctx, employee_ctx):
    users = {
        "admin": admin_ctx.user,
        "head": head_ctx.user,
        "employee": employee_ctx.user,
    }

    def _client(role):
        api_client.force_authenticate(user=users[role])
        return api_client

    return _client


@pytest.mark.parametrize(("url", "admin", "head", "employee"), READ_MATRIX)
def test_read_access(client_for, url, admin, head, employee):
    for role, expected in (("admin", admin), ("head", head), ("employee", employee)):
        res = client_for(role).get(url)
        assert res.status_code == expected, (role, url, res.data)


@pytest.mark.parametrize(("method", "url"), ADMIN_ONLY_WRITES)
@pytest.mark.parametrize("role", ["head", "employee"])
def test_admin_only_writes(client_for, role, method, url):
    res = getattr(client_for(role), method)(url, {}, format="json")
    assert res.status_code == UNAUTHORIZED
    assert res.data == {"detail": "Unauthorized"}


@pytest.mark.parametrize(("url", "admin", "head", "employee"), READ_MATRIX)
def test_anonymous_requests_are_rejected(api_client, url, admin, head, employee):
    assert api_client.get(url).status_code == UNAUTHORIZED
