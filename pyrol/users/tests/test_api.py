import pytest
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken

from pyrol.audit.models import AuditLog
from pyrol.users.models import User
from tests.factories import create_user

pytestmark = pytest.mark.django_db

LOGIN_URL = "/api/v1/auth/login/"


def test_role_drives_staff_flag():
    admin = create_user("boss", role=User.Role.ADMIN)
    employee = create_user("worker")
    assert admin.is_staff is True
    assert admin.is_admin is True
    assert employee.is_staff is False
    assert employee.is_department_head is False


def test_name_follows_first_and_last_name():
    user = create_user("named")
    user.first_name = "Ana"
    user.last_name = "Cruz"
    user.save(update_fields=["first_name", "last_name"])
    user.refresh_from_db()
    assert user.name == "Ana Cruz"


def test_me_returns_linked_employee(employee_client, employee_ctx):
    res = employee_client.get("/api/v1/users/me/")
    assert res.status_code == status.HTTP_200_OK
    assert res.data["role"] == "EMPLOYEE"
    assert res.data["employee_id"] == employee_ctx.employee.pk


def test_user_list_is_admin_only(employee_client):
    res = employee_client.get("/api/v1/users/")
    assert res.status_code == status.HTTP_401_UNAUTHORIZED
    assert res.data == {"detail": "Unauthorized"}


def test_admin_filters_users_by_role(admin_client, employee_ctx):
    res = admin_client.get("/api/v1/users/", {"role": "EMPLOYEE"})
    assert res.status_code == status.HTTP_200_OK
    assert [u["email"] for u in res.data["results"]] == [employee_ctx.user.email]


class TestLogin:
    def test_login_by_email_sets_cookies_and_audits(self, api_client):
        user = create_user("cookie")
        res = api_client.post(
            LOGIN_URL,
            {"email": user.email, "password": "TestPass123!"},
            format="json",
        )
        assert res.status_code == status.HTTP_200_OK, res.data
        assert res.data == {"detail": "login successful"}
        assert "access_token" in res.cookies
        assert AuditLog.objects.filter(action="login", actor=user).exists()

    def test_wrong_password(self, api_client):
        user = create_user("cookie")
        res = api_client.post(
            LOGIN_URL, {"email": user.email, "password": "nope"}, format="json"
        )
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert not AuditLog.objects.filter(action="login").exists()

    def test_jwt_pair_carries_role_claim(self, api_client):
        create_user("tokens", role=User.Role.DEPARTMENT_HEAD)
        res = api_client.post(
            "/api/v1/auth/jwt/create/",
            {"username": "tokens@example.com", "password": "TestPass123!"},
            format="json",
        )
        assert res.status_code == status.HTTP_200_OK, res.data
        claims = AccessToken(res.data["access"])
        assert claims["role"] == "DEPARTMENT_HEAD"
        assert claims["email"] == "tokens@example.com"
