import pytest
from rest_framework.test import APIClient

from tests.factories import create_user_with_role


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_ctx(db):
    return create_user_with_role("admin", role="ADMIN")


@pytest.fixture
def head_ctx(db):
    return create_user_with_role("head", role="DEPARTMENT_HEAD")


@pytest.fixture
def employee_ctx(db):
    return create_user_with_role("employee", role="EMPLOYEE")


@pytest.fixture
def admin_client(api_client, admin_ctx):
    api_client.force_authenticate(user=admin_ctx.user)
    return api_client


@pytest.fixture
def employee_client(api_client, employee_ctx):
    api_client.force_authenticate(user=employee_ctx.user)
    return api_client
