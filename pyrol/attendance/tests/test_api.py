from datetime import date
from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework import status

from pyrol.attendance.models import Attendance
from tests.factories import create_employee
from tests.factories import create_user_with_role

pytestmark = pytest.mark.django_db

URL = "/api/v1/attendance/"
QR_URL = "/api/v1/attendance/qr-scan/"


def test_list_requires_authentication(api_client):
    res = api_client.get(URL)
    assert res.status_code == status.HTTP_401_UNAUTHORIZED


def test_admin_lists_all_rows_paginated(admin_client, employee_ctx):
    other = create_employee()
    Attendance.objects.create(employee=employee_ctx.employee, date=date(2025, 3, 3))
    Attendance.objects.create(employee=other, date=date(2025, 3, 4))
    res = admin_client.get(URL)
    assert res.status_code == status.HTTP_200_OK
    assert res.data["pagination"]["total"] == 2  # noqa: PLR2004
    # Newest date first by default.
    assert [row["date"] for row in res.data["results"]] == ["2025-03-04", "2025-03-03"]


def test_employee_sees_only_own_rows(api_client, employee_ctx):
    other = create_employee()
    Attendance.objects.create(employee=employee_ctx.employee, date=date(2025, 3, 3))
    Attendance.objects.create(employee=other, date=date(2025, 3, 3))
    api_client.force_authenticate(user=employee_ctx.user)
    res = api_client.get(URL, {"employee_id": other.pk})
    assert res.status_code == status.HTTP_200_OK
    assert res.data["results"] == []
    res = api_client.get(URL)
    assert [row["employee"]["id"] for row in res.data["results"]] == [
        employee_ctx.employee.pk
    ]


def test_list_filters_and_sorting(admin_client, employee_ctx):
    employee = employee_ctx.employee
    for day, state in [(3, "PRESENT"), (4, "LATE"), (5, "LATE")]:
        Attendance.objects.create(employee=employee, date=date(2025, 3, day), status=state)
    res = admin_client.get(
        URL,
        {
            "status": "LATE",
            "start_date": "2025-03-04",
            "sort_field": "date",
            "sort_direction": "asc",
        },
    )
    assert [row["date"] for row in res.data["results"]] == ["2025-03-04", "2025-03-05"]


def test_employee_can_punch_for_self(employee_client, employee_ctx):
    res = employee_client.post(
        URL, {"employee_id": employee_ctx.employee.pk, "type": "IN"}, format="json"
    )
    assert res.status_code == status.HTTP_200_OK, res.data
    assert res.data["time_in"] is not None
    assert res.data["date"] == timezone.localdate().isoformat()


def test_employee_cannot_punch_for_someone_else(employee_client):
    other = create_employee()
    res = employee_client.post(
        URL, {"employee_id": other.pk, "type": "IN"}, format="json"
    )
    assert res.status_code == status.HTTP_401_UNAUTHORIZED
    assert res.data["detail"] == "Unauthorized"


def test_punch_rule_violation_is_400(admin_client):
    employee = create_employee()
    res = admin_client.post(URL, {"employee_id": employee.pk, "type": "OUT"}, format="json")
    assert res.status_code == status.HTTP_400_BAD_REQUEST
    assert res.data["detail"] == "Must clock in first"


def test_admin_creates_manual_record(admin_client):
    employee = create_employee()
    payload = {"employee_id": employee.pk, "date": "2025-03-03", "notes": "paper log"}
    res = admin_client.post(URL, payload, format="json")
    assert res.status_code == status.HTTP_201_CREATED, res.data
    assert res.data["status"] == Attendance.Status.PRESENT
    res = admin_client.post(URL, payload, format="json")
    assert res.status_code == status.HTTP_400_BAD_REQUEST
    assert res.data["detail"] == "Attendance record already exists for this date"


def test_manual_record_is_admin_only(employee_client, employee_ctx):
    res = employee_client.post(
        URL,
        {"employee_id": employee_ctx.employee.pk, "date": "2025-03-03"},
        format="json",
    )
    assert res.status_code == status.HTTP_401_UNAUTHORIZED


def test_department_head_punches_only_for_self(api_client):
    head = create_user_with_role("lead", role="DEPARTMENT_HEAD")
    other = create_employee()
    api_client.force_authenticate(user=head.user)
    res = api_client.post(URL, {"employee_id": other.pk, "type": "IN"}, format="json")
    assert res.status_code == status.HTTP_401_UNAUTHORIZED
    res = api_client.post(
        URL, {"employee_id": head.employee.pk, "type": "IN"}, format="json"
    )
    assert res.status_code == status.HTTP_200_OK


class TestQRScan:
    def test_is_public_and_clocks_in(self, api_client):
        employee = create_employee(employee_id="QR001", first_name="Ana", last_name="Cruz")
        res = api_client.post(QR_URL, {"employee_id": "QR001", "type": "IN"}, format="json")
        assert res.status_code == status.HTTP_200_OK, res.data
        assert res.data["success"] is True
        assert res.data["message"].startswith("Clocked in successfully at ")
        assert res.data["employee_name"] == "Ana Cruz"
        assert res.data["employee_id"] == "QR001"
        assert Attendance.objects.filter(employee=employee).exists()

    def test_unknown_code_is_404(self, api_client):
        res = api_client.post(QR_URL, {"employee_id": "NOPE", "type": "IN"}, format="json")
        assert res.status_code == status.HTTP_404_NOT_FOUND
        assert res.data["success"] is False
        assert res.data["detail"] == "Employee not found"

    def test_inactive_employee_is_rejected(self, api_client):
        create_employee(employee_id="QR002", is_active=False)
        res = api_client.post(QR_URL, {"employee_id": "QR002", "type": "IN"}, format="json")
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data["detail"] == "Employee is inactive"

    def test_rule_violation_carries_employee_name(self, api_client):
        create_employee(employee_id="QR003", first_name="Ben", last_name="Reyes")
        res = api_client.post(QR_URL, {"employee_id": "QR003", "type": "BREAK_IN"}, format="json")
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert res.data["success"] is False
        assert res.data["message"] == "Must clock in first"
        assert res.data["employee_name"] == "Ben Reyes"

    def test_break_end_message_reports_minutes(self, api_client):
        employee = create_employee(employee_id="QR004")
        now = timezone.now()
        Attendance.objects.create(
            employee=employee,
            date=timezone.localdate(now),
            time_in=now - timedelta(hours=3),
            break_out=now - timedelta(minutes=30, seconds=5),
        )
        res = api_client.post(QR_URL, {"employee_id": "QR004", "type": "BREAK_IN"}, format="json")
        assert res.status_code == status.HTTP_200_OK, res.data
        assert res.data["message"].endswith("(30 minutes)")
