from __future__ import annotations

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from pyrol.audit.models import AuditLog
from pyrol.audit.utils import log_action

pytestmark = pytest.mark.django_db


def test_log_action_records_actor(admin_ctx):
    entry = log_action(
        "payroll_closed",
        actor=admin_ctx.user,
        message="period=March",
        record_id=7,
        after={"status": "CLOSED"},
    )
    assert entry.actor == admin_ctx.user
    assert entry.after == {"status": "CLOSED"}


def test_log_action_without_user_is_system():
    entry = log_action("attendance.clear_day", actor=object())
    assert entry.actor is None


def test_recent_audit_requires_admin(employee_client):
    res = employee_client.get(reverse("api_v1:audit:recent"))
    assert res.status_code == status.HTTP_401_UNAUTHORIZED


def test_recent_audit_returns_newest_first(admin_client):
    base = timezone.now()
    for i in range(6):
        row = AuditLog.objects.create(action=f"test_action_{i}", message=str(i))
        AuditLog.objects.filter(pk=row.pk).update(
            created_at=base + timezone.timedelta(seconds=i)
        )

    res = admin_client.get(reverse("api_v1:audit:recent"))
    assert res.status_code == status.HTTP_200_OK
    assert [r["action"] for r in res.data["results"]] == [
        "test_action_5",
        "test_action_4",
        "test_action_3",
        "test_action_2",
        "test_action_1",
    ]

    res = admin_client.get(reverse("api_v1:audit:recent"), {"limit": "oops"})
    assert res.data["limit"] == 5  # noqa: PLR2004
