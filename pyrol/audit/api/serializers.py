from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from pyrol.audit.models import AuditLog

User = get_user_model()


class AuditActorSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "name", "role"]


class AuditLogSerializer(serializers.ModelSerializer):
    actor = AuditActorSerializer(allow_null=True)

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "action",
            "message",
            "model_name",
            "record_id",
            "before",
            "after",
            "ip_address",
            "created_at",
            "actor",
        ]
