from __future__ import annotations

from typing import TYPE_CHECKING

from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from pyrol.audit.api.serializers import AuditLogSerializer
from pyrol.audit.models import AuditLog
from pyrol.users.api.permissions import IsAdmin

if TYPE_CHECKING:
    from django.db.models import QuerySet

DEFAULT_LIMIT = 5
MAX_LIMIT = 50


class RecentAuditView(APIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        tags=["Audit"],
        parameters=[OpenApiParameter("limit", int, required=False)],
        responses={200: AuditLogSerializer(many=True)},
    )
    def get(self, request):
        try:
            limit = int(request.query_params.get("limit", DEFAULT_LIMIT))
        except (TypeError, ValueError):
            limit = DEFAULT_LIMIT
        limit = max(1, min(limit, MAX_LIMIT))

        qs: QuerySet[AuditLog] = AuditLog.objects.select_related("actor").all()
        rows = list(qs[:limit])
        data = AuditLogSerializer(rows, many=True).data
        return Response({"results": data, "limit": limit})
