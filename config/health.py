from __future__ import annotations

import logging
from typing import Any

import redis
from django.conf import settings
from django.db import connection
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Health check: database unavailable: %s", exc)
        return {"ok": False, "error": str(exc)}
    return {"ok": True, "vendor": connection.vendor}


def check_redis() -> dict[str, Any]:
    url = getattr(settings, "REDIS_URL", None)
    if not url:
        return {"ok": False, "error": "REDIS_URL not configured"}
    try:
        client = redis.Redis.from_url(
            url,
            socket_timeout=0.5,
            socket_connect_timeout=0.5,
        )
        client.ping()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Health check: redis unavailable: %s", exc)
        return {"ok": False, "error": str(exc)}
    return {"ok": True}


@require_GET
def health(request):
    """Report database and broker reachability.

    200 when every component answers, 503 otherwise with ``degraded`` (some
    components up) or ``down`` (none up).
    """
    components = {"db": check_db(), "redis": check_redis()}

    up = [name for name, info in components.items() if info.get("ok")]
    if len(up) == len(components):
        state = "ok"
    elif up:
        state = "degraded"
    else:
        state = "down"

    return JsonResponse(
        {
            "status": state,
            "components": components,
            "checked_at": timezone.now().isoformat(),
        },
        status=200 if state == "ok" else 503,
    )
