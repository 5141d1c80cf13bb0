from unittest import mock

import pytest
import redis

pytestmark = pytest.mark.django_db


def test_health_ok(client):
    with mock.patch("config.health.redis.Redis.ping", return_value=True):
        res = client.get("/health/")
    assert res.status_code == 200  # noqa: PLR2004
    body = res.json()
    assert body["status"] == "ok"
    assert body["components"]["db"]["ok"] is True


def test_health_degraded_when_redis_is_down(client):
    with mock.patch(
        "config.health.redis.Redis.ping",
        side_effect=redis.exceptions.ConnectionError("refused"),
    ):
        res = client.get("/health/")
    assert res.status_code == 503  # noqa: PLR2004
    body = res.json()
    assert body["status"] == "degraded"
    assert body["components"]["redis"] == {"ok": False, "error": "refused"}


def test_health_rejects_post(client):
    assert client.post("/health/").status_code == 405  # noqa: PLR2004
