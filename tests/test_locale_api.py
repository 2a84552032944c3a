"""Integration tests for the locale, layout, health, and metrics endpoints."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from src.eventdesk.config import get_settings

COOKIE = get_settings().LOCALE_COOKIE_NAME


@pytest.mark.asyncio
async def test_get_locale_defaults_without_cookie(client):
    response = await client.get("/api/locale")

    assert response.status_code == 200
    data = response.json()
    assert data["locale"] == "es"
    assert data["supported"] == [
        {"code": "en", "name": "English"},
        {"code": "es", "name": "Español"},
        {"code": "ko", "name": "한국어"},
    ]


@pytest.mark.asyncio
async def test_get_locale_reads_cookie(client):
    response = await client.get("/api/locale", headers={"Cookie": f"{COOKIE}=ko"})

    assert response.json()["locale"] == "ko"


@pytest.mark.asyncio
async def test_unknown_cookie_value_falls_back(client):
    response = await client.get("/api/locale", headers={"Cookie": f"{COOKIE}=xx"})

    assert response.json()["locale"] == "es"


@pytest.mark.asyncio
async def test_put_locale_sets_cookie(client):
    response = await client.put("/api/locale", json={"locale": "en"})

    assert response.status_code == 200
    assert response.json()["locale"] == "en"
    set_cookie = response.headers["set-cookie"]
    assert f"{COOKIE}=en" in set_cookie
    assert f"Max-Age={get_settings().LOCALE_COOKIE_MAX_AGE}" in set_cookie


@pytest.mark.asyncio
async def test_put_unsupported_locale(client):
    response = await client.put("/api/locale", json={"locale": "fr"})

    assert response.status_code == 400
    assert response.json() == {"error": "Unsupported locale: fr"}


@pytest.mark.asyncio
async def test_layout_follows_cookie(client):
    response = await client.get("/api/layout", headers={"Cookie": f"{COOKIE}=en"})

    assert response.status_code == 200
    data = response.json()
    assert data["locale"] == "en"
    assert data["navigation"][0]["label"] == "Dashboard"
    assert data["header"]["search"] == "Search..."
    assert [lang["active"] for lang in data["languages"]] == [True, False, False]


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers


@pytest.mark.asyncio
async def test_incoming_request_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
async def test_readiness_degraded_when_database_down(client):
    with patch(
        "src.eventdesk.api.routes.health.ping_db",
        AsyncMock(side_effect=OSError("connection refused")),
    ):
        response = await client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"
    assert response.json()["checks"]["database"] == "error"


@pytest.mark.asyncio
async def test_readiness_ok(client):
    with patch("src.eventdesk.api.routes.health.ping_db", AsyncMock(return_value=None)):
        response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_metrics_endpoint(client):
    await client.get("/health")

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text
