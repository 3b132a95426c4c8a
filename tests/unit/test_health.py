from __future__ import annotations

from fastapi.testclient import TestClient

import rms.api.routes.health as health_route
from rms.api.main import app


def test_live_health_endpoint() -> None:
    client = TestClient(app)
    response = client.get("/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-Id"]


def test_ready_health_endpoint_healthy_with_mocks(monkeypatch) -> None:
    monkeypatch.setattr(health_route, "ping_database", lambda: True)
    monkeypatch.setattr(health_route, "ping_redis", lambda: True)

    client = TestClient(app)
    response = client.get("/health/ready")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "checks": {"database": True, "redis": True},
    }


def test_ready_health_endpoint_reports_failed_checks(monkeypatch) -> None:
    monkeypatch.setattr(health_route, "ping_database", lambda: True)
    monkeypatch.setattr(health_route, "ping_redis", lambda: False)

    client = TestClient(app)
    response = client.get("/health/ready")

    assert response.status_code == 503
    assert response.json() == {
        "status": "unavailable",
        "checks": {"database": True, "redis": False},
    }


def test_metrics_endpoint_exposes_order_counters() -> None:
    client = TestClient(app)
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "rms_orders_created_total" in response.text
    assert "http_requests_total" in response.text
