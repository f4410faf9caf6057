"""
tests/test_routes.py – HTTP API tests.

Uses FastAPI's TestClient with get_gateway overridden by a gateway wired to
FakeBackend, so routing, validation, caching and error rendering are
exercised without touching the real backend.
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from beautydesk.config import settings
from beautydesk.main import app, limiter
from beautydesk.services.gateway import RATE_LIMIT_MESSAGE, get_gateway

SERVICES = [
    {"_id": "s1", "name": "Facial", "isBestSeller": True},
    {"_id": "s2", "name": "Pedicure"},
]


@pytest.fixture
def gw(make_gateway):
    return make_gateway()


ADMIN_AUTH = {"Authorization": "Bearer admin-token"}


@pytest.fixture
def anonymous(gw):
    app.dependency_overrides[get_gateway] = lambda: gw
    limiter.reset()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def client(anonymous):
    anonymous.headers.update(ADMIN_AUTH)
    return anonymous


# ── Health ────────────────────────────────────────────────────────────────────


def test_healthz(client):
    resp = client.get("/healthz")

    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert "X-Request-ID" in resp.headers


def test_readyz_reports_missing_base_url(client, monkeypatch):
    monkeypatch.setattr("beautydesk.routes.health.settings.api_base_url", "")

    body = client.get("/readyz").json()

    assert body["ready"] is False
    assert body["checks"]["api_base_url_configured"] is False


# ── Catalog ───────────────────────────────────────────────────────────────────


class TestCatalogRoutes:
    def test_list_services_cached(self, client, backend):
        backend.on("GET", "/services", json={"data": {"services": SERVICES}})

        first = client.get("/v1/services")
        second = client.get("/v1/services")

        assert first.status_code == 200
        assert first.json() == second.json() == SERVICES
        assert backend.count("GET", "/services") == 1

    def test_create_main_category_invalidates(self, client, backend, gw):
        backend.on("GET", "/main-categories", json={"mainCategories": []})
        backend.on("POST", "/main-categories", status=201, json={"_id": "m1"})
        client.get("/v1/main-categories")

        resp = client.post(
            "/v1/main-categories", json={"name": "Hair", "imageUrl": "https://img/h.png"}
        )

        assert resp.status_code == 201
        assert "main-categories" not in gw.cache
        client.get("/v1/main-categories")
        assert backend.count("GET", "/main-categories") == 2

    def test_create_validation_error_is_422(self, client, backend):
        resp = client.post("/v1/services", json={"name": "No price"})

        assert resp.status_code == 422
        assert backend.calls == []

    def test_toggle_flag(self, client, backend):
        backend.on("POST", "/services/remove-best-seller", json={"ok": True})

        resp = client.put("/v1/services/s1/flags/best-seller", json={"enabled": False})

        assert resp.status_code == 200
        assert backend.count("POST", "/services/remove-best-seller") == 1

    def test_unknown_flag_is_422(self, client, backend):
        resp = client.put("/v1/services/s1/flags/featured", json={"enabled": True})

        assert resp.status_code == 422
        assert backend.calls == []

    def test_list_flagged(self, client, backend):
        backend.on("GET", "/services", json={"services": SERVICES})

        resp = client.get("/v1/services/flags/best-seller")

        assert resp.json() == [SERVICES[0]]

    def test_get_service_by_id(self, client, backend):
        backend.on("GET", "/services/s2", json=SERVICES[1])

        assert client.get("/v1/services/s2").json() == SERVICES[1]


# ── Error rendering ───────────────────────────────────────────────────────────


class TestErrorRendering:
    def test_rate_limit(self, client, backend):
        backend.on("GET", "/services", status=429)

        resp = client.get("/v1/services")

        assert resp.status_code == 429
        assert resp.json() == {"status": 429, "message": RATE_LIMIT_MESSAGE}

    def test_not_found_is_soft_message(self, client, backend):
        resp = client.get("/v1/sub-categories/missing")

        assert resp.status_code == 404
        assert resp.json()["message"] == "Endpoint not available: /sub-categories/missing"

    def test_backend_message_passed_verbatim(self, client, backend):
        backend.on("DELETE", "/services/s1", status=409, json={"message": "Service has bookings"})

        resp = client.delete("/v1/services/s1")

        assert resp.status_code == 409
        assert resp.json()["message"] == "Service has bookings"

    def test_missing_base_url(self, make_gateway, backend):
        app.dependency_overrides[get_gateway] = lambda: make_gateway(base_url="")
        try:
            with TestClient(app, headers=ADMIN_AUTH) as c:
                resp = c.get("/v1/services")
        finally:
            app.dependency_overrides.clear()

        assert resp.status_code == 500
        assert resp.json()["message"] == "API base URL not configured"
        assert backend.calls == []


# ── Accounts, orders, dashboard, cache ────────────────────────────────────────


class TestOtherRoutes:
    def test_verify_login_returns_token_to_caller(self, anonymous, backend, gw):
        backend.on(
            "POST",
            "/auth/verify-login",
            json={"data": {"token": "tok", "user": {"id": "u1", "role": "admin"}}},
        )

        resp = anonymous.post(
            "/v1/auth/verify-login", json={"phoneNumber": "9876543210", "otp": "1234"}
        )

        assert resp.status_code == 200
        assert resp.json()["is_admin"] is True
        assert resp.json()["token"] == "tok"
        assert gw.session.token is None

    def test_logout(self, client, gw, backend):
        backend.on("GET", "/services", json={"services": SERVICES})
        client.get("/v1/services")

        resp = client.post("/v1/auth/logout")

        assert resp.status_code == 204
        assert len(gw.cache) == 0

    def test_users_feature_unavailable(self, client, backend):
        resp = client.get("/v1/users")

        assert resp.status_code == 200
        assert resp.json()["available"] is False
        assert backend.calls == []

    def test_orders_tolerate_missing_endpoint(self, client, backend):
        resp = client.get("/v1/orders")

        assert resp.status_code == 200
        assert resp.json() == []

    def test_backend_health_passthrough(self, client, backend):
        backend.on("GET", "/health", json={"status": "ok", "db": "up"})

        resp = client.get("/v1/backend-health")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "db": "up"}

    def test_backend_health_failure_is_rendered(self, client, backend):
        backend.on("GET", "/health", status=503, json={"message": "Database down"})

        resp = client.get("/v1/backend-health")

        assert resp.status_code == 503
        assert resp.json() == {"status": 503, "message": "Database down"}

    def test_dashboard(self, client, backend, monkeypatch):
        monkeypatch.setattr(settings, "dashboard_request_delay_seconds", 0.0)
        backend.on("GET", "/main-categories", json={"mainCategories": [{"_id": "m1"}]})
        backend.on("GET", "/sub-categories", status=429)
        backend.on("GET", "/services", json={"services": SERVICES})
        backend.on("GET", "/auth/profile", json={"name": "Asha"})

        body = client.get("/v1/dashboard").json()

        assert body["total_main_categories"] == 1
        assert body["total_services"] == 2
        assert body["errors"]["sub-categories"]["status"] == 429
        assert body["rate_limited"] is False

    def test_clear_one_and_all(self, client, backend, gw):
        backend.on("GET", "/services", json={"services": SERVICES})
        backend.on("GET", "/main-categories", json={"mainCategories": []})
        client.get("/v1/services")
        client.get("/v1/main-categories")

        assert client.delete("/v1/cache/services").json() == {"cleared": "services"}
        assert "services" not in gw.cache
        assert "main-categories" in gw.cache

        assert client.delete("/v1/cache").json() == {"cleared": "all"}
        assert len(gw.cache) == 0


# ── Caller authentication ─────────────────────────────────────────────────────


class TestCallerAuth:
    def test_data_routes_require_a_bearer_token(self, anonymous, backend):
        resp = anonymous.get("/v1/services")

        assert resp.status_code == 401
        assert backend.calls == []

    def test_admin_login_is_not_lent_to_anonymous_callers(self, anonymous, backend):
        backend.on(
            "POST", "/auth/verify-login", json={"token": "ADMIN-TOKEN", "user": {"role": "admin"}}
        )
        backend.on("DELETE", "/services/s1", json={"ok": True})
        anonymous.post("/v1/auth/verify-login", json={"phoneNumber": "9876543210", "otp": "1234"})

        resp = anonymous.delete("/v1/services/s1")

        assert resp.status_code == 401
        assert backend.count("DELETE", "/services/s1") == 0

    def test_each_caller_token_is_forwarded(self, anonymous, backend):
        backend.on("DELETE", "/services/s1", json={"ok": True})

        anonymous.delete("/v1/services/s1", headers=ADMIN_AUTH)
        anonymous.delete("/v1/services/s1", headers={"Authorization": "Bearer other-token"})

        sent = [r.headers["Authorization"] for r in backend.calls]
        assert sent == ["Bearer admin-token", "Bearer other-token"]

    def test_login_calls_are_sent_without_a_token(self, anonymous, backend):
        backend.on("POST", "/auth/login", json={"message": "OTP sent"})

        resp = anonymous.post(
            "/v1/auth/login",
            json={"phoneNumber": "9876543210"},
            headers=ADMIN_AUTH,
        )

        assert resp.status_code == 200
        assert "Authorization" not in backend.last("POST", "/auth/login").headers

    def test_profile_is_not_shared_between_callers(self, anonymous, backend):
        backend.on("GET", "/auth/profile", json={"name": "Asha"})

        anonymous.get("/v1/auth/profile", headers=ADMIN_AUTH)
        anonymous.get("/v1/auth/profile", headers={"Authorization": "Bearer other-token"})

        assert backend.count("GET", "/auth/profile") == 2
