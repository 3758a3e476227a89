"""Integration tests for the /proxy endpoint."""

import json

import pytest
from fastapi.testclient import TestClient

from app.api.main import app
from app.api.routes_proxy import get_transport

client = TestClient(app)

WEBHOOK_URL = "https://n8n.example.test/webhook/deals"

VALID_PAYLOAD = {
    "dealer": "Northside Motors",
    "customer": "Jane Doe",
    "amount": 25000,
    "dealDate": "2026-10-01",
    "status": "Pending",
}


def payload(**overrides) -> dict:
    return {**VALID_PAYLOAD, **overrides}


@pytest.fixture
def stub(upstream, clean_env):
    """Route outbound calls to a stub and point the gateway at it."""
    clean_env.setenv("N8N_WEBHOOK_URL", WEBHOOK_URL)
    stub = upstream(200, "OK")
    app.dependency_overrides[get_transport] = lambda: stub.transport
    yield stub
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class TestHealth:
    def test_health(self):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# Gate
# ---------------------------------------------------------------------------


class TestProxyGate:
    def test_preflight_returns_204(self, stub):
        resp = client.options("/proxy", headers={"Origin": "https://app.example"})
        assert resp.status_code == 204
        assert resp.content == b""
        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["access-control-allow-methods"] == "POST, OPTIONS"
        assert resp.headers["access-control-allow-headers"] == "Content-Type, Authorization, x-secret"
        assert resp.headers["access-control-allow-credentials"] == "true"
        assert stub.calls == 0

    def test_other_methods_return_405(self, stub):
        for method in ("GET", "PUT", "PATCH", "DELETE"):
            resp = client.request(method, "/proxy")
            assert resp.status_code == 405, f"{method} not rejected"
            assert resp.json() == {"error": "Method Not Allowed"}
            assert resp.headers["access-control-allow-origin"] == "*"
        assert stub.calls == 0


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestProxyValidation:
    def test_missing_fields_return_400(self, stub):
        resp = client.post("/proxy", json=payload(customer=""))
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "Missing required fields"
        assert body["missing"] == ["customer"]
        assert body["required"] == ["dealer", "customer", "amount", "dealDate", "status"]
        assert stub.calls == 0

    def test_malformed_json_returns_400(self, stub):
        resp = client.post(
            "/proxy", content=b"{dealer:", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid JSON body"}
        assert stub.calls == 0

    def test_non_utf8_body_returns_400(self, stub):
        raw = (
            b'{"dealer": "Northside", "customer": "Ja\xffne", "amount": 1, '
            b'"dealDate": "2026-10-01", "status": "Pending"}'
        )
        resp = client.post("/proxy", content=raw, headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid JSON body"}
        assert resp.headers["access-control-allow-origin"] == "*"
        assert stub.calls == 0

    def test_origin_enforcement_toggle(self, stub, clean_env):
        clean_env.setenv("ALLOWED_ORIGIN", "https://deals.example")
        clean_env.setenv("ENFORCE_ORIGIN", "true")
        resp = client.post("/proxy", json=VALID_PAYLOAD, headers={"Origin": "https://evil.example"})
        assert resp.status_code == 403
        assert stub.calls == 0

        resp = client.post("/proxy", json=VALID_PAYLOAD, headers={"Origin": "https://deals.example"})
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "https://deals.example"
        assert stub.calls == 1


# ---------------------------------------------------------------------------
# Forwarding
# ---------------------------------------------------------------------------


class TestProxyForwarding:
    def test_success(self, stub):
        resp = client.post("/proxy", json=VALID_PAYLOAD)
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "upstreamStatus": 200, "upstreamBody": "OK"}
        assert resp.headers["content-type"] == "application/json"
        assert stub.last_json() == VALID_PAYLOAD

    def test_upstream_503(self, stub):
        stub.status, stub.body = 503, "overloaded"
        resp = client.post("/proxy", json=VALID_PAYLOAD)
        assert resp.status_code == 502
        body = resp.json()
        assert body["upstreamStatus"] == 503
        assert body["upstreamBody"] == "overloaded"

    def test_timeout(self, stub, clean_env):
        clean_env.setenv("PROXY_TIMEOUT_MS", "50")
        stub.delay = 5
        resp = client.post("/proxy", json=VALID_PAYLOAD)
        assert resp.status_code == 502
        assert resp.json()["detail"] == "Upstream request timed out"
        assert stub.aborted is True

    def test_credentials_come_from_env(self, stub, clean_env):
        clean_env.setenv("N8N_USER", "bot")
        clean_env.setenv("N8N_PASS", "s3cret")
        client.post(
            "/proxy", json=VALID_PAYLOAD, headers={"Authorization": "Basic Y2FsbGVyOnNwb29m"}
        )
        assert stub.requests[0].headers["authorization"] == "Basic Ym90OnMzY3JldA=="

    def test_caller_authorization_not_forwarded(self, stub):
        client.post(
            "/proxy", json=VALID_PAYLOAD, headers={"Authorization": "Basic Y2FsbGVyOnNwb29m"}
        )
        assert "authorization" not in stub.requests[0].headers

    def test_missing_webhook_url_returns_500(self, stub, clean_env):
        clean_env.delenv("N8N_WEBHOOK_URL")
        resp = client.post("/proxy", json=VALID_PAYLOAD)
        assert resp.status_code == 500
        assert "N8N_WEBHOOK_URL" in resp.json()["error"]
        assert stub.calls == 0

    def test_repeat_requests_identical(self, stub):
        first = client.post("/proxy", json=VALID_PAYLOAD)
        second = client.post("/proxy", json=VALID_PAYLOAD)
        assert first.status_code == second.status_code
        assert first.content == second.content
        assert json.loads(first.content)["ok"] is True
