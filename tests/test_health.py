"""
tests/test_health.py -- Integration tests for the liveness endpoints.

Covers:
  - GET / answers plain "Hello World!"
  - GET /api/health returns 200 with status and version
  - No authentication required
  - Unknown routes answer in the failure envelope
"""

from __future__ import annotations

from api.main import VERSION


def test_root_returns_hello_world(client):
    """Root route is a plain-text liveness check."""
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "Hello World!"


def test_health_returns_200_with_version(client):
    """Health endpoint returns 200 with status and version."""
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["version"] == VERSION


def test_health_no_auth_required(client):
    """Health endpoint is accessible without any authentication headers."""
    resp = client.get("/api/health", headers={})
    assert resp.status_code == 200


def test_unknown_route_uses_failure_envelope(client):
    """A 404 from routing is wrapped like every other error."""
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    body = resp.json()
    assert body["statusCode"] == 404
    assert body["status"] == "failure"
    assert body["error"]["code"] == 404
    assert body["error"]["name"] == "Not Found"
