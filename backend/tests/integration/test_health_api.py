"""Integration tests for the health endpoint and cross-cutting headers."""

from __future__ import annotations

from tests.helpers.auth import API


def test_health_reports_db_and_backend(client, session) -> None:
    resp = client.get(f"{API}/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"
    assert body["refresh_token_backend"] == "sql"


def test_request_id_is_echoed(client, session) -> None:
    resp = client.get(f"{API}/health", headers={"X-Request-ID": "req-123"})

    assert resp.headers.get("X-Request-ID") == "req-123"


def test_unknown_route_is_problem_json(client, session) -> None:
    resp = client.get(f"{API}/does-not-exist")

    assert resp.status_code == 404
    assert resp.mimetype == "application/problem+json"
