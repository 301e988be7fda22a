"""Integration tests for authentication endpoints."""

from __future__ import annotations

from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.helpers.auth import API, json_headers, login_tokens
from todoflow.infra.sql.sql_refresh_token_store import SQLRefreshTokenStore
from todoflow.models.refresh_token import RefreshToken
from todoflow.services._shared.errors import StorageError


def test_register_then_login(client, session) -> None:
    """A user can register and then obtain a pair by logging in."""

    payload = {"username": "alice", "email": "alice@x.com", "password": "Secret123!", "first_name": "Alice"}

    resp = client.post(f"{API}/auth/register", json=payload)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["message_code"] == "USER_CREATED_SUCCESS"
    assert body["data"]["username"] == "alice"
    assert "access_token" not in body["data"]

    access, refresh = login_tokens(client, "alice", "Secret123!")
    assert access and refresh


def test_register_reports_validation_errors(client, session) -> None:
    UserFactory(username="taken", email="taken@example.com")

    resp = client.post(
        f"{API}/auth/register",
        json={"username": "taken", "email": "taken@example.com", "password": "Secret123!"},
    )

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["message_code"] == "USER_CREATED_FAILURE"
    assert [e["code"] for e in body["errors"]] == ["duplicate_user_name", "duplicate_email"]


def test_register_rejects_malformed_payload(client, session) -> None:
    resp = client.post(f"{API}/auth/register", json={"username": "x"})

    assert resp.status_code == 422
    assert resp.mimetype == "application/problem+json"


def test_login_failures_are_identical(client, session) -> None:
    user = UserFactory()

    unknown = client.post(f"{API}/auth/login", json={"username": "ghost", "password": DEFAULT_PASSWORD})
    wrong = client.post(f"{API}/auth/login", json={"username": user.username, "password": "Nope123!"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.get_json() == wrong.get_json() == {
        "success": False,
        "message_code": "USER_LOGIN_FAILURE",
        "errors": [{"code": "login_failure", "description": "Invalid username or password."}],
    }


def test_login_stores_remote_address(client, session) -> None:
    user = UserFactory()

    resp = client.post(
        f"{API}/auth/login",
        json={"username": user.username, "password": DEFAULT_PASSWORD},
        environ_base={"REMOTE_ADDR": "198.51.100.23"},
    )

    assert resp.status_code == 200
    row = session.query(RefreshToken).filter_by(value=resp.get_json()["data"]["refresh_token"]).one()
    assert row.owner_id == user.id
    assert row.remote_address == "198.51.100.23"


def test_refresh_rotates_and_blocks_replay(client, session, freeze_time) -> None:
    user = UserFactory()
    with freeze_time("2030-01-01 08:00:00"):
        access, refresh = login_tokens(client, user.username)

    with freeze_time("2030-01-01 09:00:00"):
        # The access token has expired by now; that is the normal trigger
        first = client.post(f"{API}/auth/refresh-token", json={"access_token": access, "refresh_token": refresh})
        second = client.post(f"{API}/auth/refresh-token", json={"access_token": access, "refresh_token": refresh})

    assert first.status_code == 200
    assert first.get_json()["message_code"] == "REFRESH_TOKEN_SUCCESS"
    new_refresh = first.get_json()["data"]["refresh_token"]
    assert new_refresh != refresh

    assert second.status_code == 401
    assert second.get_json()["errors"] == [
        {"code": "refresh_token_failure", "description": "Invalid or bad refresh token."}
    ]
    values = {r.value for r in session.query(RefreshToken).filter_by(owner_id=user.id)}
    assert values == {new_refresh}


def test_refresh_with_forged_access_token(client, session) -> None:
    user = UserFactory()
    _, refresh = login_tokens(client, user.username)

    resp = client.post(f"{API}/auth/refresh-token", json={"access_token": "forged.jwt.value", "refresh_token": refresh})

    assert resp.status_code == 401
    assert resp.get_json()["message_code"] == "REFRESH_TOKEN_FAILURE"


def test_storage_failure_is_not_a_credentials_error(client, session, monkeypatch) -> None:
    user = UserFactory()

    def _down(self, record):
        raise StorageError("refresh token store down")

    monkeypatch.setattr(SQLRefreshTokenStore, "insert", _down)

    resp = client.post(f"{API}/auth/login", json={"username": user.username, "password": DEFAULT_PASSWORD})

    assert resp.status_code == 503
    assert resp.get_json()["code"] == "storage_unavailable"


def test_me_requires_and_accepts_issued_access_token(client, session) -> None:
    user = UserFactory()
    access, _ = login_tokens(client, user.username)

    anonymous = client.get(f"{API}/auth/me")
    resp = client.get(f"{API}/auth/me", headers=json_headers(access))

    assert anonymous.status_code == 401
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["id"] == user.id
    assert data["email"] == user.email


def test_me_rejects_expired_access_token(client, session, freeze_time) -> None:
    user = UserFactory()
    with freeze_time("2030-01-01 08:00:00"):
        access, _ = login_tokens(client, user.username)
    with freeze_time("2030-01-01 09:00:00"):
        resp = client.get(f"{API}/auth/me", headers=json_headers(access))

    assert resp.status_code == 401

