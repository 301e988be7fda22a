"""Tests for the ``flask tokens`` command group."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from tests.factories.user import UserFactory
from todoflow.infra.sql.sql_refresh_token_store import SQLRefreshTokenStore
from todoflow.services._shared.ports import RefreshTokenRecord


def _record(owner_id: str, value: str, expires_at: datetime) -> RefreshTokenRecord:
    created = expires_at - timedelta(days=5)
    return RefreshTokenRecord(value, owner_id, created, created, expires_at)


def test_purge_expired_command(app, session):
    user = UserFactory()
    store = SQLRefreshTokenStore()
    store.insert(_record(user.id, "old", datetime(2020, 1, 1, tzinfo=UTC)))
    store.insert(_record(user.id, "new", datetime(2099, 1, 1, tzinfo=UTC)))

    result = app.test_cli_runner().invoke(args=["tokens", "purge-expired", "--before", "2030-01-01"])

    assert result.exit_code == 0, result.output
    assert "Purged 1 expired refresh token(s)" in result.output
    assert [r.value for r in store.find_by_owner(user.id)] == ["new"]
