"""
Unit tests for RedisRefreshTokenStore using fakeredis.

These tests exercise the main flows:
- insert + find_by_owner
- rotate (success, replay, expiry, collision, lost WATCH races)
- revoke idempotency
- purge_expired
- backend failures surfacing as StorageError, without partial writes

They use fakeredis.FakeRedis so they run entirely in-memory.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta

import pytest
import redis
from redis.exceptions import ConnectionError as RedisConnectionError

from todoflow.infra.redis.redis_refresh_token_store import MAX_WATCH_ATTEMPTS, RedisRefreshTokenStore
from todoflow.services._shared.errors import StorageError
from todoflow.services._shared.ports import RefreshTokenRecord


def _now() -> datetime:
    """Return a timezone-aware UTC "now" truncated to whole seconds."""
    return datetime.now(UTC).replace(microsecond=0)


def _record(owner_id: str, value: str, *, expires_in: timedelta = timedelta(days=5)) -> RefreshTokenRecord:
    now = _now()
    return RefreshTokenRecord(
        value=value,
        owner_id=owner_id,
        created_at=now,
        modified_at=now,
        expires_at=now + expires_in,
        remote_address="127.0.0.1",
    )


@pytest.fixture
def store(fake_redis):
    """Provide a RedisRefreshTokenStore backed by FakeRedis."""
    return RedisRefreshTokenStore(r=fake_redis, owner_exists=lambda owner_id: owner_id.startswith("user-"))


def test_insert_and_find_by_owner(store, fake_redis):
    rec = _record("user-1", "rt-a")
    store.insert(rec)

    rows = store.find_by_owner("user-1")

    assert rows == [rec]
    # Hash TTL follows the token expiry
    assert 0 < fake_redis.ttl("rt:rt-a") <= int(timedelta(days=5).total_seconds())


def test_insert_rejects_unknown_owner(store, fake_redis):
    with pytest.raises(StorageError):
        store.insert(_record("ghost", "rt-x"))

    assert not fake_redis.exists("rt:rt-x")


def test_insert_rejects_duplicate_value(store):
    store.insert(_record("user-1", "dup"))

    with pytest.raises(StorageError):
        store.insert(_record("user-2", "dup"))


def test_revoke_is_idempotent(store):
    store.insert(_record("user-1", "rt-b"))

    assert store.revoke("rt-b") is True
    assert store.revoke("rt-b") is False
    assert store.find_by_owner("user-1") == []


def test_rotate_success_then_replay_fails(store):
    store.insert(_record("user-1", "old"))

    assert store.rotate("old", _record("user-1", "new-1"), _now()) is True
    assert store.rotate("old", _record("user-1", "new-2"), _now()) is False

    assert [r.value for r in store.find_by_owner("user-1")] == ["new-1"]


def test_rotate_refuses_expired_row(store):
    store.insert(_record("user-1", "old", expires_in=timedelta(seconds=30)))

    later = _now() + timedelta(minutes=1)
    assert store.rotate("old", _record("user-1", "new"), later) is False
    assert [r.value for r in store.find_by_owner("user-1")] == ["old"]


def test_rotate_collision_raises_and_keeps_old(store):
    store.insert(_record("user-1", "old"))
    store.insert(_record("user-1", "taken"))

    with pytest.raises(StorageError):
        store.rotate("old", _record("user-1", "taken"), _now())

    assert sorted(r.value for r in store.find_by_owner("user-1")) == ["old", "taken"]


def test_find_by_owner_prunes_vanished_members(store, fake_redis):
    store.insert(_record("user-1", "a"))
    store.insert(_record("user-1", "b"))
    fake_redis.delete("rt:a")  # as if the TTL fired

    assert [r.value for r in store.find_by_owner("user-1")] == ["b"]
    assert fake_redis.smembers("rt:u:user-1") == {b"b"}


def test_purge_expired_removes_only_due_rows(store):
    store.insert(_record("user-1", "short", expires_in=timedelta(minutes=1)))
    store.insert(_record("user-1", "long"))

    removed = store.purge_expired(_now() + timedelta(minutes=2))

    assert removed == 1
    assert [r.value for r in store.find_by_owner("user-1")] == ["long"]


def test_backend_failure_is_wrapped(store, monkeypatch):
    def _boom(*args, **kwargs):
        raise RedisConnectionError("down")

    monkeypatch.setattr(store.r, "smembers", _boom)

    with pytest.raises(StorageError):
        store.find_by_owner("user-1")


def test_failed_insert_transaction_leaves_no_partial_hash(store, fake_redis, monkeypatch):
    def _exec_fails(self, *args, **kwargs):
        raise RedisConnectionError("connection dropped during EXEC")

    monkeypatch.setattr(redis.client.Pipeline, "execute", _exec_fails)

    with pytest.raises(StorageError):
        store.insert(_record("user-1", "rt-lost"))

    assert fake_redis.exists("rt:rt-lost") == 0
    assert fake_redis.smembers("rt:u:user-1") == set()


# ------------------------- optimistic locking ------------------------------ #
def test_rotate_loses_to_a_rotation_between_watch_and_exec(store, monkeypatch):
    store.insert(_record("user-1", "old"))
    original_hgetall = redis.client.Pipeline.hgetall
    interleaved = []

    def _hgetall_then_race(self, name):
        h = original_hgetall(self, name)
        if not interleaved:
            interleaved.append(name)
            # Another worker wins while this transaction is still open
            assert store.rotate("old", _record("user-1", "winner"), _now()) is True
        return h

    monkeypatch.setattr(redis.client.Pipeline, "hgetall", _hgetall_then_race)

    assert store.rotate("old", _record("user-1", "loser"), _now()) is False
    assert [r.value for r in store.find_by_owner("user-1")] == ["winner"]


def test_rotate_gives_up_after_repeated_conflicts(store, fake_redis, monkeypatch):
    store.insert(_record("user-1", "old"))
    original_hgetall = redis.client.Pipeline.hgetall
    reads = []

    def _hgetall_then_touch(self, name):
        h = original_hgetall(self, name)
        reads.append(name)
        fake_redis.hincrby(name, "touched", 1)
        return h

    monkeypatch.setattr(redis.client.Pipeline, "hgetall", _hgetall_then_touch)

    with pytest.raises(StorageError):
        store.rotate("old", _record("user-1", "new"), _now())

    assert len(reads) == MAX_WATCH_ATTEMPTS
    assert fake_redis.exists("rt:new") == 0
    assert [r.value for r in store.find_by_owner("user-1")] == ["old"]


def test_concurrent_rotations_succeed_exactly_once(store):
    store.insert(_record("user-1", "old"))
    workers = 8
    barrier = threading.Barrier(workers)

    def _attempt(i):
        barrier.wait()
        return store.rotate("old", _record("user-1", f"new-{i}"), _now())

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(_attempt, range(workers)))

    assert results.count(True) == 1
    winner = f"new-{results.index(True)}"
    assert [r.value for r in store.find_by_owner("user-1")] == [winner]
