"""Redis adapter for :class:`RefreshTokenStore`."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from todoflow.services._shared.errors import StorageError
from todoflow.services._shared.ports import RefreshTokenRecord, RefreshTokenStore

MAX_WATCH_ATTEMPTS = 16


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store with atomic rotation.

    Layout: one hash per token (``rt:<value>``) expiring with the token, plus
    one set per owner (``rt:u:<owner_id>``) indexing its values. Members whose
    hash has vanished are pruned lazily by :meth:`find_by_owner`.

    :param r: A Redis client (already connected).
    :param owner_exists: Optional predicate standing in for a foreign key.
    """

    r: redis.Redis
    owner_exists: Callable[[str], bool] | None = None

    # -------------------- helpers --------------------

    @staticmethod
    def _k(value: str) -> str:
        return f"rt:{value}"

    @staticmethod
    def _ku(owner_id: str) -> str:
        return f"rt:u:{owner_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        # Naive datetimes are labelled UTC (no conversion)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return int(dt.timestamp())

    @staticmethod
    def _from_ts(raw: bytes | None) -> datetime:
        return datetime.fromtimestamp(int(raw.decode() if raw else "0"), tz=UTC)

    def _mapping(self, record: RefreshTokenRecord) -> dict[str, str]:
        return {
            "owner_id": record.owner_id,
            "created_at": str(self._to_ts(record.created_at)),
            "modified_at": str(self._to_ts(record.modified_at)),
            "expires_at": str(self._to_ts(record.expires_at)),
            "remote_address": record.remote_address or "",
        }

    def _ttl(self, record: RefreshTokenRecord) -> int:
        return max(1, self._to_ts(record.expires_at) - self._to_ts(datetime.now(UTC)))

    def _check_owner(self, owner_id: str) -> None:
        if self.owner_exists is not None and not self.owner_exists(owner_id):
            raise StorageError(f"Unknown refresh token owner: {owner_id}")

    def _record(self, value: str, h: dict[bytes, bytes]) -> RefreshTokenRecord:
        return RefreshTokenRecord(
            value=value,
            owner_id=h.get(b"owner_id", b"").decode(),
            created_at=self._from_ts(h.get(b"created_at")),
            modified_at=self._from_ts(h.get(b"modified_at")),
            expires_at=self._from_ts(h.get(b"expires_at")),
            remote_address=h.get(b"remote_address", b"").decode(),
        )

    # -------------------- API ------------------------

    def insert(self, record: RefreshTokenRecord) -> None:
        """
        Persist the row *before* the pair is handed to the client.

        The collision check and the writes share one WATCH/MULTI/EXEC block,
        so a failed ``EXEC`` leaves no partial hash behind.

        :raises StorageError: On unknown owner, duplicate value or Redis failure.
        """
        self._check_owner(record.owner_id)
        key = self._k(record.value)
        try:
            for _ in range(MAX_WATCH_ATTEMPTS):
                try:
                    with self.r.pipeline() as p:
                        p.watch(key)
                        if p.exists(key):
                            p.unwatch()
                            raise StorageError("Duplicate refresh token value")

                        p.multi()
                        p.hset(key, mapping=self._mapping(record))
                        p.expire(key, self._ttl(record))
                        p.sadd(self._ku(record.owner_id), record.value)
                        p.execute()
                    return
                except redis.WatchError:
                    continue
        except RedisError as exc:
            raise StorageError("Refresh token store unavailable") from exc
        raise StorageError("Refresh token insert kept conflicting; giving up")

    def find_by_owner(self, owner_id: str) -> list[RefreshTokenRecord]:
        key_u = self._ku(owner_id)
        try:
            members = sorted(
                m.decode() if isinstance(m, bytes | bytearray) else str(m)
                for m in self.r.smembers(key_u)
            )
            out: list[RefreshTokenRecord] = []
            stale: list[str] = []
            for value in members:
                h = self.r.hgetall(self._k(value))
                if h:
                    out.append(self._record(value, h))
                else:
                    stale.append(value)
            if stale:
                self.r.srem(key_u, *stale)
            return out
        except RedisError as exc:
            raise StorageError("Refresh token store unavailable") from exc

    def revoke(self, value: str) -> bool:
        key = self._k(value)
        try:
            owner_b = self.r.hget(key, "owner_id")
            if not owner_b:
                return False
            with self.r.pipeline(transaction=True) as p:
                p.delete(key)
                p.srem(self._ku(owner_b.decode()), value)
                deleted, _ = p.execute()
            return bool(deleted)
        except RedisError as exc:
            raise StorageError("Refresh token store unavailable") from exc

    def rotate(self, old_value: str, new_record: RefreshTokenRecord, now: datetime) -> bool:
        """
        Atomically delete ``old_value`` and create ``new_record``.

        Uses WATCH/MULTI/EXEC (optimistic locking): a concurrent rotation of the
        same value aborts this transaction, the loop re-reads, finds the old
        hash gone and reports ``False``.
        """
        self._check_owner(new_record.owner_id)
        now_ts = self._to_ts(now)
        k_old = self._k(old_value)
        k_new = self._k(new_record.value)
        try:
            for _ in range(MAX_WATCH_ATTEMPTS):
                try:
                    with self.r.pipeline() as p:
                        p.watch(k_old, k_new)
                        h = p.hgetall(k_old)
                        if not h or int(h.get(b"expires_at", b"0").decode()) <= now_ts:
                            p.unwatch()
                            return False
                        if p.exists(k_new):
                            p.unwatch()
                            raise StorageError("Duplicate refresh token value")
                        old_owner = h.get(b"owner_id", b"").decode()

                        p.multi()
                        p.delete(k_old)
                        p.srem(self._ku(old_owner), old_value)
                        p.hset(k_new, mapping=self._mapping(new_record))
                        p.expire(k_new, self._ttl(new_record))
                        p.sadd(self._ku(new_record.owner_id), new_record.value)
                        p.execute()
                    return True
                except redis.WatchError:
                    # Concurrent modification detected; retry
                    continue
        except RedisError as exc:
            raise StorageError("Refresh token store unavailable") from exc
        raise StorageError("Refresh token rotation kept conflicting; giving up")

    def purge_expired(self, now: datetime) -> int:
        """
        Delete hashes whose ``expires_at`` is at or before ``now``.

        Redis key TTLs already evict expired tokens; this sweep covers rows
        whose TTL has not fired yet relative to ``now``.
        """
        now_ts = self._to_ts(now)
        removed = 0
        try:
            for key in self.r.scan_iter(match="rt:*"):
                name = key.decode() if isinstance(key, bytes | bytearray) else str(key)
                if name.startswith("rt:u:"):
                    continue
                raw = self.r.hget(name, "expires_at")
                if raw is not None and int(raw.decode()) <= now_ts:
                    if self.revoke(name[len("rt:") :]):
                        removed += 1
            return removed
        except RedisError as exc:
            raise StorageError("Refresh token store unavailable") from exc
