from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from todoflow.services._shared.errors import StorageError


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Read-model for one issued refresh token.

    :ivar value: Opaque secret handed to the client (unique).
    :ivar owner_id: Owning identity id.
    :ivar created_at: Issuance time (UTC).
    :ivar modified_at: Last modification time (UTC, equals ``created_at``).
    :ivar expires_at: Absolute expiry (UTC).
    :ivar remote_address: Client address at issuance, blank when unknown.
    """

    value: str
    owner_id: str
    created_at: datetime
    modified_at: datetime
    expires_at: datetime
    remote_address: str = ""


def utcnow() -> datetime:
    return datetime.now(UTC)


class RefreshTokenStore(Protocol):
    """
    Durable mapping from refresh token value to its metadata.

    Revocation is physical deletion; an expired row may linger until purged.
    Backend failures MUST surface as :class:`StorageError`.
    """

    def insert(self, record: RefreshTokenRecord) -> None:
        """
        Persist a new row.

        :raises StorageError: If the owner is unknown or the write fails.
        """
        ...

    def find_by_owner(self, owner_id: str) -> list[RefreshTokenRecord]:
        """All rows of ``owner_id``, active or expired."""
        ...

    def revoke(self, value: str) -> bool:
        """Delete the row holding ``value``. Absent rows are a no-op.

        :returns: ``True`` if a row was removed.
        """
        ...

    def rotate(self, old_value: str, new_record: RefreshTokenRecord, now: datetime) -> bool:
        """
        Atomically delete ``old_value`` (only if still active at ``now``) and
        insert ``new_record``.

        Exactly one of several concurrent callers presenting the same
        ``old_value`` observes ``True``. On ``False`` or on error nothing changed.
        """
        ...

    def purge_expired(self, now: datetime) -> int:
        """Delete rows whose expiry is at or before ``now``. Returns the count."""
        ...

    def is_active(self, record: RefreshTokenRecord, now: datetime | None = None) -> bool:
        """Return ``True`` iff ``record.expires_at > now``."""
        return record.expires_at > (now or utcnow())


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh token store with atomic rotation behavior.

    .. note::
       A single lock serializes every operation, which makes ``rotate`` an
       exact check-and-swap for concurrent callers in tests.

    :param owner_exists: Optional predicate emulating a foreign key on
        ``owner_id``; inserts for unknown owners raise :class:`StorageError`.
    """

    def __init__(self, owner_exists: Callable[[str], bool] | None = None) -> None:
        self._by_value: dict[str, RefreshTokenRecord] = {}
        self._owner_exists = owner_exists
        self._lock = threading.Lock()

    # ------------------------- helpers -------------------------

    def _check_owner(self, owner_id: str) -> None:
        if self._owner_exists is not None and not self._owner_exists(owner_id):
            raise StorageError(f"Unknown refresh token owner: {owner_id}")

    def _put(self, record: RefreshTokenRecord) -> None:
        if record.value in self._by_value:
            raise StorageError("Duplicate refresh token value")
        self._by_value[record.value] = record

    # -------------------------- API ----------------------------

    def insert(self, record: RefreshTokenRecord) -> None:
        self._check_owner(record.owner_id)
        with self._lock:
            self._put(record)

    def find_by_owner(self, owner_id: str) -> list[RefreshTokenRecord]:
        with self._lock:
            return [r for r in self._by_value.values() if r.owner_id == owner_id]

    def revoke(self, value: str) -> bool:
        with self._lock:
            return self._by_value.pop(value, None) is not None

    def rotate(self, old_value: str, new_record: RefreshTokenRecord, now: datetime) -> bool:
        self._check_owner(new_record.owner_id)
        with self._lock:
            current = self._by_value.get(old_value)
            if current is None or not self.is_active(current, now):
                return False
            if new_record.value in self._by_value:
                raise StorageError("Duplicate refresh token value")
            del self._by_value[old_value]
            self._by_value[new_record.value] = new_record
            return True

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            stale = [v for v, r in self._by_value.items() if r.expires_at <= now]
            for v in stale:
                del self._by_value[v]
            return len(stale)

    def get(self, value: str) -> RefreshTokenRecord | None:
        """Fetch a single row snapshot (test helper)."""
        with self._lock:
            return self._by_value.get(value)
