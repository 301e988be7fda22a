# todoflow/infra/sql/sql_refresh_token_store.py
from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError

from todoflow.models.refresh_token import RefreshToken
from todoflow.services._shared.errors import StorageError
from todoflow.services._shared.ports import RefreshTokenRecord, RefreshTokenStore
from todoflow.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


def _aware(dt: datetime) -> datetime:
    # SQLite returns naive values; they were written as UTC
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        value=row.value,
        owner_id=row.owner_id,
        created_at=_aware(row.created_at),
        modified_at=_aware(row.modified_at),
        expires_at=_aware(row.expires_at),
        remote_address=row.remote_address or "",
    )


def _to_row(record: RefreshTokenRecord) -> RefreshToken:
    return RefreshToken(
        value=record.value,
        owner_id=record.owner_id,
        created_at=record.created_at.astimezone(UTC),
        modified_at=record.modified_at.astimezone(UTC),
        expires_at=record.expires_at.astimezone(UTC),
        remote_address=record.remote_address or "",
    )


class SQLRefreshTokenStore(RefreshTokenStore):
    """
    Refresh token store backed by the ``refresh_tokens`` table.

    Every call runs in its own :class:`SQLAlchemyUnitOfWork`; any
    :class:`SQLAlchemyError` (including foreign-key violations for unknown
    owners) rolls the unit back and surfaces as :class:`StorageError`.
    """

    def insert(self, record: RefreshTokenRecord) -> None:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                uow.refresh_tokens.add(_to_row(record))
        except SQLAlchemyError as exc:
            raise StorageError("Could not persist refresh token") from exc

    def find_by_owner(self, owner_id: str) -> list[RefreshTokenRecord]:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                return [_to_record(row) for row in uow.refresh_tokens.list_for_owner(owner_id)]
        except SQLAlchemyError as exc:
            raise StorageError("Could not read refresh tokens") from exc

    def revoke(self, value: str) -> bool:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                return uow.refresh_tokens.delete_by_value(value) > 0
        except SQLAlchemyError as exc:
            raise StorageError("Could not revoke refresh token") from exc

    def rotate(self, old_value: str, new_record: RefreshTokenRecord, now: datetime) -> bool:
        """
        Conditionally delete ``old_value`` and insert ``new_record`` in one transaction.

        The ``DELETE ... WHERE value = :v AND expires_at > :now`` row count
        decides the winner among concurrent callers; the loser sees 0 and the
        unit of work commits nothing.
        """
        try:
            with SQLAlchemyUnitOfWork() as uow:
                removed = uow.refresh_tokens.delete_active_by_value(old_value, now.astimezone(UTC))
                if removed != 1:
                    return False
                uow.refresh_tokens.add(_to_row(new_record))
                return True
        except SQLAlchemyError as exc:
            raise StorageError("Could not rotate refresh token") from exc

    def purge_expired(self, now: datetime) -> int:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                return uow.refresh_tokens.delete_expired(now.astimezone(UTC))
        except SQLAlchemyError as exc:
            raise StorageError("Could not purge refresh tokens") from exc
