"""Refresh token repository: row-level primitives for the SQL token store.

Every write here is a single statement so the store can compose rotation
(conditional delete + insert) inside one transaction.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, cast

from sqlalchemy import CursorResult, delete
from sqlalchemy.orm import InstrumentedAttribute

from todoflow.models.refresh_token import RefreshToken
from todoflow.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken` rows."""

    model = RefreshToken

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "value": self.model.value,
            "owner_id": self.model.owner_id,
        }

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "created_at": self.model.created_at,
            "expires_at": self.model.expires_at,
        }

    def list_for_owner(self, owner_id: str) -> list[RefreshToken]:
        """
        Return every row owned by ``owner_id``, active or not, oldest first.

        :param owner_id: Identity id.
        :type owner_id: str
        :rtype: list[RefreshToken]
        """
        return self.list(filters={"owner_id": owner_id}, sort=["created_at"])

    def delete_by_value(self, value: str) -> int:
        """Delete the row holding ``value`` regardless of expiry.

        :returns: Number of rows removed (0 or 1).
        :rtype: int
        """
        stmt = delete(RefreshToken).where(RefreshToken.value == value).execution_options(
            synchronize_session=False
        )
        result = cast(CursorResult[Any], self.session.execute(stmt))
        return int(result.rowcount or 0)

    def delete_active_by_value(self, value: str, now: datetime) -> int:
        """Delete the row holding ``value`` only while it is still active.

        The predicate is evaluated by the database in the same statement that
        removes the row, so two concurrent callers cannot both observe 1.

        :returns: Number of rows removed (0 or 1).
        :rtype: int
        """
        stmt = delete(RefreshToken).where(
            RefreshToken.value == value,
            RefreshToken.expires_at > now,
        ).execution_options(synchronize_session=False)
        result = cast(CursorResult[Any], self.session.execute(stmt))
        return int(result.rowcount or 0)

    def delete_expired(self, now: datetime) -> int:
        stmt = delete(RefreshToken).where(RefreshToken.expires_at <= now).execution_options(
            synchronize_session=False
        )
        result = cast(CursorResult[Any], self.session.execute(stmt))
        return int(result.rowcount or 0)
