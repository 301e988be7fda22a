"""Refresh token rows backing the SQL refresh token store."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from todoflow.core.extensions import db

from .base import PKMixin, ReprMixin


class RefreshToken(PKMixin, ReprMixin, db.Model):
    """
    One issued refresh token.

    Rows are never updated in place. A token is revoked by deleting its row;
    an expired row may linger until ``purge_expired`` runs.

    Fields
    ------
    value : str
        Opaque random secret handed to the client. Unique.
    owner_id : str
        Owning :class:`~todoflow.models.user.User` id.
    created_at / modified_at : datetime
        Issuance time (both set by the issuer, UTC).
    expires_at : datetime
        Absolute expiry (UTC). Active iff ``expires_at > now``.
    remote_address : str
        Client address at issuance, blank when unknown.
    """

    __tablename__ = "refresh_tokens"

    value: Mapped[str] = mapped_column(String(128), nullable=False)
    owner_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    modified_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    remote_address: Mapped[str] = mapped_column(String(64), nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("value", name="uq_refresh_tokens_value"),
        Index("ix_refresh_tokens_owner_id", "owner_id"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )
