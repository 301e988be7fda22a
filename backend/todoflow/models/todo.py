"""Todo item model (the business entity guarded by authentication)."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Boolean, Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from todoflow.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Todo(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """A single todo item owned by one user."""

    __tablename__ = "todos"

    owner_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (Index("ix_todos_owner_due", "owner_id", "due_date"),)

    @validates("title")
    def _normalize_title(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Title is required.")
        return value.strip()
