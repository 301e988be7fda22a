"""Todo repository: owner-scoped persistence for :class:`Todo` items."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute

from todoflow.models.todo import Todo
from todoflow.repositories.base import BaseRepository


class TodoRepository(BaseRepository[Todo]):
    """Persist :class:`Todo` items.

    Ownership checks are a query predicate here, not a service afterthought:
    a todo owned by someone else is indistinguishable from a missing one.
    """

    model = Todo

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": self.model.id,
            "due_date": self.model.due_date,
            "title": self.model.title,
            "created_at": self.model.created_at,
        }

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "owner_id": self.model.owner_id,
            "is_completed": self.model.is_completed,
        }

    def _updatable_fields(self) -> set[str]:
        return {"title", "description", "due_date", "is_completed"}

    def get_for_owner(self, todo_id: int, owner_id: str) -> Todo | None:
        """
        Fetch one todo by id, constrained to ``owner_id``.

        :param todo_id: Todo primary key.
        :type todo_id: int
        :param owner_id: Identity id that must own the row.
        :type owner_id: str
        :returns: The todo or ``None``.
        :rtype: Todo | None
        """
        stmt = select(Todo).where(Todo.id == todo_id, Todo.owner_id == owner_id)
        return cast(Todo | None, self.session.execute(stmt).scalars().first())

    def list_for_owner(self, owner_id: str) -> list[Todo]:
        """All todos of ``owner_id`` ordered by due date (id as tiebreaker)."""
        return self.list(filters={"owner_id": owner_id}, sort=["due_date"])
