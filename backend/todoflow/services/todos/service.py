"""
TodoService
===========

Owner-scoped CRUD over todo items, the resource guarded by authentication.

Notes
-----
- Every operation takes the acting identity from ``ServiceContext.actor_id``.
- A todo owned by someone else is reported exactly like a missing one.
"""

from __future__ import annotations

from todoflow.models.todo import Todo
from todoflow.services._shared.base import BaseService
from todoflow.services._shared.errors import NotFoundError
from todoflow.services.todos.dto import TodoCreateIn, TodoOut, TodoUpdateIn


class TodoService(BaseService):
    """Application service for :class:`Todo` items."""

    def _actor(self) -> str:
        if not self.ctx.actor_id:
            raise NotFoundError("Todo", "owner")
        return self.ctx.actor_id

    # ------------------------------ Commands --------------------------------

    def create(self, dto: TodoCreateIn) -> TodoOut:
        """
        Create a todo owned by the current actor.

        :param dto: Creation input.
        :type dto: TodoCreateIn
        :rtype: TodoOut
        """
        owner_id = self._actor()
        with self.rw_uow() as uow:
            todo = uow.todos.model(
                owner_id=owner_id,
                title=dto.title,
                description=dto.description,
                due_date=dto.due_date,
                is_completed=dto.is_completed,
            )
            uow.todos.add(todo)
            return self._to_out(todo)

    def update(self, todo_id: int, dto: TodoUpdateIn) -> TodoOut:
        """
        Apply a partial update.

        :raises NotFoundError: If missing or not owned by the actor.
        """
        owner_id = self._actor()
        with self.rw_uow() as uow:
            todo = uow.todos.get_for_owner(todo_id, owner_id)
            if todo is None:
                raise NotFoundError("Todo", todo_id)
            uow.todos.assign_updates(todo, dto.changes())
            return self._to_out(todo)

    def delete(self, todo_id: int) -> None:
        owner_id = self._actor()
        with self.rw_uow() as uow:
            todo = uow.todos.get_for_owner(todo_id, owner_id)
            if todo is None:
                raise NotFoundError("Todo", todo_id)
            uow.todos.delete(todo)

    # ------------------------------- Queries --------------------------------

    def get(self, todo_id: int) -> TodoOut:
        owner_id = self._actor()
        with self.ro_uow() as uow:
            todo = uow.todos.get_for_owner(todo_id, owner_id)
            if todo is None:
                raise NotFoundError("Todo", todo_id)
            return self._to_out(todo)

    def list_for_owner(self, *, completed: bool | None = None) -> list[TodoOut]:
        """
        List the actor's todos ordered by due date.

        :param completed: Optional completion filter.
        :type completed: bool | None
        :rtype: list[TodoOut]
        """
        owner_id = self._actor()
        filters: dict[str, object] = {"owner_id": owner_id}
        if completed is not None:
            filters["is_completed"] = completed
        with self.ro_uow() as uow:
            rows = uow.todos.list(filters=filters, sort=["due_date"])
            return [self._to_out(t) for t in rows]

    def count(self) -> int:
        owner_id = self._actor()
        with self.ro_uow() as uow:
            return uow.todos.count(owner_id=owner_id)

    # ------------------------------- Mapping --------------------------------

    @staticmethod
    def _to_out(todo: Todo) -> TodoOut:
        return TodoOut(
            id=todo.id,
            owner_id=todo.owner_id,
            title=todo.title,
            description=todo.description,
            due_date=todo.due_date,
            is_completed=bool(todo.is_completed),
            created_at=todo.created_at,
            updated_at=todo.updated_at,
        )
