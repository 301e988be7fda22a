"""DTOs for TodoService."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class TodoCreateIn:
    """
    Input DTO for todo creation.

    :param title: Short title.
    :type title: str
    :param due_date: Day the todo is due.
    :type due_date: date
    :param description: Optional free text.
    :type description: str | None
    :param is_completed: Initial completion flag.
    :type is_completed: bool
    """

    title: str
    due_date: date
    description: str | None = None
    is_completed: bool = False


@dataclass(frozen=True, slots=True)
class TodoUpdateIn:
    """Partial update; ``None`` fields are left untouched."""

    title: str | None = None
    due_date: date | None = None
    description: str | None = None
    is_completed: bool | None = None

    def changes(self) -> dict[str, Any]:
        return {
            k: v
            for k, v in (
                ("title", self.title),
                ("due_date", self.due_date),
                ("description", self.description),
                ("is_completed", self.is_completed),
            )
            if v is not None
        }


@dataclass(frozen=True, slots=True)
class TodoOut:
    id: int
    owner_id: str
    title: str
    description: str | None
    due_date: date
    is_completed: bool
    created_at: datetime | None
    updated_at: datetime | None
