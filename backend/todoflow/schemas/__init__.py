"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginSchema, RefreshTokenSchema, RegisterSchema, WhoAmISchema
from .todo import TodoCreateSchema, TodoListQuerySchema, TodoSchema, TodoUpdateSchema

__all__ = [
    "LoginSchema",
    "RefreshTokenSchema",
    "RegisterSchema",
    "WhoAmISchema",
    "TodoSchema",
    "TodoCreateSchema",
    "TodoUpdateSchema",
    "TodoListQuerySchema",
]
