"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from todoflow.repositories.base import BaseRepository, apply_sorting, parse_sort_tokens
from todoflow.repositories.refresh_token import RefreshTokenRepository
from todoflow.repositories.todo import TodoRepository
from todoflow.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "apply_sorting",
    "parse_sort_tokens",
    # Domain
    "RefreshTokenRepository",
    "TodoRepository",
    "UserRepository",
]
