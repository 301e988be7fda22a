"""
Unit of Work contract shared by services and token stores.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from todoflow.repositories import RefreshTokenRepository, TodoRepository, UserRepository


class UnitOfWork(ABC):
    """
    Transactional boundary for one use-case.

    Repositories reached through a unit share its session, so a refresh token
    rotation (conditional delete plus insert) either lands completely or not
    at all.
    """

    users: UserRepository
    refresh_tokens: RefreshTokenRepository
    todos: TodoRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
