"""User repository for persistence and lookup utilities."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from todoflow.models.user import User
from todoflow.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Identity lookups only; refresh tokens live in their own repository.
    """

    model = User

    def _filterable_fields(self):
        return {
            "email": User.email,
            "username": User.username,
        }

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_username_or_email(self, login: str) -> User | None:
        """Fetch the user identified by ``login``.

        A login containing ``@`` is matched against emails only, anything
        else against usernames only. Usernames never contain ``@``.

        :param login: Username or email typed by the user.
        :type login: str
        :returns: Matching user or ``None``.
        :rtype: User | None
        """
        raw = login.strip()
        if "@" in raw:
            return self.get_by_email(raw)
        stmt = select(User).where(User.username == raw)
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == email.lower().strip())
        return bool(self.session.execute(stmt).first())

    def exists_by_username(self, username: str) -> bool:
        stmt = select(User.id).where(User.username == username.strip())
        return bool(self.session.execute(stmt).first())
