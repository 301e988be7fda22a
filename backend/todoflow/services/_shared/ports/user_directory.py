from __future__ import annotations

from typing import Protocol

from todoflow.services.identity.dto import IdentityCreateIn, IdentityOut


class UserDirectory(Protocol):
    """Port over the identity store used by authentication.

    Password hashing is opaque behind :meth:`verify_password`.
    """

    def create_identity(self, dto: IdentityCreateIn) -> IdentityOut:
        """
        Create a new identity.

        :raises IdentityValidationError: With every policy/uniqueness failure found.
        """
        ...

    def find_by_username_or_email(self, login: str) -> IdentityOut | None: ...

    def find_by_id(self, identity_id: str) -> IdentityOut | None: ...

    def verify_password(self, identity: IdentityOut | None, password: str) -> bool:
        """
        Check ``password`` for ``identity``.

        Passing ``None`` still performs a full hash comparison against a dummy
        hash and returns ``False``, so callers spend the same time on unknown
        accounts as on wrong passwords.
        """
        ...
