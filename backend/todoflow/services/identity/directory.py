"""
SQLAlchemyUserDirectory
=======================

Identity store consumed by authentication:

- Creates identities after running the password and uniqueness policy,
  reporting every failure at once.
- Looks identities up by id or by username/email.
- Verifies passwords with constant work whether or not the account exists.
"""

from __future__ import annotations

import logging
import re

from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash, generate_password_hash

from todoflow.models.user import User
from todoflow.services._shared.base import BaseService
from todoflow.services._shared.dto import ErrorDetail
from todoflow.services._shared.errors import IdentityValidationError
from todoflow.services._shared.ports.user_directory import UserDirectory
from todoflow.services.identity.dto import IdentityCreateIn, IdentityOut

log = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 6
# No "@": a login containing one is always resolved as an email
USERNAME_ALLOWED = re.compile(r"^[A-Za-z0-9\-._+]+$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Hash compared against when the account does not exist
_DUMMY_HASH = generate_password_hash("todoflow-timing-parity")


def password_policy_errors(password: str) -> list[ErrorDetail]:
    """
    Evaluate ``password`` against the password policy.

    :param password: Raw candidate password.
    :type password: str
    :returns: One entry per violated rule (empty when acceptable).
    :rtype: list[ErrorDetail]
    """
    errors: list[ErrorDetail] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(
            ErrorDetail(
                "password_too_short",
                f"Passwords must be at least {PASSWORD_MIN_LENGTH} characters.",
            )
        )
    if not any(c.isdigit() for c in password):
        errors.append(
            ErrorDetail("password_requires_digit", "Passwords must have at least one digit ('0'-'9').")
        )
    if not any(c.islower() for c in password):
        errors.append(
            ErrorDetail(
                "password_requires_lower",
                "Passwords must have at least one lowercase ('a'-'z').",
            )
        )
    if not any(c.isupper() for c in password):
        errors.append(
            ErrorDetail(
                "password_requires_upper",
                "Passwords must have at least one uppercase ('A'-'Z').",
            )
        )
    if all(c.isalnum() for c in password):
        errors.append(
            ErrorDetail(
                "password_requires_non_alphanumeric",
                "Passwords must have at least one non alphanumeric character.",
            )
        )
    return errors


def _to_out(user: User) -> IdentityOut:
    return IdentityOut(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
    )


class SQLAlchemyUserDirectory(BaseService, UserDirectory):
    """User directory backed by the ``users`` table."""

    def create_identity(self, dto: IdentityCreateIn) -> IdentityOut:
        """
        Validate and persist a new identity.

        :param dto: Creation input.
        :type dto: IdentityCreateIn
        :returns: The created identity.
        :rtype: IdentityOut
        :raises IdentityValidationError: With every failure found.
        """
        username = (dto.username or "").strip()
        email = (dto.email or "").strip().lower()

        errors: list[ErrorDetail] = []
        if not username or not USERNAME_ALLOWED.match(username):
            errors.append(
                ErrorDetail(
                    "invalid_user_name",
                    f"User name '{username}' is invalid, can only contain letters, digits or '-._+'.",
                )
            )
        if not EMAIL_PATTERN.match(email):
            errors.append(ErrorDetail("invalid_email", f"Email '{email}' is invalid."))
        errors.extend(password_policy_errors(dto.password or ""))

        with self.ro_uow() as uow:
            if username and uow.users.exists_by_username(username):
                errors.append(
                    ErrorDetail("duplicate_user_name", f"User name '{username}' is already taken.")
                )
            if email and uow.users.exists_by_email(email):
                errors.append(ErrorDetail("duplicate_email", f"Email '{email}' is already taken."))

        if errors:
            raise IdentityValidationError(errors)

        try:
            with self.rw_uow() as uow:
                user = uow.users.model(
                    username=username,
                    email=email,
                    first_name=(dto.first_name or "").strip() or None,
                )
                user.password = dto.password  # model setter hashes
                uow.users.add(user)
                out = _to_out(user)
        except IntegrityError as exc:
            # Lost a race against a concurrent registration
            raise IdentityValidationError(
                [ErrorDetail("duplicate_user_name_or_email", "User name or email is already taken.")]
            ) from exc

        log.info("identity.created", extra={"user_id": out.id})
        return out

    def find_by_username_or_email(self, login: str) -> IdentityOut | None:
        if not login or not login.strip():
            return None
        with self.ro_uow() as uow:
            user = uow.users.get_by_username_or_email(login)
            return _to_out(user) if user is not None else None

    def find_by_id(self, identity_id: str) -> IdentityOut | None:
        if not identity_id:
            return None
        with self.ro_uow() as uow:
            user = uow.users.get(identity_id)
            return _to_out(user) if user is not None else None

    def verify_password(self, identity: IdentityOut | None, password: str) -> bool:
        """
        Check ``password`` for ``identity`` with equal work on unknown accounts.

        :param identity: Identity previously resolved, or ``None``.
        :type identity: IdentityOut | None
        :param password: Raw candidate password.
        :type password: str
        :rtype: bool
        """
        if identity is None:
            check_password_hash(_DUMMY_HASH, password or "")
            return False
        with self.ro_uow() as uow:
            user = uow.users.get(identity.id)
            if user is None:
                check_password_hash(_DUMMY_HASH, password or "")
                return False
            return user.verify_password(password or "")
