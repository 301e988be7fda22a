"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. They serve as stable contracts between
repositories, infrastructure adapters, and application services.

The translation to HTTP responses (RFC 7807) is handled by
``todoflow/core/errors.py``.

Taxonomy
--------
- :class:`IdentityValidationError`: the user directory refused to create an
  identity. Carries structured, user-presentable details.
- Authentication and rotation failures are *not* exceptions at the service
  boundary; they are folded into an ``AuthOutcome``.
- :class:`StorageError`: a store was unavailable or a write failed. Always
  propagates so callers can retry or alert.
- :class:`MisconfigurationError`: signing material is missing or unusable.
  Raised while the application boots, never per request.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from todoflow.services._shared.dto import ErrorDetail

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories, adapters or domain logic.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found (or not visible to the caller).

    :param entity: Entity name (e.g., "Todo").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


class IdentityValidationError(ServiceError):
    """
    Raised by the user directory when an identity cannot be created.

    :param errors: Structured failures (weak password, duplicate email, ...).
    :type errors: Iterable[ErrorDetail]
    """

    def __init__(self, errors: Iterable[ErrorDetail]) -> None:
        self.errors: list[ErrorDetail] = list(errors)
        super().__init__("; ".join(e.description for e in self.errors) or "Invalid identity")


class StorageError(ServiceError):
    """
    Raised when a persistent store is unreachable or rejects a write.

    Distinct from authentication failures: a caller seeing this must never
    tell the user their credentials are wrong.
    """


class MisconfigurationError(RuntimeError):
    """Raised at startup when signing configuration is missing or invalid."""
