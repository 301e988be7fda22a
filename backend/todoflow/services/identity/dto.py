"""
DTOs for the user directory.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class IdentityCreateIn:
    """
    Input DTO for identity creation.

    :param username: Login handle.
    :type username: str
    :param email: Login email (normalized to lowercase).
    :type email: str
    :param first_name: Optional display name.
    :type first_name: str | None
    :param password: Raw password to be hashed by the model.
    :type password: str
    """

    username: str
    email: str
    first_name: str | None
    password: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class IdentityOut:
    """
    Output DTO representing the public-safe identity.

    :param id: Opaque, immutable identity id.
    :type id: str
    :param username: Username.
    :type username: str
    :param email: Email address.
    :type email: str
    :param first_name: Optional display name.
    :type first_name: str | None
    """

    id: str
    username: str
    email: str
    first_name: str | None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "first_name": self.first_name,
        }
