# todoflow/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from todoflow.services._shared.dto import ErrorDetail

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param username: Username or email.
    :type username: str
    :param password: Raw password (to be verified).
    :type password: str
    :param remote_address: Client address recorded on the refresh token.
    :type remote_address: str
    """

    username: str
    password: str
    remote_address: str = ""


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for the refresh exchange.

    :param access_token: Access JWT, normally already expired.
    :type access_token: str
    :param refresh_token: Opaque refresh token issued with it.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class CredentialPair:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Signed access JWT.
    :type access_token: str
    :param refresh_token: Opaque refresh token value.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str

    def to_dict(self) -> dict[str, str]:
        return {"access_token": self.access_token, "refresh_token": self.refresh_token}


class MessageCode(str, Enum):
    """Fixed classification consumed by the transport layer."""

    USER_CREATED_SUCCESS = "USER_CREATED_SUCCESS"
    USER_CREATED_FAILURE = "USER_CREATED_FAILURE"
    USER_LOGIN_SUCCESS = "USER_LOGIN_SUCCESS"
    USER_LOGIN_FAILURE = "USER_LOGIN_FAILURE"
    REFRESH_TOKEN_SUCCESS = "REFRESH_TOKEN_SUCCESS"
    REFRESH_TOKEN_FAILURE = "REFRESH_TOKEN_FAILURE"


@dataclass(frozen=True, slots=True)
class AuthOutcome:
    """
    Discriminated result of ``create_user``, ``login`` and the refresh exchange.

    :param success: Whether the operation completed.
    :param message_code: Classification code.
    :param payload: :class:`CredentialPair`, an identity, or ``None``.
    :param errors: Client-safe error entries (empty on success).
    """

    success: bool
    message_code: MessageCode
    payload: Any = None
    errors: list[ErrorDetail] = field(default_factory=list)

    @classmethod
    def ok(cls, code: MessageCode, payload: Any = None) -> AuthOutcome:
        return cls(success=True, message_code=code, payload=payload)

    @classmethod
    def fail(cls, code: MessageCode, *errors: ErrorDetail) -> AuthOutcome:
        return cls(success=False, message_code=code, errors=list(errors))

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the ``{success, data | errors, message_code}`` envelope."""
        body: dict[str, Any] = {"success": self.success, "message_code": self.message_code.value}
        if self.success:
            data = self.payload.to_dict() if hasattr(self.payload, "to_dict") else self.payload
            body["data"] = data
        else:
            body["errors"] = [e.to_dict() for e in self.errors]
        return body


# Generic, deliberately uninformative failures
LOGIN_FAILURE = ErrorDetail("login_failure", "Invalid username or password.")
REFRESH_FAILURE = ErrorDetail("refresh_token_failure", "Invalid or bad refresh token.")
