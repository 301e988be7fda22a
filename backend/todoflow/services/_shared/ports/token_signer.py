from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol


@dataclass(frozen=True, slots=True)
class IdentityClaims:
    """
    Identity facts embedded into an access token at issuance.

    :ivar subject_id: Opaque identity id (becomes the ``sub`` claim).
    :ivar username: Login handle.
    :ivar email: Login email.
    """

    subject_id: str
    username: str
    email: str


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """
    Claims recovered from a verified access token.

    :ivar subject_id: ``sub`` claim.
    :ivar username: ``username`` claim.
    :ivar email: ``email`` claim.
    :ivar issued_at: ``iat`` as an aware UTC datetime.
    :ivar expires_at: ``exp`` as an aware UTC datetime (may be in the past).
    """

    subject_id: str
    username: str
    email: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class SignerConfig:
    """
    Static signing configuration injected at construction.

    :ivar secret_key: HMAC key (at least 32 bytes).
    :ivar algorithm: JWS algorithm.
    :ivar access_expires: Fixed access-token lifetime.
    """

    secret_key: str
    algorithm: str = "HS256"
    access_expires: timedelta = timedelta(minutes=15)


class TokenSigner(Protocol):
    """Port for producing and verifying signed access tokens.

    Implementations are pure: no I/O, no clock other than "now" at issuance.
    """

    access_expires: timedelta

    def issue(self, identity: IdentityClaims) -> str:
        """Sign a fresh access token for ``identity``."""
        ...

    def verify_ignoring_expiry(self, token: str, key: str | None = None) -> AccessClaims | None:
        """
        Check structure and signature of ``token`` while accepting expired tokens.

        :param token: Compact JWS presented by the caller.
        :param key: Verification key; ``None`` selects the configured key.
        :returns: Parsed claims, or ``None`` for any malformed/forged/foreign token.
        """
        ...
