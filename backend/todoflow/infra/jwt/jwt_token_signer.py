# todoflow/infra/jwt/jwt_token_signer.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from todoflow.services._shared.errors import MisconfigurationError
from todoflow.services._shared.ports import AccessClaims, IdentityClaims, SignerConfig, TokenSigner

log = logging.getLogger(__name__)

MIN_KEY_BYTES = 32
ACCESS_TOKEN_TYPE = "access"
_REQUIRED_CLAIMS = ("sub", "iat", "exp")


@dataclass(slots=True)
class JWTTokenSigner(TokenSigner):
    """
    HMAC-signed JWT adapter built on PyJWT.

    Tokens carry the claims Flask-JWT-Extended expects (``sub`` as a string,
    ``type``, ``jti``, ``fresh``), so protected routes can verify them with
    ``@jwt_required()`` using the same ``JWT_SECRET_KEY``.

    :param config: Signing key, algorithm and access lifetime.
    :raises MisconfigurationError: If the key is missing or shorter than
        32 bytes.
    """

    config: SignerConfig

    def __post_init__(self) -> None:
        key = self.config.secret_key or ""
        if len(key.encode("utf-8")) < MIN_KEY_BYTES:
            raise MisconfigurationError(
                f"JWT signing key must be at least {MIN_KEY_BYTES} bytes long."
            )
        if not self.config.algorithm.upper().startswith("HS"):
            raise MisconfigurationError(
                f"Unsupported JWT algorithm {self.config.algorithm!r}; use an HMAC algorithm."
            )

    @property
    def access_expires(self) -> timedelta:
        return self.config.access_expires

    # -------------------- API ------------------------

    def issue(self, identity: IdentityClaims) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(identity.subject_id),
            "username": identity.username,
            "email": identity.email,
            "iat": now,
            "nbf": now,
            "exp": now + self.config.access_expires,
            "jti": uuid4().hex,
            "type": ACCESS_TOKEN_TYPE,
            "fresh": False,
        }
        return jwt.encode(payload, self.config.secret_key, algorithm=self.config.algorithm)

    def verify_ignoring_expiry(self, token: str, key: str | None = None) -> AccessClaims | None:
        """
        Verify signature and structure of ``token``; expired tokens are accepted.

        :param token: Compact JWS.
        :type token: str
        :param key: Verification key (defaults to the configured key).
        :type key: str | None
        :returns: Parsed claims or ``None`` on any defect.
        :rtype: AccessClaims | None
        """
        if not token or not isinstance(token, str):
            return None
        verify_key = self.config.secret_key if key is None else key
        if not verify_key:
            return None
        try:
            payload = jwt.decode(
                token,
                verify_key,
                algorithms=[self.config.algorithm],
                options={"verify_exp": False, "require": list(_REQUIRED_CLAIMS)},
            )
        except jwt.InvalidTokenError as exc:
            log.debug("jwt.verify.failed: %s", exc.__class__.__name__)
            return None

        if payload.get("type", ACCESS_TOKEN_TYPE) != ACCESS_TOKEN_TYPE:
            return None
        try:
            return AccessClaims(
                subject_id=self._as_text(payload["sub"]),
                username=self._as_text(payload.get("username")),
                email=self._as_text(payload.get("email")),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
            )
        except (TypeError, ValueError, OverflowError):
            return None

    # -------------------- helpers --------------------

    @staticmethod
    def _as_text(value: Any) -> str:
        if not isinstance(value, str) or not value:
            raise ValueError("claim must be a non-empty string")
        return value
