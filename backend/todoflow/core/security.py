"""Construction of the authentication object graph from app config.

The signer and refresh token store are process-wide and built once at
startup; services are cheap and built per call from them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from flask import Flask, current_app

from todoflow.core.config import DEV_JWT_SECRET
from todoflow.core.extensions import get_redis
from todoflow.infra.jwt.jwt_token_signer import JWTTokenSigner
from todoflow.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from todoflow.infra.sql.sql_refresh_token_store import SQLRefreshTokenStore
from todoflow.services._shared.errors import MisconfigurationError
from todoflow.services._shared.ports import RefreshTokenStore, SignerConfig, TokenSigner
from todoflow.services.auth.exchange import RefreshExchangeProtocol
from todoflow.services.auth.issuer import CredentialIssuer
from todoflow.services.auth.service import AuthenticationService
from todoflow.services.identity.directory import SQLAlchemyUserDirectory

log = logging.getLogger(__name__)

EXTENSION_KEY = "todoflow.auth"


@dataclass(frozen=True, slots=True)
class AuthComponents:
    signer: TokenSigner
    store: RefreshTokenStore
    refresh_lifetime: timedelta


def build_signer(config) -> JWTTokenSigner:
    """
    Build the access-token signer from a config mapping.

    :raises MisconfigurationError: On a missing/short key, or on the
        development key when ``ENFORCE_SECRET_KEY`` is set.
    """
    key = config.get("JWT_SECRET_KEY") or ""
    if config.get("ENFORCE_SECRET_KEY") and key == DEV_JWT_SECRET:
        raise MisconfigurationError("JWT_SECRET_KEY must be set explicitly in this environment.")
    return JWTTokenSigner(
        SignerConfig(
            secret_key=key,
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            access_expires=timedelta(minutes=int(config.get("JWT_ACCESS_TOKEN_EXPIRES_MINUTES", 15))),
        )
    )


def owner_exists(owner_id: str) -> bool:
    """Tell whether ``owner_id`` names a stored identity (needs an app context)."""
    return SQLAlchemyUserDirectory().find_by_id(owner_id) is not None


def build_store(config) -> RefreshTokenStore:
    """
    Build the refresh token store selected by ``REFRESH_TOKEN_BACKEND``.

    The SQL store relies on the ``owner_id`` foreign key; the Redis store is
    given :func:`owner_exists` to refuse unknown owners the same way.
    """
    backend = str(config.get("REFRESH_TOKEN_BACKEND", "sql")).strip().lower()
    if backend == "sql":
        return SQLRefreshTokenStore()
    if backend == "redis":
        return RedisRefreshTokenStore(r=get_redis(), owner_exists=owner_exists)
    raise MisconfigurationError(f"Unknown REFRESH_TOKEN_BACKEND {backend!r}")


def init_app(app: Flask) -> None:
    """Validate signing configuration and register the auth components.

    Flask-JWT-Extended reads ``JWT_ACCESS_TOKEN_EXPIRES`` for tokens it
    creates itself; it is aligned here with the signer lifetime.
    """
    signer = build_signer(app.config)
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = signer.access_expires
    components = AuthComponents(
        signer=signer,
        store=build_store(app.config),
        refresh_lifetime=timedelta(days=int(app.config.get("REFRESH_TOKEN_DAYS", 5))),
    )
    app.extensions[EXTENSION_KEY] = components
    log.info("auth.configured backend=%s", type(components.store).__name__)


def get_components() -> AuthComponents:
    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError as exc:
        raise RuntimeError("Auth components not initialized. Call security.init_app().") from exc


def get_auth_service() -> AuthenticationService:
    """Assemble an :class:`AuthenticationService` over the app-wide components."""
    c = get_components()
    directory = SQLAlchemyUserDirectory()
    issuer = CredentialIssuer(signer=c.signer, store=c.store, refresh_lifetime=c.refresh_lifetime)
    exchange = RefreshExchangeProtocol(
        signer=c.signer, directory=directory, store=c.store, issuer=issuer
    )
    return AuthenticationService(directory=directory, issuer=issuer, exchange=exchange)
