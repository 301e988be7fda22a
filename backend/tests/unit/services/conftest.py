"""Shared wiring for service-level tests."""

from __future__ import annotations

from datetime import timedelta

import pytest

from tests.helpers.auth import TEST_JWT_SECRET
from todoflow.infra.jwt.jwt_token_signer import JWTTokenSigner
from todoflow.services._shared.ports import InMemoryRefreshTokenStore, SignerConfig
from todoflow.services.auth.exchange import RefreshExchangeProtocol
from todoflow.services.auth.issuer import CredentialIssuer
from todoflow.services.auth.service import AuthenticationService
from todoflow.services.identity.directory import SQLAlchemyUserDirectory


@pytest.fixture
def signer() -> JWTTokenSigner:
    return JWTTokenSigner(SignerConfig(secret_key=TEST_JWT_SECRET, access_expires=timedelta(minutes=15)))


@pytest.fixture
def directory() -> SQLAlchemyUserDirectory:
    return SQLAlchemyUserDirectory()


@pytest.fixture
def memory_store() -> InMemoryRefreshTokenStore:
    return InMemoryRefreshTokenStore()


@pytest.fixture
def issuer(signer, memory_store) -> CredentialIssuer:
    return CredentialIssuer(signer=signer, store=memory_store)


@pytest.fixture
def exchange(signer, directory, memory_store, issuer) -> RefreshExchangeProtocol:
    return RefreshExchangeProtocol(signer=signer, directory=directory, store=memory_store, issuer=issuer)


@pytest.fixture
def auth_service(directory, issuer, exchange) -> AuthenticationService:
    """AuthenticationService over the SQL directory and an in-memory token store."""
    return AuthenticationService(directory=directory, issuer=issuer, exchange=exchange)
