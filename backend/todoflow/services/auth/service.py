# todoflow/services/auth/service.py
from __future__ import annotations

import logging

from todoflow.services._shared.errors import IdentityValidationError
from todoflow.services._shared.ports.user_directory import UserDirectory
from todoflow.services.auth.dto import (
    LOGIN_FAILURE,
    AuthOutcome,
    LoginIn,
    MessageCode,
    RefreshIn,
)
from todoflow.services.auth.exchange import RefreshExchangeProtocol
from todoflow.services.auth.issuer import CredentialIssuer
from todoflow.services.identity.dto import IdentityCreateIn

log = logging.getLogger(__name__)


class AuthenticationService:
    """
    Authentication lifecycle service (register / login / refresh exchange).

    Every authentication or rotation failure is folded into an
    :class:`AuthOutcome`; only :class:`StorageError` escapes.
    """

    def __init__(
        self,
        *,
        directory: UserDirectory,
        issuer: CredentialIssuer,
        exchange: RefreshExchangeProtocol,
    ) -> None:
        """
        Initialize the service with its collaborators.

        :param directory: Identity store.
        :param issuer: Mints and persists credential pairs.
        :param exchange: Refresh rotation state machine.
        """
        self.directory = directory
        self.issuer = issuer
        self.exchange = exchange

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def create_user(
        self,
        username: str,
        email: str,
        first_name: str | None,
        password: str,
    ) -> AuthOutcome:
        """
        Create an identity. No tokens are issued.

        :returns: ``USER_CREATED_SUCCESS`` with the identity, or
            ``USER_CREATED_FAILURE`` with the directory's errors verbatim.
        """
        try:
            identity = self.directory.create_identity(
                IdentityCreateIn(
                    username=username,
                    email=email,
                    first_name=first_name,
                    password=password,
                )
            )
        except IdentityValidationError as exc:
            log.info(
                "auth.register.rejected",
                extra={"message_code": MessageCode.USER_CREATED_FAILURE.value},
            )
            return AuthOutcome.fail(MessageCode.USER_CREATED_FAILURE, *exc.errors)

        return AuthOutcome.ok(MessageCode.USER_CREATED_SUCCESS, identity)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, username: str, password: str, remote_address: str | None = None) -> AuthOutcome:
        """
        Authenticate credentials and issue a fresh pair.

        Unknown account and wrong password produce the same error and run the
        same password hash comparison.

        :param username: Username or email.
        :param password: Raw password.
        :param remote_address: Client address stored on the refresh row.
        :raises StorageError: If the refresh row cannot be written.
        """
        identity = self.directory.find_by_username_or_email(username or "")
        if not self.directory.verify_password(identity, password or "") or identity is None:
            log.info(
                "auth.login.failure",
                extra={
                    "message_code": MessageCode.USER_LOGIN_FAILURE.value,
                    "remote_address": remote_address,
                },
            )
            return AuthOutcome.fail(MessageCode.USER_LOGIN_FAILURE, LOGIN_FAILURE)

        pair = self.issuer.issue(identity, remote_address)
        log.info(
            "auth.login.success",
            extra={"user_id": identity.id, "message_code": MessageCode.USER_LOGIN_SUCCESS.value},
        )
        return AuthOutcome.ok(MessageCode.USER_LOGIN_SUCCESS, pair)

    def login_dto(self, dto: LoginIn) -> AuthOutcome:
        return self.login(dto.username, dto.password, dto.remote_address)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def exchange_refresh_token(
        self,
        access_token: str,
        refresh_token: str,
        signing_key: str | None = None,
        remote_address: str | None = None,
    ) -> AuthOutcome:
        """Delegate to :class:`RefreshExchangeProtocol`."""
        return self.exchange.exchange(
            access_token,
            refresh_token,
            signing_key=signing_key,
            remote_address=remote_address,
        )

    def refresh_dto(self, dto: RefreshIn, remote_address: str | None = None) -> AuthOutcome:
        return self.exchange_refresh_token(
            dto.access_token, dto.refresh_token, remote_address=remote_address
        )
