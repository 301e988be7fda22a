"""
Refresh exchange state machine.

``RECEIVED -> CLAIMS_EXTRACTED -> OWNER_RESOLVED -> TOKEN_VALIDATED -> ROTATED``;
any failing step short-circuits to ``REJECTED`` with one generic error.

Revoke and reissue form a single store transaction (:meth:`RefreshTokenStore.rotate`):
the replacement is minted first, then the old row is conditionally deleted and
the new row inserted atomically. A crash or cancellation at any point leaves
either the old token valid or the new one persisted, never neither.
"""

from __future__ import annotations

import logging
from enum import Enum

from todoflow.services._shared.ports.refresh_token_store import RefreshTokenStore
from todoflow.services._shared.ports.token_signer import TokenSigner
from todoflow.services._shared.ports.user_directory import UserDirectory
from todoflow.services.auth.dto import REFRESH_FAILURE, AuthOutcome, MessageCode
from todoflow.services.auth.issuer import CredentialIssuer

log = logging.getLogger(__name__)


class ExchangeState(str, Enum):
    RECEIVED = "received"
    CLAIMS_EXTRACTED = "claims_extracted"
    OWNER_RESOLVED = "owner_resolved"
    TOKEN_VALIDATED = "token_validated"
    ROTATED = "rotated"
    REJECTED = "rejected"


class RotationRejected(Exception):
    """Internal short-circuit; never leaves :meth:`RefreshExchangeProtocol.exchange`."""

    def __init__(self, state: ExchangeState, reason: str) -> None:
        super().__init__(reason)
        self.state = state
        self.reason = reason


class RefreshExchangeProtocol:
    """
    Rotate a refresh token presented together with its (expired) access token.

    :param signer: Verifies the access token while ignoring expiry.
    :param directory: Resolves the subject to an identity.
    :param store: Refresh token store offering atomic ``rotate``.
    :param issuer: Mints the replacement pair.
    """

    def __init__(
        self,
        *,
        signer: TokenSigner,
        directory: UserDirectory,
        store: RefreshTokenStore,
        issuer: CredentialIssuer,
    ) -> None:
        self.signer = signer
        self.directory = directory
        self.store = store
        self.issuer = issuer

    def exchange(
        self,
        access_token: str,
        refresh_token: str,
        signing_key: str | None = None,
        remote_address: str | None = None,
    ) -> AuthOutcome:
        """
        Run the state machine.

        :param access_token: Access JWT, usually expired.
        :param refresh_token: Refresh token issued with it.
        :param signing_key: Verification key; ``None`` uses the configured key.
        :param remote_address: Client address for the new row (blank if unknown).
        :returns: ``REFRESH_TOKEN_SUCCESS`` with a new :class:`CredentialPair`,
            or ``REFRESH_TOKEN_FAILURE`` with the generic error.
        :raises StorageError: When the store fails; not folded into a rejection.
        """
        state = ExchangeState.RECEIVED
        try:
            claims = self.signer.verify_ignoring_expiry(access_token or "", signing_key)
            if claims is None:
                raise RotationRejected(state, "bad_access_token")
            state = ExchangeState.CLAIMS_EXTRACTED

            identity = self.directory.find_by_id(claims.subject_id)
            if identity is None:
                raise RotationRejected(state, "unknown_subject")
            state = ExchangeState.OWNER_RESOLVED

            now = self.issuer.clock()
            matched = any(
                row.value == refresh_token and self.store.is_active(row, now)
                for row in self.store.find_by_owner(identity.id)
            )
            if not refresh_token or not matched:
                raise RotationRejected(state, "no_active_refresh_token")
            state = ExchangeState.TOKEN_VALIDATED

            pair, record = self.issuer.mint(identity, remote_address)
            if not self.store.rotate(refresh_token, record, now):
                # Lost the race to a concurrent exchange, or expired meanwhile
                raise RotationRejected(state, "already_consumed")
            state = ExchangeState.ROTATED
        except RotationRejected as rejected:
            log.warning(
                "auth.refresh.rejected",
                extra={"message_code": MessageCode.REFRESH_TOKEN_FAILURE.value},
            )
            log.debug("auth.refresh.rejected state=%s reason=%s", rejected.state.value, rejected.reason)
            return AuthOutcome.fail(MessageCode.REFRESH_TOKEN_FAILURE, REFRESH_FAILURE)

        log.info(
            "auth.refresh.rotated",
            extra={"user_id": identity.id, "message_code": MessageCode.REFRESH_TOKEN_SUCCESS.value},
        )
        return AuthOutcome.ok(MessageCode.REFRESH_TOKEN_SUCCESS, pair)
