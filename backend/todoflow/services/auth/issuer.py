"""Minting of access/refresh credential pairs."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta

from todoflow.services._shared.ports.refresh_token_store import (
    RefreshTokenRecord,
    RefreshTokenStore,
    utcnow,
)
from todoflow.services._shared.ports.token_signer import IdentityClaims, TokenSigner
from todoflow.services.auth.dto import CredentialPair
from todoflow.services.identity.dto import IdentityOut

log = logging.getLogger(__name__)

DEFAULT_REFRESH_LIFETIME = timedelta(days=5)
REFRESH_TOKEN_BYTES = 32


def new_refresh_value() -> str:
    """Return a fresh opaque refresh token (256 bits of entropy, URL-safe)."""
    return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)


class CredentialIssuer:
    """
    Mint an access/refresh pair for an authenticated identity.

    :param signer: Access-token signer.
    :param store: Refresh token store receiving the new row.
    :param refresh_lifetime: Default lifetime of refresh tokens.
    :param clock: Returns the current aware UTC time.
    :raises ValueError: If the refresh lifetime is not longer than the
        access-token lifetime.
    """

    def __init__(
        self,
        *,
        signer: TokenSigner,
        store: RefreshTokenStore,
        refresh_lifetime: timedelta = DEFAULT_REFRESH_LIFETIME,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if refresh_lifetime <= signer.access_expires:
            raise ValueError("Refresh lifetime must exceed the access token lifetime.")
        self.signer = signer
        self.store = store
        self.refresh_lifetime = refresh_lifetime
        self.clock = clock

    def mint(
        self,
        identity: IdentityOut,
        remote_address: str | None,
        refresh_lifetime: timedelta | None = None,
    ) -> tuple[CredentialPair, RefreshTokenRecord]:
        """
        Build a pair and its refresh row without persisting anything.

        :returns: ``(pair, record)``; the caller must persist ``record``
            before handing ``pair`` out.
        """
        now = self.clock()
        access = self.signer.issue(
            IdentityClaims(subject_id=identity.id, username=identity.username, email=identity.email)
        )
        record = RefreshTokenRecord(
            value=new_refresh_value(),
            owner_id=identity.id,
            created_at=now,
            modified_at=now,
            expires_at=now + (refresh_lifetime or self.refresh_lifetime),
            remote_address=remote_address or "",
        )
        return CredentialPair(access_token=access, refresh_token=record.value), record

    def issue(
        self,
        identity: IdentityOut,
        remote_address: str | None,
        refresh_lifetime: timedelta | None = None,
    ) -> CredentialPair:
        """
        Mint a pair and persist its refresh row.

        :param identity: Authenticated identity.
        :type identity: IdentityOut
        :param remote_address: Client address, blank when unknown.
        :type remote_address: str | None
        :param refresh_lifetime: Override of the default refresh lifetime.
        :type refresh_lifetime: timedelta | None
        :returns: The new pair.
        :rtype: CredentialPair
        :raises StorageError: If the row cannot be written; no pair is returned.
        """
        pair, record = self.mint(identity, remote_address, refresh_lifetime)
        self.store.insert(record)
        log.info("auth.credentials.issued", extra={"user_id": identity.id})
        return pair
