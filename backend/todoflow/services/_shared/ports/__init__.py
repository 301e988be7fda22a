"""
todoflow.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token signing, refresh token persistence and identity lookup.

Modules
-------
- :mod:`token_signer`:
    Defines :class:`~.TokenSigner` with :class:`~.IdentityClaims`,
    :class:`~.AccessClaims` and :class:`~.SignerConfig`.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore`, :class:`~.RefreshTokenRecord`
    and the lock-based :class:`~.InMemoryRefreshTokenStore`.

- :mod:`user_directory`:
    Defines :class:`~.UserDirectory`.

Design Notes
------------
Concrete adapters (JWT, SQL, Redis) implement these interfaces under
``todoflow.infra`` and are selected at application start.
"""

from __future__ import annotations

from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RefreshTokenStore,
    utcnow,
)
from .token_signer import AccessClaims, IdentityClaims, SignerConfig, TokenSigner
from .user_directory import UserDirectory

__all__ = [
    "AccessClaims",
    "IdentityClaims",
    "InMemoryRefreshTokenStore",
    "RefreshTokenRecord",
    "RefreshTokenStore",
    "SignerConfig",
    "TokenSigner",
    "UserDirectory",
    "utcnow",
]
