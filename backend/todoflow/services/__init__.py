"""Service layer public API.

Re-exports
----------
- Base primitives (from ``todoflow.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`
- Shared DTOs (from ``todoflow.services._shared.dto``)
    * :class:`ErrorDetail`
"""

from __future__ import annotations

from ._shared.base import BaseService, ServiceContext
from ._shared.dto import ErrorDetail

__all__ = [
    "BaseService",
    "ErrorDetail",
    "ServiceContext",
]
