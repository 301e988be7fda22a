"""Transactional scopes over the Flask-SQLAlchemy session.

``SQLAlchemyUnitOfWork`` commits on success; ``SQLAlchemyReadOnlyUnitOfWork``
guards lookups (user directory, todo queries) against accidental writes.
"""

from .base import UnitOfWork
from .sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

__all__ = [
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
    "SQLAlchemyReadOnlyUnitOfWork",
]
