"""Generic repository base and query utilities for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by all repositories:
- Safe sorting with a whitelist mapping (prevents SQL injection).
- Deterministic ordering (adds a primary-key tiebreaker).
- Safe update helpers with per-repository updatable-field whitelists.
- No business logic, no commit/rollback; units of work own transactions.

Design decisions
----------------
* Repositories MUST remain thin and persistence-focused.
* Sorting is opt-in per aggregate via ``_sortable_fields`` mapping.
* Updates MUST NOT allow mass-assignment: each repo exposes an explicit
  ``_updatable_fields`` whitelist.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from todoflow.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


# ----------------------------- Sorting utilities -----------------------------


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse public sort tokens into ``(field, is_desc)`` tuples.

    :param raw: Public tokens like ``["-due_date", "title"]``.
    :type raw: Iterable[str]
    :returns: List of ``(field_name, is_desc)`` tokens.
    :rtype: list[tuple[str, bool]]
    """
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        field = (token[1:] if is_desc else token).strip()
        if field:
            parsed.append((field, is_desc))
    return parsed


def apply_sorting(
    stmt: Select[Any],
    sortable_fields: Mapping[str, InstrumentedAttribute[Any]],
    tokens: Iterable[str],
    *,
    pk_attr: InstrumentedAttribute[Any] | None,
) -> Select[Any]:
    """Apply safe ``ORDER BY`` clauses based on a whitelist mapping.

    Unknown sort tokens are ignored silently. The model's primary key is always
    appended as a final ascending tiebreaker.
    """
    orders: list[Any] = []
    for field, is_desc in parse_sort_tokens(tokens):
        col = sortable_fields.get(field)
        if isinstance(col, InstrumentedAttribute):
            orders.append(col.desc() if is_desc else col.asc())

    if orders:
        stmt = stmt.order_by(*orders)

    if pk_attr is not None:
        stmt = stmt.order_by(pk_attr.asc())

    return stmt


# ------------------------------ Base repository ------------------------------


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define ``model``. They MAY override ``_sortable_fields``,
    ``_filterable_fields`` and ``_updatable_fields``.

    This class NEVER opens, commits or rolls back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        When no explicit session is provided the repository falls back to the
        Flask-scoped session exposed by ``todoflow.core.extensions``.
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        """Whitelist mapping of public sort keys to model attributes."""
        return {}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        """Whitelist of equality-filterable fields. Unknown keys are ignored."""
        return {}

    def _updatable_fields(self) -> set[str]:
        """Whitelist of public keys that can be assigned on update."""
        return set()

    # ------------------------------ Internals --------------------------------

    def _apply_equality_filters(
        self,
        stmt: Select[Any],
        filters: Mapping[str, Any] | None,
    ) -> Select[Any]:
        if not filters:
            return stmt
        allowed = self._filterable_fields()
        clauses: list[Any] = []
        for k, v in filters.items():
            col = allowed.get(k)
            if isinstance(col, InstrumentedAttribute):
                clauses.append(col == v)
        return stmt.where(and_(*clauses)) if clauses else stmt

    def _sanitize_update_fields(
        self,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
    ) -> dict[str, Any]:
        """Return a dict with only whitelisted update keys.

        :raises ValueError: If ``strict`` and unknown keys are present.
        """
        allowed = self._updatable_fields()
        if not allowed:
            # Fail-closed by default to avoid accidental mass-assignment
            if fields and strict:
                raise ValueError("No updatable fields configured for this repository.")
            return {}

        unknown = [k for k in fields if k not in allowed]
        if unknown and strict:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")

        return {k: v for k, v in fields.items() if k in allowed}

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush to materialize the PK."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key.

        :raises RuntimeError: If no PK attribute can be detected.
        """
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        stmt = select(self.model).where(pk_attr == entity_id)
        result = self.session.execute(stmt).scalars().first()
        return cast(E | None, result)

    def find_one(self, **filters: Any) -> E | None:
        """Find a single entity by whitelisted equality filters."""
        stmt: Select[Any] = self._apply_equality_filters(select(self.model), filters)
        result = self.session.execute(stmt).scalars().first()
        return cast(E | None, result)

    def exists(self, **filters: Any) -> bool:
        stmt: Select[Any] = select(func.count()).select_from(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        return bool(self.session.execute(stmt).scalar())

    def count(self, **filters: Any) -> int:
        """Count rows matching whitelisted equality filters."""
        stmt: Select[Any] = select(func.count()).select_from(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        return int(self.session.execute(stmt).scalar_one())

    def delete(self, instance: E) -> None:
        """Delete an entity and flush changes."""
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    # ----------------------------- Safe updates -------------------------------

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
        flush: bool = True,
    ) -> E:
        """Assign only whitelisted keys to ``instance`` and optionally flush.

        The assignment uses ``setattr`` to trigger SQLAlchemy ``@validates``
        decorators defined on the mapped class.
        """
        updates = self._sanitize_update_fields(fields, strict=strict)
        for k, v in updates.items():
            setattr(instance, k, v)
        if flush:
            self.flush()
        return instance

    # ------------------------------- Listing ---------------------------------

    def list(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        sort: Iterable[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[E]:
        """List entities with optional filtering, sorting and slicing."""
        stmt: Select[Any] = select(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        stmt = apply_sorting(stmt, self._sortable_fields(), sort or [], pk_attr=self._pk_attr())

        if limit is not None:
            stmt = stmt.limit(int(limit))
        if offset is not None:
            stmt = stmt.offset(int(offset))

        results = self.session.execute(stmt).scalars().all()
        return cast(list[E], list(results))
