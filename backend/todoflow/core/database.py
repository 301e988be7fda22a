"""Engine-level hooks for the shared SQLAlchemy instance.

SQLite ships with foreign-key enforcement disabled per connection; the
refresh token store relies on the ``owner_id`` foreign key to refuse rows
for unknown identities, so every new DBAPI connection turns it on.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.engine import Engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def install_engine_hooks(engine: Engine) -> None:
    """Register connection hooks on ``engine`` (idempotent).

    :param engine: Engine bound to the application database.
    :type engine: sqlalchemy.engine.Engine
    """
    if engine.dialect.name != "sqlite":
        return
    if not event.contains(engine, "connect", _enable_sqlite_foreign_keys):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
