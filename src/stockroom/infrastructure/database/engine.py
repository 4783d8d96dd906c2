"""Database engine setup for SQLite with WAL mode.

SQLAlchemy Core (not ORM) is used: the repository maps rows to domain
entities itself, so there is nothing for an identity map to do.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from stockroom.infrastructure.database.schema import metadata


def create_db_engine(db_path: Path | None) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled.

    ``None`` gives a private in-process database shared by every
    connection of the returned engine.
    """
    if db_path is None:
        engine = create_engine(
            "sqlite://",
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        if db_path is not None:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(db_path: Path | None) -> Engine:
    """Create the engine and the ``products`` table if missing.

    Safe to call again on an existing database. Parent
    directories of *db_path* are created as needed.
    """
    if db_path is not None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(db_path)
    metadata.create_all(engine)
    return engine
