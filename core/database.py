"""
core/database.py -- Shared storage handle, exclusive lock, and schema.

One Database object owns the SQLAlchemy engine for the whole process and one
threading.Lock. UserStore and EntryStore both receive the same Database and
run every statement inside Database.connect(), which holds the lock for the
full duration of the operation and releases it on every exit path. Storage is
therefore serialized process-wide even though FastAPI runs sync route
handlers on a thread pool.

Uses SQLAlchemy Core (not ORM): the dataclasses in auth/models.py and
journal/models.py stay the domain representation, the stores map rows onto
them.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    db = Database("sqlite:///:memory:")
    with db.connect() as conn:
        conn.execute(...)
        conn.commit()
    db.close()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Integer, MetaData, String, Table, Text, create_engine, event, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

logger = logging.getLogger("selfdiary.db")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", Text, nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)

entries = Table(
    "entries",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("content", Text, nullable=False),
    Column("recordings_map", Text, server_default="[]"),  # JSON list, opaque to the backend
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Largest value SQLite stores in an INTEGER column (signed 64-bit).
MAX_ROW_ID = 2**63 - 1


def local_timestamp() -> str:
    """Return the current local wall-clock time as 'YYYY-MM-DD HH:MM:SS'.

    No UTC offset is stored: SQLite's date() would shift an offset-bearing
    value to UTC, and entries are filtered by the writer's local calendar day.
    """
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def _set_sqlite_pragmas(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode and foreign key enforcement.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool. foreign_keys=ON makes the entries.user_id
    reference an enforced invariant rather than a documented one.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


# ---------------------------------------------------------------------------
# Shared handle
# ---------------------------------------------------------------------------


class Database:
    """Process-wide storage handle guarded by one exclusive lock."""

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        engine_kwargs: dict = {}
        if db_url.startswith("sqlite"):
            # The engine is shared across the ASGI server's worker threads.
            connect_args["check_same_thread"] = False
            if ":memory:" in db_url or "mode=memory" in db_url or db_url.rstrip("/") == "sqlite:":
                # One connection for every thread, otherwise each thread would
                # see its own empty in-memory database. The lock serializes it.
                engine_kwargs["poolclass"] = StaticPool
        self.engine: Engine = create_engine(db_url, connect_args=connect_args, **engine_kwargs)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_sqlite_pragmas)
        self._lock = threading.Lock()
        metadata.create_all(self.engine)
        logger.info("Database schema ready (%s)", self.engine.url.render_as_string(hide_password=True))

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Yield a connection while holding the storage lock.

        A thread waiting for the lock blocks fully. The lock is released when
        the with-block exits, whether it returns or raises.
        """
        with self._lock:
            with self.engine.connect() as conn:
                yield conn

    def ping(self) -> bool:
        """Return True if a trivial statement succeeds. Used by /api/health."""
        try:
            with self.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Database ping failed")
            return False
        return True

    def close(self) -> None:
        self.engine.dispose()
