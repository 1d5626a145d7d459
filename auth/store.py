"""
auth/store.py -- SQLAlchemy Core persistence layer for users.

Pattern: Repository + Data Mapper (same as journal/store.py).
UserStore is the repository; _row_to_user is the mapper.
Route and service code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

Concurrency:
  Every method runs inside Database.connect(), which holds the process-wide
  storage lock for the full statement.

Username conflicts:
  The UNIQUE constraint on users.username is the source of truth. A racing
  pair of registrations for the same name cannot both pass a pre-check, so
  create_user() inspects the IntegrityError instead of querying first. Only an
  error that names the username column becomes UsernameTaken; anything else
  is a StoreError.

Layer rule: no imports from api/ or journal/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth.models import User
from core.database import Database, local_timestamp, users
from core.errors import StoreError, UsernameTaken

logger = logging.getLogger("selfdiary.auth")


def _is_username_conflict(exc: IntegrityError) -> bool:
    """Return True if exc is the unique violation on users.username.

    SQLite reports 'UNIQUE constraint failed: users.username'; PostgreSQL
    reports the constraint name 'users_username_key'.
    """
    detail = str(exc.orig)
    return "users.username" in detail or "users_username_key" in detail


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore(Database("sqlite:///:memory:"))
        user_id = store.create_user("alice", hash_password("S3cret!pw"))
        user = store.get_by_username("alice")
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    def create_user(self, username: str, password_hash: str, created_at: str | None = None) -> int:
        """Insert a new user and return its assigned database ID.

        Raises UsernameTaken if the username already exists and StoreError for
        any other storage failure.
        """
        try:
            with self.db.connect() as conn:
                result = conn.execute(
                    users.insert().values(
                        username=username,
                        password_hash=password_hash,
                        created_at=created_at or local_timestamp(),
                    )
                )
                conn.commit()
                return result.inserted_primary_key[0]
        except IntegrityError as exc:
            if _is_username_conflict(exc):
                raise UsernameTaken() from exc
            logger.error("User insert violated a constraint: %s", exc.orig)
            raise StoreError() from exc
        except SQLAlchemyError as exc:
            raise StoreError() from exc

    def get_by_username(self, username: str) -> User | None:
        """Look up a user by exact username (case-sensitive). Returns None if not found."""
        try:
            with self.db.connect() as conn:
                row = conn.execute(users.select().where(users.c.username == username)).fetchone()
        except SQLAlchemyError as exc:
            raise StoreError() from exc
        return _row_to_user(row) if row is not None else None


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        created_at=row.created_at,
    )
