"""
journal/store.py -- SQLAlchemy Core persistence layer for diary entries.

Pattern: Repository + Data Mapper. EntryStore is the repository;
_row_to_entry is the mapper. Route handlers never touch SQL directly.

Ownership scoping:
  Every method takes the owning user_id explicitly and every WHERE clause
  includes user_id = :user_id, so a valid entry id belonging to someone else
  is never read or changed (IDOR guard at the storage level, in addition to
  the session check in auth/dependencies.py).

  edit_entry() and delete_entry() return the number of rows affected. Zero
  rows (unknown id or another user's id) is not an error: callers that need
  to know whether anything happened must check the count.

Date filtering:
  date_filter_clause() is a pure function from a DateFilter variant to an
  optional SQL predicate. list_entries() appends it to the base user_id
  predicate. No ORDER BY is applied.

Concurrency:
  Each method holds the Database lock for its own statement only.
  delete_batch() calls delete_entry() per id, so the lock is released between
  members and two batches may interleave.

Security: all queries use bound parameters. No f-strings in SQL.

Layer rule: no imports from api/ or auth/.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement

from core.database import Database, entries, local_timestamp
from core.errors import StoreError
from journal.models import DateFilter, DateRange, Entry, NoFilter, SingleDate

logger = logging.getLogger("selfdiary.journal")


# ---------------------------------------------------------------------------
# Date filter -> predicate
# ---------------------------------------------------------------------------


def date_filter_clause(date_filter: DateFilter) -> Optional[ColumnElement]:
    """Return the extra WHERE predicate for date_filter, or None for NoFilter.

    Only the date component of created_at is compared (SQL date()), so the
    time of day never affects membership. DateRange bounds are inclusive.
    """
    created_on = func.date(entries.c.created_at)
    if isinstance(date_filter, NoFilter):
        return None
    if isinstance(date_filter, SingleDate):
        return created_on == date_filter.day.isoformat()
    if isinstance(date_filter, DateRange):
        return created_on.between(date_filter.start.isoformat(), date_filter.end.isoformat())
    raise TypeError(f"Unsupported date filter: {date_filter!r}")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class EntryStore:
    """Repository for Entry records.

    Usage:
        store = EntryStore(db)
        entry_id = store.add_entry(user_id, "Dear diary", "[]")
        store.edit_entry(user_id, entry_id, "Dear diary, again", "[]")
        store.list_entries(user_id, SingleDate(date(2024, 1, 15)))
        store.delete_batch(user_id, [entry_id])
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    def add_entry(
        self,
        user_id: int,
        content: str,
        recordings_map: str = "[]",
        created_at: Optional[str] = None,
    ) -> int:
        """Insert a new entry for user_id and return its ID.

        Raises StoreError if the insert fails, including when user_id does not
        reference an existing user (foreign key).
        """
        try:
            with self.db.connect() as conn:
                result = conn.execute(
                    entries.insert().values(
                        user_id=user_id,
                        content=content,
                        recordings_map=recordings_map,
                        created_at=created_at or local_timestamp(),
                    )
                )
                conn.commit()
                return result.inserted_primary_key[0]
        except SQLAlchemyError as exc:
            raise StoreError() from exc

    def edit_entry(self, user_id: int, entry_id: int, content: str, recordings_map: str) -> int:
        """Replace content and recordings_map of one of user_id's entries.

        Returns the number of rows updated (0 or 1).
        """
        try:
            with self.db.connect() as conn:
                result = conn.execute(
                    entries.update()
                    .where((entries.c.id == entry_id) & (entries.c.user_id == user_id))
                    .values(content=content, recordings_map=recordings_map)
                )
                conn.commit()
        except SQLAlchemyError as exc:
            raise StoreError() from exc
        return result.rowcount

    def delete_entry(self, user_id: int, entry_id: int) -> int:
        """Delete one of user_id's entries. Returns the number of rows deleted (0 or 1)."""
        try:
            with self.db.connect() as conn:
                result = conn.execute(
                    entries.delete().where((entries.c.id == entry_id) & (entries.c.user_id == user_id))
                )
                conn.commit()
        except SQLAlchemyError as exc:
            raise StoreError() from exc
        return result.rowcount

    def delete_batch(self, user_id: int, entry_ids: Iterable[int]) -> None:
        """Delete each id in order with delete_entry(). Not transactional.

        The first failure propagates: ids before it stay deleted, ids after it
        are never attempted.
        """
        for entry_id in entry_ids:
            self.delete_entry(user_id, entry_id)

    def list_entries(self, user_id: int, date_filter: DateFilter = NoFilter()) -> list[Entry]:
        """Return user_id's entries matching date_filter, in storage order."""
        query = entries.select().where(entries.c.user_id == user_id)
        clause = date_filter_clause(date_filter)
        if clause is not None:
            query = query.where(clause)
        try:
            with self.db.connect() as conn:
                rows = conn.execute(query).fetchall()
        except SQLAlchemyError as exc:
            raise StoreError() from exc
        return [_row_to_entry(r) for r in rows]


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_entry(row) -> Entry:
    return Entry(
        id=row.id,
        user_id=row.user_id,
        content=row.content,
        recordings_map=row.recordings_map if row.recordings_map is not None else "[]",
        created_at=row.created_at,
    )
