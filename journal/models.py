"""
journal/models.py -- Domain dataclasses for diary entries and date filters.

These are pure data containers with zero logic, except date_filter_from_query
which maps the two optional query parameters onto a filter variant.

The date filter is a small tagged union:
  NoFilter              -- every entry of the user
  SingleDate(day)       -- entries whose creation date equals day
  DateRange(start, end) -- entries whose creation date lies in [start, end]
journal/store.py turns a variant into a SQL predicate in one place.

Layer rule: no imports from api/ or auth/.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

logger = logging.getLogger("selfdiary.journal")


@dataclass
class Entry:
    """A diary entry owned by exactly one user.

    recordings_map is a serialized structure (a JSON list by default) that
    the backend stores and returns without interpreting it.

    id is None before the record is written to the database.
    """

    user_id: int
    content: str
    recordings_map: str = "[]"
    id: Optional[int] = None
    created_at: str = ""  # local time 'YYYY-MM-DD HH:MM:SS', set by store on insert


@dataclass(frozen=True)
class NoFilter:
    pass


@dataclass(frozen=True)
class SingleDate:
    day: date


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date


DateFilter = Union[NoFilter, SingleDate, DateRange]


def date_filter_from_query(date_from: Optional[date], date_to: Optional[date]) -> DateFilter:
    """Map the date_from / date_to query parameters onto a DateFilter.

    both present     -> DateRange(date_from, date_to)
    date_from only   -> SingleDate(date_from)
    neither          -> NoFilter
    date_to only     -> NoFilter (kept for client compatibility, logged)
    """
    if date_from is not None and date_to is not None:
        return DateRange(date_from, date_to)
    if date_from is not None:
        return SingleDate(date_from)
    if date_to is not None:
        logger.warning("date_to=%s given without date_from; returning unfiltered entries", date_to.isoformat())
    return NoFilter()
