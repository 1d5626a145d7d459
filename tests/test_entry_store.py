"""Unit tests for journal/store.py and journal/models.py -- owner-scoped entry storage.

Covers:
- add/list round trip, recordings_map default, foreign key on user_id
- edit/delete of another user's entry is a zero-row no-op, storage unchanged
- date filters: single day, inclusive range, and the query-parameter mapping
- delete_batch() is sequential and keeps partial progress on failure
- Database.connect() releases its lock on error
"""

from datetime import date

import pytest

from core.database import Database
from core.errors import StoreError
from journal.models import DateRange, NoFilter, SingleDate, date_filter_from_query
from journal.store import EntryStore, date_filter_clause


def _snapshot(store: EntryStore, *user_ids: int) -> dict:
    return {
        e.id: (e.user_id, e.content, e.recordings_map, e.created_at)
        for uid in user_ids
        for e in store.list_entries(uid)
    }


# ---------------------------------------------------------------------------
# Basic CRUD
# ---------------------------------------------------------------------------


class TestAddAndList:
    def test_add_then_list(self, entry_store: EntryStore, owners) -> None:
        alice, _ = owners
        eid = entry_store.add_entry(alice, "Dear diary", '["rec-1.webm"]', created_at="2024-01-15 09:00:00")
        [entry] = entry_store.list_entries(alice)
        assert entry.id == eid
        assert entry.user_id == alice
        assert entry.content == "Dear diary"
        assert entry.recordings_map == '["rec-1.webm"]'
        assert entry.created_at == "2024-01-15 09:00:00"

    def test_recordings_map_defaults_to_empty_list(self, entry_store: EntryStore, owners) -> None:
        alice, _ = owners
        entry_store.add_entry(alice, "no recordings")
        assert entry_store.list_entries(alice)[0].recordings_map == "[]"

    def test_list_is_scoped_to_owner(self, entry_store: EntryStore, owners) -> None:
        alice, bob = owners
        entry_store.add_entry(alice, "alice's")
        entry_store.add_entry(bob, "bob's")
        assert [e.content for e in entry_store.list_entries(alice)] == ["alice's"]
        assert [e.content for e in entry_store.list_entries(bob)] == ["bob's"]

    def test_add_for_unknown_user_fails(self, entry_store: EntryStore) -> None:
        with pytest.raises(StoreError):
            entry_store.add_entry(999, "orphan")


class TestOwnershipScopedMutation:
    def test_edit_own_entry(self, entry_store: EntryStore, owners) -> None:
        alice, _ = owners
        eid = entry_store.add_entry(alice, "draft")
        assert entry_store.edit_entry(alice, eid, "final", '["a.webm"]') == 1
        [entry] = entry_store.list_entries(alice)
        assert (entry.content, entry.recordings_map) == ("final", '["a.webm"]')

    def test_edit_other_users_entry_is_noop(self, entry_store: EntryStore, owners) -> None:
        alice, bob = owners
        eid = entry_store.add_entry(alice, "private")
        before = _snapshot(entry_store, alice, bob)

        assert entry_store.edit_entry(bob, eid, "hijacked", "[]") == 0

        assert _snapshot(entry_store, alice, bob) == before

    def test_delete_other_users_entry_is_noop(self, entry_store: EntryStore, owners) -> None:
        alice, bob = owners
        eid = entry_store.add_entry(alice, "private")
        before = _snapshot(entry_store, alice, bob)

        assert entry_store.delete_entry(bob, eid) == 0

        assert _snapshot(entry_store, alice, bob) == before

    def test_edit_and_delete_missing_id_are_noops(self, entry_store: EntryStore, owners) -> None:
        alice, _ = owners
        assert entry_store.edit_entry(alice, 12345, "x", "[]") == 0
        assert entry_store.delete_entry(alice, 12345) == 0

    def test_delete_own_entry(self, entry_store: EntryStore, owners) -> None:
        alice, _ = owners
        eid = entry_store.add_entry(alice, "bye")
        assert entry_store.delete_entry(alice, eid) == 1
        assert entry_store.list_entries(alice) == []


# ---------------------------------------------------------------------------
# Date filtering
# ---------------------------------------------------------------------------


@pytest.fixture
def dated(entry_store: EntryStore, owners) -> dict:
    """Entries for alice across Dec/Jan/Feb plus one January entry for bob."""
    alice, bob = owners
    return {
        "dec31": entry_store.add_entry(alice, "dec31", created_at="2023-12-31 23:59:59"),
        "jan01": entry_store.add_entry(alice, "jan01", created_at="2024-01-01 00:00:00"),
        "jan15_am": entry_store.add_entry(alice, "jan15_am", created_at="2024-01-15 08:00:00"),
        "jan15_pm": entry_store.add_entry(alice, "jan15_pm", created_at="2024-01-15 22:30:00"),
        "jan31": entry_store.add_entry(alice, "jan31", created_at="2024-01-31 23:59:59"),
        "feb01": entry_store.add_entry(alice, "feb01", created_at="2024-02-01 00:00:00"),
        "bob_jan15": entry_store.add_entry(bob, "bob_jan15", created_at="2024-01-15 12:00:00"),
    }


class TestDateFilter:
    def test_no_filter_returns_everything_for_owner(self, entry_store: EntryStore, owners, dated) -> None:
        alice, _ = owners
        contents = {e.content for e in entry_store.list_entries(alice, NoFilter())}
        assert contents == {"dec31", "jan01", "jan15_am", "jan15_pm", "jan31", "feb01"}

    def test_single_date_ignores_time_of_day(self, entry_store: EntryStore, owners, dated) -> None:
        alice, _ = owners
        contents = {e.content for e in entry_store.list_entries(alice, SingleDate(date(2024, 1, 15)))}
        assert contents == {"jan15_am", "jan15_pm"}

    def test_range_is_inclusive_and_owner_scoped(self, entry_store: EntryStore, owners, dated) -> None:
        alice, _ = owners
        result = entry_store.list_entries(alice, DateRange(date(2024, 1, 1), date(2024, 1, 31)))
        contents = {e.content for e in result}
        assert contents == {"jan01", "jan15_am", "jan15_pm", "jan31"}
        assert all(e.user_id == alice for e in result)
        assert "feb01" not in contents
        assert "bob_jan15" not in contents

    def test_empty_range(self, entry_store: EntryStore, owners, dated) -> None:
        alice, _ = owners
        assert entry_store.list_entries(alice, DateRange(date(2024, 1, 31), date(2024, 1, 1))) == []

    def test_clause_builder(self) -> None:
        assert date_filter_clause(NoFilter()) is None
        single = str(date_filter_clause(SingleDate(date(2024, 1, 15))))
        assert "date(entries.created_at) =" in single
        ranged = str(date_filter_clause(DateRange(date(2024, 1, 1), date(2024, 1, 31))))
        assert "date(entries.created_at) BETWEEN" in ranged

    def test_clause_builder_rejects_unknown_variant(self) -> None:
        with pytest.raises(TypeError):
            date_filter_clause("2024-01-01")


class TestDateFilterFromQuery:
    def test_both_dates_is_range(self) -> None:
        assert date_filter_from_query(date(2024, 1, 1), date(2024, 1, 31)) == DateRange(
            date(2024, 1, 1), date(2024, 1, 31)
        )

    def test_from_only_is_single_day(self) -> None:
        assert date_filter_from_query(date(2024, 1, 1), None) == SingleDate(date(2024, 1, 1))

    def test_neither_is_no_filter(self) -> None:
        assert date_filter_from_query(None, None) == NoFilter()

    def test_to_only_is_no_filter(self, caplog) -> None:
        with caplog.at_level("WARNING", logger="selfdiary.journal"):
            assert date_filter_from_query(None, date(2024, 1, 31)) == NoFilter()
        assert "without date_from" in caplog.text


# ---------------------------------------------------------------------------
# Batch deletion
# ---------------------------------------------------------------------------


class TestDeleteBatch:
    def test_deletes_all_owned_ids(self, entry_store: EntryStore, owners) -> None:
        alice, _ = owners
        ids = [entry_store.add_entry(alice, str(n)) for n in range(3)]
        entry_store.delete_batch(alice, ids)
        assert entry_store.list_entries(alice) == []

    def test_foreign_ids_in_batch_are_skipped(self, entry_store: EntryStore, owners) -> None:
        alice, bob = owners
        mine = entry_store.add_entry(alice, "mine")
        theirs = entry_store.add_entry(bob, "theirs")
        entry_store.delete_batch(alice, [mine, theirs])
        assert entry_store.list_entries(alice) == []
        assert [e.id for e in entry_store.list_entries(bob)] == [theirs]

    def test_failure_keeps_earlier_deletes_and_stops(self, entry_store: EntryStore, owners, monkeypatch) -> None:
        alice, _ = owners
        a = entry_store.add_entry(alice, "a")
        b = entry_store.add_entry(alice, "b")
        c = entry_store.add_entry(alice, "c")

        real_delete = entry_store.delete_entry
        attempted = []

        def flaky_delete(user_id: int, entry_id: int) -> int:
            attempted.append(entry_id)
            if entry_id == b:
                raise StoreError()
            return real_delete(user_id, entry_id)

        monkeypatch.setattr(entry_store, "delete_entry", flaky_delete)
        with pytest.raises(StoreError):
            entry_store.delete_batch(alice, [a, b, c])
        monkeypatch.undo()

        assert attempted == [a, b]
        assert {e.id for e in entry_store.list_entries(alice)} == {b, c}


# ---------------------------------------------------------------------------
# Storage lock
# ---------------------------------------------------------------------------


class TestDatabaseLock:
    def test_lock_held_during_operation(self, db: Database) -> None:
        with db.connect():
            assert db._lock.locked()
        assert not db._lock.locked()

    def test_lock_released_on_error(self, db: Database) -> None:
        with pytest.raises(RuntimeError):
            with db.connect():
                raise RuntimeError("boom")
        assert not db._lock.locked()

    def test_lock_released_after_store_error(self, entry_store: EntryStore, db: Database) -> None:
        with pytest.raises(StoreError):
            entry_store.add_entry(999, "orphan")
        assert not db._lock.locked()
