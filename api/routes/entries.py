"""
api/routes/entries.py -- Diary entry CRUD, scoped to the session's owner.

Routes:
  GET    /api/entries/{user_id}                   -- list (optional date_from / date_to)
  POST   /api/entries/{user_id}                   -- add
  POST   /api/entries/{user_id}/delete_multiple   -- delete a list of ids, in order
  PUT    /api/entries/{user_id}/{entry_id}        -- edit
  DELETE /api/entries/{user_id}/{entry_id}        -- delete

Security:
  Every route depends on require_owner, which raises Unauthorized (403)
  unless the session is bound to the path user_id. FastAPI resolves the
  dependency before the handler body, so storage is never reached for a
  mismatched owner. The path user_id is only passed to EntryStore after that
  check.

  Edit and delete of an id that does not exist, or belongs to another user,
  affect zero rows and still answer 200. The store reports the row count;
  the HTTP contract does not expose it.

  Entry ids must fit a SQLite INTEGER (1 .. MAX_ROW_ID); anything else is a
  422 before the handler runs.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Request

from api.models import DeleteMultipleBody, EntryBody, EntryResponse, MessageResponse
from auth.dependencies import require_owner
from core.database import MAX_ROW_ID
from journal.models import date_filter_from_query
from journal.store import EntryStore

# Auth policy: every route below requires a session bound to {user_id}.
router = APIRouter(dependencies=[Depends(require_owner)])

_EntryIdPath = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]


def _entry_store(request: Request) -> EntryStore:
    return request.app.state.entry_store


@router.get("/entries/{user_id}", response_model=list[EntryResponse])
def get_entries(
    request: Request,
    user_id: int,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list[EntryResponse]:
    """List the owner's entries, optionally restricted to one day or an inclusive range.

    date_from and date_to -> range; date_from only -> that day; otherwise all.
    """
    date_filter = date_filter_from_query(date_from, date_to)
    entries = _entry_store(request).list_entries(user_id, date_filter)
    return [EntryResponse.from_entry(e) for e in entries]


@router.post("/entries/{user_id}", response_model=MessageResponse)
def add_entry(request: Request, user_id: int, body: EntryBody) -> MessageResponse:
    _entry_store(request).add_entry(user_id, body.content, body.recordings_map)
    return MessageResponse(message="Entry added successfully")


@router.post("/entries/{user_id}/delete_multiple", response_model=MessageResponse)
def delete_multiple_entries(request: Request, user_id: int, body: DeleteMultipleBody) -> MessageResponse:
    """Delete entry_ids one by one. Stops at the first storage error; earlier deletes stay."""
    _entry_store(request).delete_batch(user_id, body.entry_ids)
    return MessageResponse(message="Selected entries deleted successfully")


@router.put("/entries/{user_id}/{entry_id}", response_model=MessageResponse)
def edit_entry(request: Request, user_id: int, entry_id: _EntryIdPath, body: EntryBody) -> MessageResponse:
    _entry_store(request).edit_entry(user_id, entry_id, body.content, body.recordings_map)
    return MessageResponse(message="Entry updated successfully")


@router.delete("/entries/{user_id}/{entry_id}", response_model=MessageResponse)
def delete_entry(request: Request, user_id: int, entry_id: _EntryIdPath) -> MessageResponse:
    _entry_store(request).delete_entry(user_id, entry_id)
    return MessageResponse(message="Entry deleted successfully")
