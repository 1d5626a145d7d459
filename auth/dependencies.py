"""
auth/dependencies.py -- FastAPI Depends() helpers for session authorization.

require_owner() is the ownership guard for every /api/entries/{user_id}/...
route. FastAPI resolves it before the route body runs, so a request whose
session is not bound to the path user_id is rejected with Unauthorized (403)
before the EntryStore is touched.

get_identity() is the soft variant used by GET /api/session: it returns None
for an anonymous session instead of raising.

Layer rule: no imports from api/ or journal/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import Identity
from auth.session import authorize, current_identity


def get_identity(request: Request) -> Identity | None:
    """Return the identity bound to the request's session, or None."""
    return current_identity(request.session)


def require_owner(request: Request, user_id: int) -> Identity:
    """Require the session to be bound to the path parameter user_id.

    Use as a FastAPI dependency on routes whose path contains {user_id}:
        @router.get("/entries/{user_id}")
        def route(user_id: int, identity: Identity = Depends(require_owner)): ...
    """
    return authorize(request.session, user_id)
