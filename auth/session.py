"""
auth/session.py -- Binding an identity to the server session and checking ownership.

The session is the mutable mapping Starlette's SessionMiddleware exposes as
request.session. Once authenticated it holds exactly two keys, user_id and
username. Both-or-neither is the invariant every function here preserves:

  bind()             writes both keys or raises SessionError with neither set.
  current_identity() treats a session missing either key as anonymous.
  authorize()        compares the bound user_id with the user id a request
                     claims (path parameter); the claim is untrusted input.
  purge()            clears the session; safe to call on an empty one.

The entry routes reach authorize() through auth.dependencies.require_owner,
so the ownership check runs before any EntryStore call.

Layer rule: no imports from api/ or journal/.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from typing import Any

from auth.models import Identity
from core.errors import SessionError, Unauthorized

logger = logging.getLogger("selfdiary.auth")

USER_ID_KEY = "user_id"
USERNAME_KEY = "username"


def bind(session: MutableMapping[str, Any], user_id: int, username: str) -> None:
    """Store user_id and username in the session as one unit.

    Anything already in the session is discarded first so a login never
    inherits state from a previous identity. If the second write fails after
    the first succeeded, the session is cleared and SessionError is raised.
    """
    try:
        session.clear()
        session[USER_ID_KEY] = user_id
        session[USERNAME_KEY] = username
    except Exception as exc:
        purge(session)
        raise SessionError() from exc


def current_identity(session: MutableMapping[str, Any]) -> Identity | None:
    """Return the bound identity, or None when either field is absent."""
    user_id = session.get(USER_ID_KEY)
    username = session.get(USERNAME_KEY)
    if user_id is None or username is None:
        return None
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(username, str):
        return None
    return Identity(user_id=user_id, username=username)


def authorize(session: MutableMapping[str, Any], claimed_user_id: int) -> Identity:
    """Raise Unauthorized unless the session is bound to claimed_user_id.

    Returns the bound identity so callers can use it without a second lookup.
    """
    identity = current_identity(session)
    if identity is None or identity.user_id != claimed_user_id:
        logger.debug("Ownership check failed for claimed user id=%s", claimed_user_id)
        raise Unauthorized()
    return identity


def purge(session: MutableMapping[str, Any]) -> None:
    """Remove every key from the session. Idempotent."""
    session.clear()
