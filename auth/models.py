"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and services do
the work; these only own the shape.

Layer rule: no imports from api/ or journal/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered diary owner.

    Users are immutable after registration and never deleted. password_hash is
    an Argon2 PHC string and must never leave the server.
    """

    username: str
    password_hash: str
    id: int | None = None
    created_at: str | None = None  # local time, 'YYYY-MM-DD HH:MM:SS'


@dataclass(frozen=True)
class Identity:
    """The (user_id, username) pair bound to an authenticated session."""

    user_id: int
    username: str
