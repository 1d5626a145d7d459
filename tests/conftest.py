"""
tests/conftest.py -- Shared test fixtures for Self Diary unit and integration tests.

This module provides:
  - db / user_store / entry_store / auth_service: a fresh in-memory store stack per test
  - owners: two registered users (alice, bob) for ownership-scoping tests
  - api: (client, user_store, entry_store) -- TestClient wired to an isolated DB

Design: every fixture uses a fresh sqlite:///:memory: database. TestClient runs
sync route handlers in a thread pool, and a plain :memory: DB is
per-connection; Database pins in-memory URLs to a single StaticPool
connection so every worker thread sees the same schema and rows. A new
Database per test keeps tests from seeing each other's data.

DEBUG and ALLOWED_HOSTS must be set before any api/ import: get_settings()
runs at import time, needs DEBUG to auto-generate SECRET_KEY, and
TrustedHostMiddleware must accept TestClient's "testserver" host.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set before any api/core import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ALLOWED_HOSTS", '["testserver"]')

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.service import AuthService
from auth.store import UserStore
from core.database import Database
from journal.store import EntryStore

STRONG_PASSWORD = "Abcdef1!"

# ---------------------------------------------------------------------------
# Store stack
# ---------------------------------------------------------------------------


@pytest.fixture
def db() -> Generator[Database, None, None]:
    database = Database("sqlite:///:memory:")
    yield database
    database.close()


@pytest.fixture
def user_store(db: Database) -> UserStore:
    return UserStore(db)


@pytest.fixture
def entry_store(db: Database) -> EntryStore:
    return EntryStore(db)


@pytest.fixture
def auth_service(user_store: UserStore) -> AuthService:
    return AuthService(user_store)


@pytest.fixture
def owners(user_store: UserStore) -> tuple[int, int]:
    """Create two users directly in the store and return (alice_id, bob_id).

    The hash value is irrelevant for entry tests, so no Argon2 work is done.
    """
    alice = user_store.create_user("alice", "not-a-real-hash")
    bob = user_store.create_user("bob", "not-a-real-hash")
    return alice, bob


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------


def _patch_lifespan(db: Database):
    """Return a lifespan that wires the test Database into app.state."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.db = db
        app.state.user_store = UserStore(db)
        app.state.entry_store = EntryStore(db)
        app.state.auth_service = AuthService(app.state.user_store)
        yield

    return test_lifespan


@pytest.fixture
def api() -> Generator[tuple[TestClient, UserStore, EntryStore], None, None]:
    """Yield (client, user_store, entry_store) backed by an isolated in-memory DB.

    The client keeps cookies between requests, so logging in once binds the
    session for the rest of the test.
    """
    db = Database("sqlite:///:memory:")
    app.router.lifespan_context = _patch_lifespan(db)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, UserStore(db), EntryStore(db)

    db.close()


def register_and_login(client: TestClient, username: str, password: str = STRONG_PASSWORD) -> int:
    """Register username, log in on client, and return the bound user_id."""
    resp = client.post("/api/register", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    resp = client.post("/api/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return client.get("/api/session").json()["user_id"]
