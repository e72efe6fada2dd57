"""
tests/conftest.py -- Shared test fixtures for NoteKeeper tests.

This module provides:
  - make_settings(): Settings for an isolated in-memory DB and cheap bcrypt
  - user_store / note_store: bare repositories for store-level tests
  - client: TestClient over create_app(settings), one per test function
  - register(): helper that creates an account and returns its token

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs route handlers in a thread pool. Plain :memory: DBs
are per-connection and would present a blank schema to each worker thread.
The named URI format (file:name?mode=memory&cache=shared&uri=true) shares
one in-memory instance across all connections in the same process. Every
fixture gets its own random name so tests never see each other's rows.

DEBUG and LOG_DIR must be set before any api/core import: api.main builds
a module-level app from get_settings() on import, and that must neither
demand a real SECRET_KEY nor write log files into the working tree.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Generator

# CRITICAL: Set before any api/core import (see module docstring).
os.environ.setdefault("DEBUG", "true")
os.environ["LOG_DIR"] = ""

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from auth.passwords import PasswordHasher
from auth.store import UserStore
from core.config import Settings
from notes.store import NoteStore

TEST_SECRET = "test-secret-key-that-is-at-least-32-chars"
TEST_PASSWORD = "secret1"


def memory_db_url(prefix: str = "test") -> str:
    return f"sqlite:///file:{prefix}_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


def make_settings(**overrides) -> Settings:
    """Build Settings for tests. Keyword overrides win over the defaults below."""
    values = {
        "debug": True,
        "secret_key": TEST_SECRET,
        "token_expire_seconds": 3600,
        "bcrypt_rounds": 4,
        "database_url": memory_db_url("api"),
        "log_dir": "",
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


def auth_headers(token: str) -> dict[str, str]:
    return {"auth-token": token}


def register(
    client: TestClient,
    name: str = "Alice",
    email: str = "alice@example.com",
    password: str = TEST_PASSWORD,
) -> str:
    """Create an account through the API and return its token."""
    resp = client.post("/api/auth/createuser", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 200, f"Registration failed: {resp.status_code} {resp.text}"
    return resp.json()["data"]["records"]["token"]


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture()
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore(db_url=memory_db_url("users"))
    yield store
    store.close()


@pytest.fixture()
def note_store() -> Generator[NoteStore, None, None]:
    store = NoteStore(db_url=memory_db_url("notes"))
    yield store
    store.close()


# ---------------------------------------------------------------------------
# App fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """Yield a TestClient whose lifespan has wired every service.

    Entering the context manager runs the real lifespan, so requests hit
    the same hasher/token/store/service wiring production uses.
    """
    app = create_app(settings)
    with TestClient(app, raise_server_exceptions=True) as test_client:
        yield test_client
