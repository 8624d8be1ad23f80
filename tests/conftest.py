"""
tests/conftest.py -- Shared test fixtures for Taskboard integration tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for users + tasks
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - stores: (user_store, task_store) for the current test
  - client: TestClient over the real app, backed by `stores`
  - make_user: factory that creates an account and returns (user, token)
  - sign_in: puts a session token into the client's cookie jar

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. Each test gets a uuid-suffixed name so no state leaks between tests.

Environment variables must be set before any core/auth import:
  DEBUG=true           -- get_settings() auto-generates SECRET_KEY
  ENVIRONMENT=test     -- local cookie policy (SameSite=strict, not Secure)
  BCRYPT_ROUNDS=4      -- cheapest cost bcrypt accepts; keeps the suite fast
  RATE_LIMIT_ENABLED   -- off, or the auth limit trips mid-suite
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import User
from auth.store import UserStore
from auth.tokens import encode_token, hash_password
from tasks.store import TaskStore

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, TaskStore]:
    """Create isolated named shared-memory SQLite stores.

    Users and tasks share one database, as they do in production.
    """
    url = f"sqlite:///file:taskboard_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(db_url=url), TaskStore(db_url=url)


def _patch_lifespan(user_store: UserStore, task_store: TaskStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.task_store = task_store
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def stores() -> Generator[tuple[UserStore, TaskStore], None, None]:
    user_store, task_store = _make_test_stores(uuid.uuid4().hex)
    yield user_store, task_store
    user_store.close()
    task_store.close()


@pytest.fixture
def client(stores: tuple[UserStore, TaskStore]) -> Generator[TestClient, None, None]:
    """TestClient over the real app with a patched lifespan.

    Tests hit real middleware, dependencies and route handlers but use the
    isolated stores from the `stores` fixture.
    """
    app.router.lifespan_context = _patch_lifespan(*stores)
    with TestClient(app, raise_server_exceptions=True) as test_client:
        yield test_client


@pytest.fixture
def make_user(stores: tuple[UserStore, TaskStore]) -> Callable[..., tuple[User, str]]:
    """Return a factory: make_user(name, email, password) -> (user, token)."""
    user_store, _ = stores

    def _make(name: str = "Ada", email: str = "ada@x.com", password: str = "secret1") -> tuple[User, str]:
        user_id = user_store.create_user(User(name=name, email=email, hashed_password=hash_password(password)))
        user = user_store.get_by_id(user_id)
        return user, encode_token(user_id)

    return _make


@pytest.fixture
def sign_in(client: TestClient) -> Callable[[str], None]:
    """Return sign_in(token): replace the client's session cookie with token."""

    def _sign_in(token: str) -> None:
        client.cookies.clear()
        client.cookies.set("jwt", token)

    return _sign_in
