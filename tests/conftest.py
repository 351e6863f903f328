"""
tests/conftest.py -- Shared fixtures for the SSO auth test suite.

This module provides:
  - FakeStore: in-memory implementation of all three data-access roles
  - store / service: AuthService wired to a FakeStore (unit tests)
  - sql_storage: SQLStorage on a shared in-memory aiosqlite DB (adapter and
    end-to-end tests)

bcrypt runs at the minimum cost (4) everywhere in tests. Production cost is
exercised only through the settings defaults, never by hashing.

Design: the in-memory SQLite URL needs StaticPool so every connection the
async engine hands out sees the same database. Without it each connection
would open a blank schema.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from auth.models import App, User
from auth.service import AuthService
from storage.errors import AppNotFoundError, UserExistsError, UserNotFoundError
from storage.sqlite import SQLStorage, apps

TEST_ROUNDS = 4
TEST_TTL = timedelta(hours=1)
APP_ID = 1
APP_SECRET = "test-app-secret-0123456789abcdef"


class FakeStore:
    """Dict-backed UserSaver + UserProvider + AppProvider."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.admins: set[int] = set()
        self.apps: dict[int, App] = {}
        self._next_id = 1

    async def save_user(self, email: str, pass_hash: bytes) -> int:
        if email in self.users:
            raise UserExistsError("storage.save_user: user already exists")
        user = User(id=self._next_id, email=email, pass_hash=pass_hash)
        self._next_id += 1
        self.users[email] = user
        return user.id

    async def user(self, email: str) -> User:
        try:
            return self.users[email]
        except KeyError:
            raise UserNotFoundError("storage.user: user not found") from None

    async def is_admin(self, user_id: int) -> bool:
        if not any(u.id == user_id for u in self.users.values()):
            raise UserNotFoundError("storage.is_admin: user not found")
        return user_id in self.admins

    async def app(self, app_id: int) -> App:
        try:
            return self.apps[app_id]
        except KeyError:
            raise AppNotFoundError("storage.app: app not found") from None


@pytest.fixture
def app() -> App:
    return App(id=APP_ID, name="test-app", secret=APP_SECRET)


@pytest.fixture
def store(app: App) -> FakeStore:
    s = FakeStore()
    s.apps[app.id] = app
    return s


@pytest.fixture
def service(store: FakeStore) -> AuthService:
    return AuthService(
        log=logging.getLogger("sso.auth"),
        user_saver=store,
        user_provider=store,
        app_provider=store,
        token_ttl=TEST_TTL,
        hash_rounds=TEST_ROUNDS,
    )


@pytest_asyncio.fixture
async def sql_storage(app: App) -> AsyncGenerator[SQLStorage, None]:
    """In-memory SQLStorage with the schema created and one app seeded."""
    storage = SQLStorage("sqlite+aiosqlite://", poolclass=StaticPool)
    await storage.init()
    async with storage.engine.begin() as conn:
        await conn.execute(apps.insert().values(id=app.id, name=app.name, secret=app.secret))
    yield storage
    await storage.close()
