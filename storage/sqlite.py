"""
storage/sqlite.py -- Async SQLAlchemy Core storage adapter.

Pattern: Repository + Data Mapper. SQLStorage implements all three
data-access roles the auth service consumes (UserSaver, UserProvider,
AppProvider); _row_to_user / _row_to_app are the mappers. Nothing outside
this module touches SQL.

Errors: expected conditions raise the sentinels from storage.errors.
Any other SQLAlchemyError is wrapped in StorageError carrying the
operation name; the driver exception is chained, never returned.

Security:
  All queries use bound parameters. No f-strings in SQL.
  pass_hash and secret are never logged. Driver messages echo bound
  parameters, so only the exception type name is surfaced upward.

DB URL: any async SQLAlchemy URL. Defaults to a local SQLite file through
aiosqlite.

Layer rule: may import auth.models and storage.errors only.
"""

from __future__ import annotations

import logging

from sqlalchemy import Boolean, Column, Integer, LargeBinary, MetaData, String, Table, Text, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from auth.models import App, User
from storage.errors import AppNotFoundError, StorageError, UserExistsError, UserNotFoundError

_DEFAULT_DB_URL = "sqlite+aiosqlite:///sso.db"

logger = logging.getLogger("sso.storage")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("pass_hash", LargeBinary, nullable=False),
    Column("is_admin", Boolean, nullable=False, default=False),
)

# Rows are provisioned outside this service; the auth core only reads them.
apps = Table(
    "apps",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False, unique=True),
    Column("secret", Text, nullable=False),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class SQLStorage:
    """Repository for users and tenant apps.

    Usage:
        async with SQLStorage("sqlite+aiosqlite:///sso.db") as storage:
            user_id = await storage.save_user("a@example.com", pass_hash)
            user = await storage.user("a@example.com")

    Extra keyword arguments are passed to create_async_engine (tests use
    poolclass=StaticPool for a shared in-memory database).
    """

    def __init__(self, db_url: str = _DEFAULT_DB_URL, **engine_kwargs) -> None:
        self.engine: AsyncEngine = create_async_engine(db_url, **engine_kwargs)

    async def init(self) -> None:
        """Create tables if they do not exist. Idempotent."""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    async def __aenter__(self) -> SQLStorage:
        await self.init()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # UserSaver
    # ------------------------------------------------------------------

    async def save_user(self, email: str, pass_hash: bytes) -> int:
        """Insert a new user and return its id.

        Raises UserExistsError if the email is already taken. The existing
        row is not modified.
        """
        op = "storage.save_user"
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(users.insert().values(email=email, pass_hash=pass_hash))
        except IntegrityError as exc:
            raise UserExistsError(f"{op}: user already exists") from exc
        except SQLAlchemyError as exc:
            logger.error("%s failed: %s", op, type(exc).__name__)
            raise StorageError(f"{op}: {type(exc).__name__}") from exc
        return result.inserted_primary_key[0]

    # ------------------------------------------------------------------
    # UserProvider
    # ------------------------------------------------------------------

    async def user(self, email: str) -> User:
        """Look up a user by exact email. Raises UserNotFoundError."""
        op = "storage.user"
        try:
            async with self.engine.connect() as conn:
                row = (await conn.execute(users.select().where(users.c.email == email))).fetchone()
        except SQLAlchemyError as exc:
            logger.error("%s failed: %s", op, type(exc).__name__)
            raise StorageError(f"{op}: {type(exc).__name__}") from exc
        if row is None:
            raise UserNotFoundError(f"{op}: user not found")
        return _row_to_user(row)

    async def is_admin(self, user_id: int) -> bool:
        """Return the admin flag for user_id. Raises UserNotFoundError."""
        op = "storage.is_admin"
        try:
            async with self.engine.connect() as conn:
                row = (await conn.execute(select(users.c.is_admin).where(users.c.id == user_id))).fetchone()
        except SQLAlchemyError as exc:
            logger.error("%s failed: %s", op, type(exc).__name__)
            raise StorageError(f"{op}: {type(exc).__name__}") from exc
        if row is None:
            raise UserNotFoundError(f"{op}: user not found")
        return bool(row.is_admin)

    # ------------------------------------------------------------------
    # AppProvider
    # ------------------------------------------------------------------

    async def app(self, app_id: int) -> App:
        """Look up a tenant app by id. Raises AppNotFoundError."""
        op = "storage.app"
        try:
            async with self.engine.connect() as conn:
                row = (await conn.execute(apps.select().where(apps.c.id == app_id))).fetchone()
        except SQLAlchemyError as exc:
            logger.error("%s failed: %s", op, type(exc).__name__)
            raise StorageError(f"{op}: {type(exc).__name__}") from exc
        if row is None:
            raise AppNotFoundError(f"{op}: app not found")
        return _row_to_app(row)


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(id=row.id, email=row.email, pass_hash=bytes(row.pass_hash))


def _row_to_app(row) -> App:
    return App(id=row.id, name=row.name, secret=row.secret)
