"""
auth/interfaces.py -- Data-access capabilities consumed by AuthService.

Three roles, each a Protocol so any adapter (SQL, in-memory fake, remote
client) can be plugged in without subclassing. The service only ever calls
the methods below and never inspects the concrete type.

Contract for implementers: signal the expected conditions with the sentinel
exceptions from storage.errors. Everything else may propagate as-is; the
service classifies it as internal.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from auth.models import App, User


@runtime_checkable
class UserSaver(Protocol):
    async def save_user(self, email: str, pass_hash: bytes) -> int:
        """Persist a new user and return its id.

        Raises UserExistsError if the email is already registered.
        """
        ...


@runtime_checkable
class UserProvider(Protocol):
    async def user(self, email: str) -> User:
        """Return the user registered under email.

        Raises UserNotFoundError if there is none.
        """
        ...

    async def is_admin(self, user_id: int) -> bool:
        """Return the stored admin flag for user_id.

        Raises UserNotFoundError if there is no such user.
        """
        ...


@runtime_checkable
class AppProvider(Protocol):
    async def app(self, app_id: int) -> App:
        """Return the tenant application with app_id.

        Raises AppNotFoundError if there is none.
        """
        ...
