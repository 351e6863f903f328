"""
auth/service.py -- Authentication service: login, registration, admin check.

AuthService is the orchestration core of the SSO system. It owns no
storage and no transport; collaborators are injected at construction:

  user_saver     -- UserSaver    (persist new users)
  user_provider  -- UserProvider (find user by email, read admin flag)
  app_provider   -- AppProvider  (find tenant application by id)

Error policy: every failure leaves as AuthError with a kind from ErrorKind
and the original exception chained. Storage sentinels are mapped to their
kinds; anything unexpected becomes INTERNAL. No retries happen here.

Cancellation: all operations are coroutines and await the collaborators
directly, so cancelling the caller's task (or an asyncio.timeout around
the call) aborts the pending lookup. CancelledError is a BaseException
and is never caught by the classification below.

bcrypt runs in a worker thread (asyncio.to_thread) so hashing does not
stall the event loop.

Timing: an unknown email returns before bcrypt runs, so response time can
reveal whether an account exists [TE1]. Closing it means running bcrypt
against a dummy hash on the not-found path.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from auth.errors import AuthError, ErrorKind
from auth.interfaces import AppProvider, UserProvider, UserSaver
from auth.passwords import DEFAULT_ROUNDS, MAX_ROUNDS, MIN_ROUNDS, hash_password, verify_password
from auth.tokens import TokenSigningError, new_token
from core.log import op_logger
from storage.errors import UserExistsError, UserNotFoundError


class AuthService:
    """Stateless auth orchestration. Safe to share across concurrent tasks."""

    def __init__(
        self,
        log: logging.Logger,
        user_saver: UserSaver,
        user_provider: UserProvider,
        app_provider: AppProvider,
        token_ttl: timedelta,
        hash_rounds: int = DEFAULT_ROUNDS,
    ) -> None:
        if token_ttl <= timedelta(0):
            raise ValueError("token_ttl must be positive")
        if not MIN_ROUNDS <= hash_rounds <= MAX_ROUNDS:
            raise ValueError(f"hash_rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}")
        self._log = log
        self._user_saver = user_saver
        self._user_provider = user_provider
        self._app_provider = app_provider
        self._token_ttl = token_ttl
        self._hash_rounds = hash_rounds

    @property
    def token_ttl(self) -> timedelta:
        return self._token_ttl

    async def login(self, email: str, password: str | bytes, app_id: int) -> str:
        """Check credentials and return a token signed for app_id.

        Raises AuthError:
          INVALID_REQUEST      -- no user with this email [NF1]
          INVALID_CREDENTIALS  -- wrong password (or unusable stored hash)
          APP_NOT_FOUND        -- app lookup failed for any reason
          INTERNAL             -- user lookup or token signing failed
        """
        op = "auth.login"
        log = op_logger(self._log, op, email=email, app_id=app_id)

        try:
            user = await self._user_provider.user(email)
        except UserNotFoundError as exc:
            log.warning("user not found: %s", exc)
            raise AuthError(ErrorKind.INVALID_REQUEST, op) from exc
        except Exception as exc:
            log.error("failed to get user: %s", exc)
            raise AuthError(ErrorKind.INTERNAL, op) from exc

        if not await asyncio.to_thread(verify_password, user.pass_hash, password):
            log.info("invalid credentials")
            raise AuthError(ErrorKind.INVALID_CREDENTIALS, op)

        try:
            app = await self._app_provider.app(app_id)
        except Exception as exc:
            log.error("failed to get app: %s", exc)
            raise AuthError(ErrorKind.APP_NOT_FOUND, op) from exc

        try:
            token = new_token(user, app, self._token_ttl)
        except TokenSigningError as exc:
            log.error("failed to create token: %s", exc)
            raise AuthError(ErrorKind.INTERNAL, op) from exc

        log.info("user logged in")
        return token

    async def register_new_user(self, email: str, password: str | bytes) -> int:
        """Hash the password, store the user and return the new user id.

        Raises AuthError USER_EXISTS for a duplicate email (the stored user
        is left untouched) and INTERNAL for any other failure.
        """
        op = "auth.register_new_user"
        log = op_logger(self._log, op, email=email)

        log.info("registering new user")

        try:
            pass_hash = await asyncio.to_thread(hash_password, password, self._hash_rounds)
        except (ValueError, TypeError) as exc:
            log.error("failed to generate password hash: %s", type(exc).__name__)
            raise AuthError(ErrorKind.INTERNAL, op) from exc

        try:
            user_id = await self._user_saver.save_user(email, pass_hash)
        except UserExistsError as exc:
            log.warning("user already exists: %s", exc)
            raise AuthError(ErrorKind.USER_EXISTS, op) from exc
        except Exception as exc:
            log.error("failed to save user: %s", exc)
            raise AuthError(ErrorKind.INTERNAL, op) from exc

        log.info("user registered (user_id=%d)", user_id)
        return user_id

    async def is_admin(self, user_id: int) -> bool:
        """Return whether user_id holds the admin flag.

        Raises AuthError INVALID_REQUEST if the user does not exist [NF1],
        INTERNAL for any other lookup failure.
        """
        op = "auth.is_admin"
        log = op_logger(self._log, op, user_id=user_id)

        log.info("checking if user is admin")

        try:
            is_admin = await self._user_provider.is_admin(user_id)
        except UserNotFoundError as exc:
            log.warning("user not found: %s", exc)
            raise AuthError(ErrorKind.INVALID_REQUEST, op) from exc
        except Exception as exc:
            log.error("failed to check if user is admin: %s", exc)
            raise AuthError(ErrorKind.INTERNAL, op) from exc

        return bool(is_admin)
