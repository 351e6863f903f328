#!/usr/bin/env python3
"""
SSO auth -- operator CLI around the authentication service.

Usage:
  python main.py init-db
  python main.py register alice@example.com
  python main.py login alice@example.com --app-id 1
  python main.py is-admin 42

Passwords are prompted for with getpass, or read from the first line of
stdin with --password-stdin. They are never accepted as arguments.

Environment variables (see core/config.py):
  DATABASE_URL          Async SQLAlchemy URL. Default: sqlite+aiosqlite:///sso.db
  TOKEN_TTL_SECONDS     Lifetime of issued tokens. Default: 3600
  PASSWORD_HASH_ROUNDS  bcrypt cost for new passwords. Default: 10
  LOG_LEVEL / DEBUG     Logging verbosity.
"""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from auth.errors import AuthError, ErrorKind
from auth.service import AuthService
from core.config import Settings, get_settings
from core.log import configure_logging
from storage.errors import StorageError
from storage.sqlite import SQLStorage

logger = logging.getLogger("sso.cli")

_ERROR_MESSAGES = {
    ErrorKind.INVALID_CREDENTIALS: "Invalid email or password.",
    ErrorKind.INVALID_REQUEST: "Invalid request.",
    ErrorKind.APP_NOT_FOUND: "Application not found.",
    ErrorKind.USER_EXISTS: "User already exists.",
    ErrorKind.INTERNAL: "Internal error. See logs for details.",
}


def build_service(settings: Settings, storage: SQLStorage) -> AuthService:
    """Wire an AuthService to storage using the configured TTL and bcrypt cost."""
    return AuthService(
        log=logging.getLogger("sso.auth"),
        user_saver=storage,
        user_provider=storage,
        app_provider=storage,
        token_ttl=settings.token_ttl,
        hash_rounds=settings.password_hash_rounds,
    )


def _read_password(from_stdin: bool) -> str:
    if from_stdin:
        return sys.stdin.readline().rstrip("\n")
    return getpass.getpass("Password: ")


async def _dispatch(args: argparse.Namespace, service: AuthService) -> None:
    if args.command == "register":
        user_id = await service.register_new_user(args.email, _read_password(args.password_stdin))
        print(f"  Registered user {user_id}.")
    elif args.command == "login":
        token = await service.login(args.email, _read_password(args.password_stdin), args.app_id)
        print(token)
    elif args.command == "is-admin":
        print("yes" if await service.is_admin(args.user_id) else "no")


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    """Run one command. Returns the process exit code.

    Storage that cannot be opened (bad DATABASE_URL, unwritable file) is
    reported like any other internal error. Only the exception type is
    logged; driver messages can echo bound parameters.
    """
    try:
        async with SQLStorage(settings.database_url) as storage:
            if args.command == "init-db":
                print("  Schema ready.")
                return 0
            await _dispatch(args, build_service(settings, storage))
    except AuthError as exc:
        logger.debug("%s failed: %r", args.command, exc)
        print(f"  [!] {_ERROR_MESSAGES[exc.kind]}", file=sys.stderr)
        return 1
    except (StorageError, SQLAlchemyError) as exc:
        logger.error("%s failed: storage unavailable (%s)", args.command, type(exc).__name__)
        print(f"  [!] {_ERROR_MESSAGES[ErrorKind.INTERNAL]}", file=sys.stderr)
        return 1
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SSO authentication service -- operator CLI.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the users and apps tables if missing")

    register = sub.add_parser("register", help="Register a new user")
    register.add_argument("email")
    register.add_argument("--password-stdin", action="store_true", help="Read the password from stdin")

    login = sub.add_parser("login", help="Log in and print a signed access token")
    login.add_argument("email")
    login.add_argument("--app-id", type=int, required=True, help="Tenant application the token is issued for")
    login.add_argument("--password-stdin", action="store_true", help="Read the password from stdin")

    is_admin = sub.add_parser("is-admin", help="Print whether a user holds the admin flag")
    is_admin.add_argument("user_id", type=int)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.effective_log_level)
    return asyncio.run(_run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
