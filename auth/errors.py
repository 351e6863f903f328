"""
auth/errors.py -- Failure classification for the auth service.

Every failure leaving AuthService is an AuthError whose kind is one member
of the closed ErrorKind enum. Callers branch on err.kind, never on the
message text. The underlying exception (if any) is chained as __cause__ so
the full call chain stays diagnosable.

Known inconsistency [NF1]: a missing user surfaces as INVALID_REQUEST
(message "invalid app id") in login and is_admin. This mirrors the
behaviour transport layers already depend on; a dedicated user-not-found
kind needs sign-off before it is introduced.
"""

from __future__ import annotations

import enum


class ErrorKind(enum.Enum):
    INVALID_CREDENTIALS = "invalid credentials"
    INVALID_REQUEST = "invalid app id"  # [NF1]
    APP_NOT_FOUND = "app not found"
    USER_EXISTS = "user already exists"
    INTERNAL = "internal error"


class AuthError(Exception):
    """A classified auth failure.

    Args:
        kind: The classification callers switch on.
        op:   Name of the originating operation, e.g. "auth.login".
    """

    def __init__(self, kind: ErrorKind, op: str) -> None:
        self.kind = kind
        self.op = op
        super().__init__(f"{op}: {kind.value}")

    def __str__(self) -> str:
        msg = f"{self.op}: {self.kind.value}"
        if self.kind is ErrorKind.INTERNAL and self.__cause__ is not None:
            msg = f"{msg}: {self.__cause__}"
        return msg

    def __repr__(self) -> str:
        return f"AuthError(kind={self.kind.name}, op={self.op!r})"
