"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores build these;
the service and token issuer only read them.

Secret material (password hashes, app signing secrets) is excluded from
repr() so an accidental log of a User or App never leaks it.

Layer rule: no imports from storage/, core/, or main.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class User:
    """A registered identity.

    email is the unique login name and doubles as the subject identity
    placed in issued tokens. pass_hash is raw bcrypt output.
    """

    id: int
    email: str
    pass_hash: bytes = field(repr=False)


@dataclass(frozen=True)
class App:
    """A tenant application. Tokens issued for it are signed with its secret."""

    id: int
    name: str
    secret: str = field(repr=False)
