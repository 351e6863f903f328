"""
auth/passwords.py -- Credential hashing (bcrypt).

Every password hash in the system is produced and checked here; nothing
else calls bcrypt or compares hashes.

  hash_password():   salted, non-deterministic (gensalt() per call). The
                     work factor is the bcrypt log2 cost; raise it as
                     hardware gets faster. DEFAULT_ROUNDS matches the cost
                     the rest of the SSO system has always used.

  verify_password(): bcrypt.checkpw does the constant-time comparison.
                     Any failure -- wrong password, empty or malformed hash,
                     wrong type, password over 72 bytes -- returns False.
                     Callers must not be able to tell a corrupt hash from
                     a wrong password.

Layer rule: no imports from storage/, core/, or main.py.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10
MIN_ROUNDS = 4
MAX_ROUNDS = 31
# bcrypt ignores (4.x) or rejects (5.x) input past this length.
MAX_PASSWORD_BYTES = 72


def _to_bytes(password: str | bytes) -> bytes:
    return password.encode("utf-8") if isinstance(password, str) else password


def hash_password(password: str | bytes, rounds: int = DEFAULT_ROUNDS) -> bytes:
    """Return a salted bcrypt hash of the given password.

    Raises ValueError if rounds is outside bcrypt's accepted cost range, or
    if the UTF-8 encoded password is longer than MAX_PASSWORD_BYTES. Long
    passwords are rejected, never truncated.
    """
    if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
        raise ValueError(f"bcrypt rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}, got {rounds}")
    raw = _to_bytes(password)
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=rounds))


def verify_password(pass_hash: bytes, password: str | bytes) -> bool:
    """Return True only if password matches pass_hash."""
    if not pass_hash:
        return False
    try:
        raw = _to_bytes(password)
        if len(raw) > MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(raw, pass_hash)
    except (ValueError, TypeError):
        return False
