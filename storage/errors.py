"""
storage/errors.py -- Sentinel exceptions of the data-access contract.

Adapters raise these so the auth service can tell "not found" and
"already exists" apart from genuine failures. Anything else an adapter
cannot handle should be raised as (or wrapped in) StorageError.
"""

from __future__ import annotations


class StorageError(Exception):
    """Base class for every failure reported by a storage adapter."""


class UserExistsError(StorageError):
    """A user with the same email is already stored."""


class UserNotFoundError(StorageError):
    """No user matches the lookup key."""


class AppNotFoundError(StorageError):
    """No tenant application matches the requested id."""
