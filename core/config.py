"""
core/config.py -- Centralized configuration via pydantic-settings.

All environment variable reads happen here. No module should call
os.getenv() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file. Field names map to env var names
      (e.g. token_ttl_seconds -> TOKEN_TTL_SECONDS), with type coercion and
      validation built in.

  @field_validator: rejects values that would only fail later at request
      time (a zero TTL, a bcrypt cost bcrypt refuses, an unknown log level).

Layer rule: core/ is the kernel. This module may not import from auth/,
storage/, or main.py.
"""

import logging
from datetime import timedelta
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    """Settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    database_url: str = "sqlite+aiosqlite:///sso.db"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Fixed lifetime of every issued token. There is no per-request override.
    token_ttl_seconds: int = 3600
    # bcrypt log2 cost. 10 is the library default security level.
    password_hash_rounds: int = 10

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("token_ttl_seconds")
    @classmethod
    def validate_token_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("TOKEN_TTL_SECONDS must be positive.")
        return v

    @field_validator("password_hash_rounds")
    @classmethod
    def validate_hash_rounds(cls, v: int) -> int:
        if not 4 <= v <= 31:
            raise ValueError("PASSWORD_HASH_ROUNDS must be between 4 and 31.")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}.")
        return level

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(seconds=self.token_ttl_seconds)

    @property
    def effective_log_level(self) -> str:
        """DEBUG=true forces DEBUG logging regardless of LOG_LEVEL."""
        return "DEBUG" if self.debug else self.log_level


@lru_cache
def get_settings() -> Settings:
    """Return the Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    settings = Settings()
    logging.getLogger("sso.config").debug(
        "settings loaded (token_ttl_seconds=%d)",
        settings.token_ttl_seconds,
    )
    return settings
