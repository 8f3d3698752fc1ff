"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for CredGate happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. secret_key -> SECRET_KEY). Type coercion and validation are built in.

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment. Used to apply the development fallback
      for SECRET_KEY when the operator did not provide one.

Security notes:
  [M6] An operator-supplied SECRET_KEY shorter than 32 chars is rejected
       outright. HS256 signing relies on key entropy -- a short key weakens it.

  [M7] A missing SECRET_KEY falls back to DEV_SECRET_KEY and logs a WARNING.
       DEV_SECRET_KEY is public (it is in this file), so anyone can forge
       tokens for a server running with it. Never run production without
       SECRET_KEY set.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("credgate.config")

# UNSAFE for production: this value ships with the source code.
DEV_SECRET_KEY = "credgate-insecure-development-signing-secret"

_HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

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

    # DEBUG lowers the root log level to DEBUG (see api/main.py).
    debug: bool = False
    # Empty string is the sentinel for "not configured". The model_validator
    # below swaps in DEV_SECRET_KEY, so callers never see "".
    secret_key: str = ""

    # ------------------------------------------------------------------
    # Tokens and password hashing
    # ------------------------------------------------------------------

    token_expire_seconds: int = Field(default=3600, gt=0)
    token_algorithm: str = "HS256"
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # ------------------------------------------------------------------
    # Rate limiting
    # ------------------------------------------------------------------

    rate_limit_enabled: bool = True
    login_rate_limit: str = "10/minute"
    register_rate_limit: str = "5/minute"

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: list[str] = ["http://localhost", "http://localhost:3000", "http://127.0.0.1"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Apply the SECRET_KEY policy [M6][M7].

        Missing key: fall back to DEV_SECRET_KEY with a warning. Tokens stay
            valid across restarts but can be forged by anyone who has read
            the source.

        Supplied key: reject keys shorter than 32 characters.
        """
        if not self.secret_key:
            self.secret_key = DEV_SECRET_KEY
            logger.warning(
                "WARNING: SECRET_KEY is not set; using the built-in development secret. "
                "This is UNSAFE for production -- set SECRET_KEY in your environment or .env file."
            )
        elif len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        if self.token_algorithm not in _HMAC_ALGORITHMS:
            raise ValueError(f"TOKEN_ALGORITHM must be one of {', '.join(_HMAC_ALGORITHMS)}.")
        return self

    @property
    def log_level(self) -> int:
        return logging.DEBUG if self.debug else logging.INFO

    @property
    def using_dev_secret(self) -> bool:
        return self.secret_key == DEV_SECRET_KEY


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    Uses lru_cache so Settings() is instantiated exactly once -- at first call.
    All modules should call get_settings() rather than constructing Settings() directly.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
