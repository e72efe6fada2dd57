"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for NoteKeeper happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  Explicit injection: the Settings object is handed to create_app(), which
      builds the token service, password hasher and stores from it during
      lifespan startup. Components never reach back into get_settings().

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment. Dev mode (DEBUG=true) generates a signing
      key with a warning; production mode refuses to start without one.

Security notes:
  SECRET_KEY shorter than 32 chars is rejected outright. HS256 token signing
  relies on key entropy -- a short key weakens every issued token.

  JWT_SECRET and JWT_EXPIRY are accepted as aliases so existing deployments
  keep their environment files.

Layer rule: core/ is the kernel. This module may not import from api/,
auth/ or notes/.
"""

import logging
import re
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("notekeeper.config")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parents[1] / 'notekeeper.db'}"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: int | str) -> int:
    """Convert 90, "90", "90s", "5m", "1h" or "1d" into whole seconds.

    Raises ValueError for anything else, including zero or negative values.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, int):
        seconds = value
    else:
        match = _DURATION_RE.match(str(value).lower())
        if match is None:
            raise ValueError(f"Invalid duration: {value!r}")
        seconds = int(match.group(1)) * _DURATION_UNITS[match.group(2)]
    if seconds <= 0:
        raise ValueError("Duration must be a positive number of seconds.")
    return seconds


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file. The model_validator enforces
    production-safety rules at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    app_name: str = "NoteKeeper API"
    debug: bool = False
    environment: str = "development"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured". The model_validator
    # below either generates a dev key or raises, so callers never see "".
    secret_key: str = Field(default="", validation_alias=AliasChoices("SECRET_KEY", "JWT_SECRET", "secret_key"))
    token_expire_seconds: int = Field(
        default=60,
        validation_alias=AliasChoices("TOKEN_EXPIRE_SECONDS", "JWT_EXPIRY", "token_expire_seconds"),
    )
    token_header: str = "auth-token"
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    # False keeps the historical 401 for non-owners; True answers 403.
    ownership_forbidden: bool = False

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    database_url: str = _DEFAULT_DB_URL

    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------

    host: str = "0.0.0.0"  # noqa: S104 # nosec B104 -- container default
    port: int = 5000
    cors_origins: list[str] = ["*"]
    allowed_hosts: list[str] = ["*"]

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    log_level: str = "INFO"
    log_dir: str = "logs"

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("token_expire_seconds", mode="before")
    @classmethod
    def parse_token_expiry(cls, value: int | str) -> int:
        return parse_duration(value)

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, value: str) -> str:
        return value.strip().lower()

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Enforce the SECRET_KEY policy.

        Dev mode (DEBUG=true): auto-generate a random key with a warning.
            Tokens will not survive a restart -- acceptable for local dev.

        Production mode (DEBUG=false or not set): refuse to start if
            SECRET_KEY is missing.

        Both modes: reject keys shorter than 32 characters.
        """
        if not self.secret_key:
            if self.debug:
                self.secret_key = secrets.token_hex(32)
                logger.warning("Using auto-generated SECRET_KEY. Tokens will not survive a restart.")
            else:
                raise ValueError(
                    "SECRET_KEY is required in production mode. "
                    "Set SECRET_KEY (or JWT_SECRET) in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables, or build Settings(...)
    directly and pass it to create_app().
    """
    return Settings()
