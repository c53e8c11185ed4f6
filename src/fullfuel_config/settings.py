"""Full Fuel settings, read from the environment and an optional .env file.

The .env file is the first that exists of:

- the path in ``FULLFUEL_ENV_FILE`` (relative paths start at the project root)
- ``config/.env.dev``
- ``config/.env``

Variables set in the process environment always win over the file.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE_VARIABLE = "FULLFUEL_ENV_FILE"


def _project_root() -> Path:
    """Nearest ancestor holding a ``config`` directory or a git checkout."""
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents):
        if (candidate / "config").is_dir() or (candidate / ".git").is_dir():
            return candidate
    return here.parents[1]


def get_config_dir() -> Path:
    return _project_root() / "config"


def _env_file() -> Path | None:
    explicit = os.environ.get(ENV_FILE_VARIABLE)
    candidates: list[Path] = []
    if explicit:
        path = Path(explicit)
        candidates.append(path if path.is_absolute() else _project_root() / path)
    candidates += [get_config_dir() / ".env.dev", get_config_dir() / ".env"]

    return next((path for path in candidates if path.exists()), None)


class Settings(BaseSettings):
    """Flat settings object shared by the API, the CLI and the services."""

    model_config = SettingsConfigDict(
        env_file=_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (MUST be set - app fails without these)
    jwt_secret_key: SecretStr  # Secret for signing session tokens
    google_client_id: str  # OAuth client id Google ID tokens are issued for

    # Application
    app_name: str = "Full Fuel TV"
    debug: bool = False

    # Database (POSTGRES_ prefix)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_password: SecretStr | None = None
    postgres_db: str = "fullfuel"
    database_url_override: str | None = None  # e.g. sqlite+aiosqlite:///data/fullfuel.db
    store_timeout_seconds: float = 10.0

    # API (API_ prefix)
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    api_debug: bool = False
    api_cors_origins: str = ""  # Empty = no CORS allowed (secure default)

    @field_validator("api_cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> str:
        """Accept a list or a comma-separated string."""
        if isinstance(v, list):
            return ",".join(v)
        return str(v) if v else ""

    # JWT
    jwt_token_expire_days: int = 7

    # Passwords
    password_bcrypt_rounds: int = 10

    # Google sign-in (GOOGLE_ prefix)
    google_jwks_url: str = "https://www.googleapis.com/oauth2/v3/certs"
    google_jwks_cache_seconds: int = 3600
    google_jwks_refresh_seconds: int = 60  # Minimum gap between unknown-key refetches
    google_verify_timeout_seconds: float = 5.0
    # Decode the payload without a signature check when verification fails
    google_allow_unverified_fallback: bool = True

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @field_validator("google_client_id")
    @classmethod
    def _validate_google_client_id(cls, v: str) -> str:
        if not v.strip():
            msg = "GOOGLE_CLIENT_ID cannot be empty"
            raise ValueError(msg)
        return v.strip()

    # Computed properties
    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Override URL if set, otherwise asyncpg URL from the POSTGRES_ values."""
        if self.database_url_override:
            return self.database_url_override
        password = (
            self.postgres_password.get_secret_value() if self.postgres_password else ""
        )
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        origins = self.api_cors_origins.split(",")
        return [origin.strip() for origin in origins if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    Required fields (jwt_secret_key, google_client_id) must be provided
    via environment variables or .env file.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
