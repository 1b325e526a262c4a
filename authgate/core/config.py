"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from authgate.adapters.rate_limit.base import RateLimitConfig
from authgate.services.password_hasher import DUMMY_PASSWORD_HASH


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment."""

    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


def _build_auth_settings() -> "AuthSettings":
    return AuthSettings()  # type: ignore[call-arg]


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    name: str = Field(
        "authgate",
        description="Service name reported in OpenAPI metadata",
    )
    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field(
        "json",
        description="Log format: 'json' for structured logs, 'plain' for humans",
    )
    output: str = Field("stdout", description="Log destination: 'stdout' or 'file'")
    file_path: str | None = Field(
        None,
        description="Log file path when output=file (defaults to logs/app.log)",
    )
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Rotated log files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class AuthSettings(BaseSettings):
    """Credential hashing and login throttling configuration."""

    bcrypt_rounds: int = Field(
        12,
        description="bcrypt cost factor used for new password hashes",
        ge=4,
        le=31,
    )
    dummy_password_hash: str = Field(
        DUMMY_PASSWORD_HASH,
        description=(
            "Pre-computed bcrypt hash verified when an account does not exist. "
            "Must use the same cost factor as bcrypt_rounds."
        ),
    )
    rate_limit_max_attempts: int = Field(
        5,
        description="Failed logins per origin before it is blocked",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        15 * 60,
        description="Sliding window in which failed logins accumulate",
        ge=1,
    )
    rate_limit_block_seconds: int = Field(
        30 * 60,
        description="How long an origin is refused after reaching the limit",
        ge=1,
    )
    rate_limit_cleanup_enabled: bool = Field(
        True,
        description="Run the periodic eviction of idle rate limit entries",
    )
    rate_limit_cleanup_interval_seconds: float = Field(
        10 * 60,
        description="Interval between eviction passes",
        gt=0,
    )
    trust_forwarded_for: bool = Field(
        False,
        description="Use the first X-Forwarded-For hop as the client origin (only behind a trusted proxy)",
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        case_sensitive=False,
    )

    def rate_limit_config(self) -> RateLimitConfig:
        """Build the limiter policy from the configured values."""

        return RateLimitConfig(
            max_attempts=self.rate_limit_max_attempts,
            window_seconds=self.rate_limit_window_seconds,
            block_duration_seconds=self.rate_limit_block_seconds,
        )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are invalid.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)
    auth: AuthSettings = Field(default_factory=_build_auth_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
