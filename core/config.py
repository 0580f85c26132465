"""
Application configuration using Pydantic settings.

Usage:
    from core.config import get_settings
    settings = get_settings()

For enums and display constants, import from core.constants:
    from core.constants import IssueStatus, STATUS_DISPLAY_ORDER
"""

import os
import warnings
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Weak placeholder values rejected for JWT_SECRET_KEY in production
FORBIDDEN_JWT_SECRETS = [
    "CHANGE_ME", "changeme", "secret", "your-secret-key",
    "jwt-secret", "supersecret", "development", "test",
]


class Settings(BaseSettings):
    """
    Unified application settings loaded from environment variables and .env file.

    Server settings drive the REST API; the client settings (API_BASE_URL,
    TOKEN_FILE, REQUEST_TIMEOUT) are read by the command-line client.

    Required for production:
        - JWT_SECRET_KEY (min 32 chars)
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App settings
    app_name: str = Field(default="Issue Tracker", validation_alias="APP_NAME")
    api_prefix: str = Field(default="/api", validation_alias="API_PREFIX")
    debug: bool = Field(default=False, validation_alias="DEBUG")
    env: str = Field(default="development", validation_alias="ENV")
    max_request_size_mb: int = Field(default=10, validation_alias="MAX_REQUEST_SIZE_MB")

    # Database
    database_url: str = Field(default="sqlite:///issue_tracker.db", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")

    # JWT / Authentication
    jwt_secret_key: str = Field(default="CHANGE_ME", validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60 * 24, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, validation_alias="BCRYPT_ROUNDS")

    # CORS
    cors_allowed_origins: str = Field(default="http://localhost:5173", validation_alias="CORS_ALLOWED_ORIGINS")

    # Client
    api_base_url: str = Field(default="http://localhost:8000/api", validation_alias="API_BASE_URL")
    token_file: Path = Field(
        default=Path.home() / ".issue_tracker" / "token",
        validation_alias="TOKEN_FILE",
    )
    request_timeout: float = Field(default=30.0, validation_alias="REQUEST_TIMEOUT")

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Validate JWT secret - warns in dev, errors in production."""
        env = os.getenv("ENV", "development")
        is_production = env.lower() in ("production", "prod")

        is_forbidden = v.lower() in [fv.lower() for fv in FORBIDDEN_JWT_SECRETS]
        is_too_short = len(v) < 32

        if is_production:
            if is_forbidden:
                raise ValueError(
                    f"JWT_SECRET_KEY cannot be a default value ('{v}') in production. "
                    "Generate a secure key with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
                )
            if is_too_short:
                raise ValueError(
                    f"JWT_SECRET_KEY must be at least 32 characters in production (got {len(v)})."
                )
        elif is_forbidden:
            warnings.warn(
                f"JWT_SECRET_KEY is set to a default value ('{v}'). "
                "This is insecure - set a proper key for production.",
                UserWarning,
                stacklevel=2,
            )
        elif is_too_short:
            warnings.warn(
                f"JWT_SECRET_KEY should be at least 32 characters (got {len(v)})",
                UserWarning,
                stacklevel=2,
            )

        return v

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("production", "prod")

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    def validate_production_config(self) -> tuple[List[str], List[str]]:
        """
        Validate configuration for production deployment.

        Returns:
            Tuple of (errors, warnings) - errors are fatal, warnings are advisory
        """
        errors = []
        warnings_list = []

        if self.jwt_secret_key == "CHANGE_ME":
            errors.append("JWT_SECRET_KEY must be set for production")
        elif len(self.jwt_secret_key) < 32:
            errors.append("JWT_SECRET_KEY must be at least 32 characters")

        if self.database_url.startswith("sqlite"):
            warnings_list.append("DATABASE_URL points at SQLite - consider PostgreSQL for production")

        if self.bcrypt_rounds < 10:
            warnings_list.append(f"BCRYPT_ROUNDS={self.bcrypt_rounds} is weak for production")

        return errors, warnings_list


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
