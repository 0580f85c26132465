"""
Startup checks for the JWT secret, CORS origins and database URL.

Errors abort startup; warnings are logged and the gateway keeps going.
"""

import re
from dataclasses import dataclass

from core.config import FORBIDDEN_JWT_SECRETS
from core.logging import get_logger

logger = get_logger("security.validation")

WEAK_DATABASE_PASSWORDS = ["password", "postgres", "admin", "root", ""]


class SecurityConfigError(Exception):
    """Raised when security configuration is invalid."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        message = "Security configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(message)


@dataclass
class ValidationResult:
    """Result of security validation."""

    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_jwt_secret(secret: str) -> tuple[bool, str | None]:
    """
    Reject empty, placeholder and short (under 32 characters) signing secrets.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not secret:
        return False, "JWT_SECRET_KEY is not set"

    if secret.lower() in [v.lower() for v in FORBIDDEN_JWT_SECRETS]:
        return False, f"JWT_SECRET_KEY cannot be a default value like '{secret}'"

    if len(secret) < 32:
        return False, f"JWT_SECRET_KEY must be at least 32 characters (got {len(secret)})"

    if not re.search(r"[A-Za-z]", secret) and not re.search(r"\d", secret):
        return False, "JWT_SECRET_KEY should contain a mix of letters and numbers"

    return True, None


def validate_cors_origins(origins: str, is_production: bool = False) -> tuple[bool, str | None, str | None]:
    """
    Validate CORS allowed origins.

    Returns:
        Tuple of (is_valid, error_message, warning_message)
    """
    if not origins:
        return False, "CORS_ALLOWED_ORIGINS is not set", None

    origin_list = [o.strip() for o in origins.split(",")]

    if "*" in origin_list:
        return True, None, "CORS allows all origins (*) - not recommended for production"

    localhost_patterns = ["localhost", "127.0.0.1", "0.0.0.0"]
    has_localhost = any(
        any(pattern in origin for pattern in localhost_patterns) for origin in origin_list
    )
    if has_localhost and is_production:
        return (
            True,
            None,
            "CORS includes localhost origins - verify this is intentional in production",
        )

    return True, None, None


def validate_database_url(url: str, is_production: bool = False) -> tuple[bool, str | None, str | None]:
    """
    Validate database URL security.

    Returns:
        Tuple of (is_valid, error_message, warning_message)
    """
    if not url:
        return False, "DATABASE_URL is not set", None

    if url.startswith("sqlite") and is_production:
        return True, None, "Using SQLite in production - consider PostgreSQL"

    if "@" in url and "://" in url:
        credentials = url.split("://")[1].split("@")[0]
        if ":" in credentials:
            _, password = credentials.split(":", 1)
            if password in WEAK_DATABASE_PASSWORDS:
                return True, None, "Database password appears to be weak or default"

    return True, None, None


def validate_security_config(
    jwt_secret: str,
    cors_origins: str | None = None,
    database_url: str | None = None,
    is_production: bool = False,
) -> ValidationResult:
    """
    Validate all security configuration.

    Args:
        jwt_secret: JWT secret key
        cors_origins: CORS allowed origins
        database_url: Database connection URL
        is_production: Whether ENV names a production deployment

    Returns:
        ValidationResult with errors and warnings

    Raises:
        SecurityConfigError: If any check produced an error. Warnings are only logged.
    """
    errors: list[str] = []
    warnings: list[str] = []

    valid, error = validate_jwt_secret(jwt_secret)
    if not valid:
        errors.append(error)

    if cors_origins:
        valid, error, warning = validate_cors_origins(cors_origins, is_production)
        if not valid:
            errors.append(error)
        if warning:
            warnings.append(warning)

    if database_url:
        valid, error, warning = validate_database_url(database_url, is_production)
        if not valid:
            errors.append(error)
        if warning:
            warnings.append(warning)

    errors_filtered = [e for e in errors if e is not None]
    warnings_filtered = [w for w in warnings if w is not None]

    for error in errors_filtered:
        logger.error("config_validation_error", error=error)
    for warning in warnings_filtered:
        logger.warning("config_validation_warning", warning=warning)

    result = ValidationResult(
        valid=len(errors_filtered) == 0,
        errors=errors_filtered,
        warnings=warnings_filtered,
    )

    if errors_filtered:
        raise SecurityConfigError(errors_filtered)

    return result
