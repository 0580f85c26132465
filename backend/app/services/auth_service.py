"""
Auth service - registration, credential checks and token revocation.

Token encoding lives in auth/jwt.py; this module owns the user-facing rules.
"""

from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.logging import get_logger
from core.repositories import TokenBlacklistRepository, UserRepository
from core.security import hash_password, verify_password

from ..auth.jwt import create_access_token, decode_access_token, get_token_expiry
from ..models import User
from ..schemas import LoginRequest, RegisterRequest

logger = get_logger("api.auth_service")


class RegistrationError(ValueError):
    """Raised when registration data collides with an existing account."""


class InvalidCredentialsError(Exception):
    """Raised when an email/password pair does not match a user."""


def issue_token(user: User) -> str:
    return create_access_token({"sub": str(user.id)})


def register_user(db: Session, request: RegisterRequest) -> User:
    """
    Create a new account.

    Raises:
        RegistrationError: If the email or username is already taken.
    """
    repo = UserRepository(db)
    if repo.get_by_email(request.email):
        raise RegistrationError("Email is already registered")
    if repo.get_by_username(request.username):
        raise RegistrationError("Username is already taken")

    try:
        return repo.create_user(
            username=request.username,
            email=request.email,
            password_hash=hash_password(request.password),
        )
    except IntegrityError:
        # A concurrent registration took the email or username after the checks above
        db.rollback()
        logger.info("registration_conflict", username=request.username)
        raise RegistrationError("Email or username is already registered") from None


def authenticate(db: Session, request: LoginRequest) -> User:
    """
    Check an email/password pair.

    The same error is raised for an unknown email and a wrong password.
    """
    user = UserRepository(db).get_by_email(request.email)
    if user is None or not verify_password(request.password, user.password_hash):
        logger.info("login_rejected", email_domain=request.email.rpartition("@")[2])
        raise InvalidCredentialsError("Invalid email or password")
    return user


def revoke_token(db: Session, token: str) -> bool:
    """
    Blacklist a token's JTI until it would have expired anyway.

    Returns:
        True if the token decoded and was revoked, False otherwise.
    """
    try:
        payload = decode_access_token(token)
    except ValueError:
        return False

    jti = payload.get("jti")
    if not jti:
        return False

    expiry = get_token_expiry(token) or datetime.now(timezone.utc)
    blacklist = TokenBlacklistRepository(db)
    blacklist.blacklist_token(jti, expiry)
    purged = blacklist.cleanup_expired()
    logger.info("token_revoked", jti=jti[:8], purged=purged)
    return True
