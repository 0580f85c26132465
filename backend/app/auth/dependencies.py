"""
Authentication dependencies for FastAPI routes.

Clients send the access token as a bearer credential in the Authorization
header; every issue route depends on get_current_user.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from core.logging import get_logger
from core.repositories import TokenBlacklistRepository, UserRepository

from ..database import get_db
from ..models import User
from .jwt import TokenExpiredError, decode_access_token

logger = get_logger("auth.dependencies")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_from_request(token_header: str | None = Depends(oauth2_scheme)) -> str:
    """Extract the bearer token or fail with 401."""
    if token_header:
        return token_header
    raise _unauthorized("Not authenticated")


def resolve_user_from_token(db: Session, token: str) -> User:
    """
    Resolve the user a token was issued to.

    Steps:
    1) Decode JWT and extract subject (user id) and jti.
    2) Reject if token is blacklisted (revoked).
    3) Load the user from DB.

    Raises:
        HTTPException: 401 for any failed step.
    """
    try:
        payload = decode_access_token(token)
    except TokenExpiredError:
        raise _unauthorized("Token has expired") from None
    except ValueError:
        raise _unauthorized("Invalid authentication credentials") from None

    jti = payload.get("jti")
    if jti and TokenBlacklistRepository(db).is_blacklisted(jti):
        logger.info("revoked_token_rejected", jti=jti[:8])
        raise _unauthorized("Token has been revoked")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid authentication credentials")

    try:
        user = UserRepository(db).get_by_id(int(user_id))
    except (TypeError, ValueError):
        user = None
    if not user:
        raise _unauthorized("User not found")
    return user


def get_current_user(
    token: str = Depends(get_token_from_request),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the authenticated user from the bearer token."""
    return resolve_user_from_token(db, token)
