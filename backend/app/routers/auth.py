"""
Authentication router: registration, password login, token verification
and logout.

Tokens are JWTs returned in the response body; clients send them back as
``Authorization: Bearer <token>``.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from core.logging import get_logger

from ..auth.dependencies import get_token_from_request, oauth2_scheme, resolve_user_from_token
from ..database import get_db
from ..schemas import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserResponse,
    VerifyResponse,
)
from ..services import auth_service

logger = get_logger("auth")

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """
    Create an account and sign it in.

    Returns the public user projection and a fresh access token.
    """
    try:
        user = auth_service.register_user(db, request)
    except auth_service.RegistrationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    token = auth_service.issue_token(user)
    logger.info("register_success", user_id=user.id)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for an access token."""
    try:
        user = auth_service.authenticate(db, request)
    except auth_service.InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = auth_service.issue_token(user)
    logger.info("login_success", user_id=user.id)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.get("/verify", response_model=VerifyResponse)
def verify(token: str = Depends(get_token_from_request), db: Session = Depends(get_db)):
    """
    Validate the presented token and return its user.

    Fails with 401 when the token is missing, malformed, expired, revoked,
    or belongs to a deleted user.
    """
    user = resolve_user_from_token(db, token)
    return VerifyResponse(user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    """
    Revoke the presented token.

    Always succeeds: a missing or undecodable token has nothing to revoke,
    and the client clears its own state regardless.
    """
    if token and auth_service.revoke_token(db, token):
        logger.info("logout_token_revoked")
    return MessageResponse(message="Logged out")
