"""
Client session ownership.

AuthSession is the single owner of the current user and bearer token: it
persists the token to the token file, revalidates it once per process start,
and clears user, token and file together whenever the session ends.
"""

import os
from enum import Enum
from pathlib import Path

from core.logging import get_logger

from .api import IssueTrackerClient
from .errors import AuthError, IssueTrackerError
from .models import AuthResult, User

logger = get_logger("issue_tracker.session")


class AuthState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    VERIFYING = "verifying"
    AUTHENTICATED = "authenticated"


class TokenStore:
    """Persists a single token string in a file; a missing file means no token."""

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> str | None:
        """Return the stored token. A file that is not valid UTF-8 is removed."""
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            logger.warning("token_file_corrupt", path=str(self.path))
            self.clear()
            return None
        except OSError as exc:
            logger.warning("token_file_unreadable", path=str(self.path), error_type=type(exc).__name__)
            return None
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        # An existing file keeps its old mode through os.open
        os.chmod(self.path, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(token)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class AuthSession:
    """
    Current-session identity for the client.

    The session installs itself as the API client's token provider, so every
    issue request carries whatever token is held at the time it is sent.

    States:
        UNAUTHENTICATED -> VERIFYING -> AUTHENTICATED
        AUTHENTICATED -> UNAUTHENTICATED on logout or failed verification
    """

    def __init__(self, client: IssueTrackerClient, store: TokenStore):
        self.client = client
        self.store = store
        self.user: User | None = None
        self.token: str | None = None
        self.state = AuthState.UNAUTHENTICATED
        client.token_provider = self.current_token

    def current_token(self) -> str | None:
        return self.token

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    def require_user(self) -> User:
        """Return the signed-in user or raise AuthError."""
        if not self.is_authenticated or self.user is None:
            raise AuthError("Please log in to continue")
        return self.user

    def register(self, username: str, email: str, password: str) -> AuthResult:
        result = self.client.register(username, email, password)
        self._establish(result)
        logger.info("session_registered", username=result.user.username)
        return result

    def login(self, email: str, password: str) -> AuthResult:
        """Sign in. AuthError from the server leaves the session untouched."""
        result = self.client.login(email, password)
        self._establish(result)
        logger.info("session_logged_in", username=result.user.username)
        return result

    def restore(self) -> User | None:
        """
        Load the persisted token, if any, and verify it.

        Called once per process start. Returns the verified user, or None when
        there was no token or it was rejected.
        """
        token = self.store.load()
        if not token:
            self._clear()
            return None
        self.token = token
        return self.verify()

    def verify(self) -> User | None:
        """
        Revalidate the held token against the server.

        Any failure (expired, invalid, revoked, network) resets the session
        silently; the error is logged and never raised.
        """
        if not self.token:
            self._clear()
            return None

        self.state = AuthState.VERIFYING
        try:
            user = self.client.verify(self.token)
        except IssueTrackerError as exc:
            logger.info(
                "token_verification_failed",
                error_type=type(exc).__name__,
                status_code=exc.status_code,
            )
            self._clear()
            return None

        self.user = user
        self.state = AuthState.AUTHENTICATED
        return user

    def logout(self) -> None:
        """Notify the server if possible; always ends the local session."""
        token = self.token
        try:
            if token:
                self.client.logout(token)
        except IssueTrackerError as exc:
            logger.warning("logout_notification_failed", error_type=type(exc).__name__)
        finally:
            self._clear()

    def _establish(self, result: AuthResult) -> None:
        self.store.save(result.token)
        self.user = result.user
        self.token = result.token
        self.state = AuthState.AUTHENTICATED

    def _clear(self) -> None:
        self.user = None
        self.token = None
        self.state = AuthState.UNAUTHENTICATED
        self.store.clear()


__all__ = ["AuthSession", "AuthState", "TokenStore"]
