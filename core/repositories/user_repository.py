"""User repository for authentication and user management."""

from datetime import datetime, timezone

from sqlalchemy import func

from core.logging import get_logger
from core.models import TokenBlacklist, User

from .base import BaseRepository

logger = get_logger("repository.user")


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    model = User

    def get_by_email(self, email: str) -> User | None:
        """Get user by email, case-insensitively."""
        return (
            self.session.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )

    def get_by_username(self, username: str) -> User | None:
        """Get user by username."""
        return self.session.query(User).filter(User.username == username).first()

    def create_user(self, username: str, email: str, password_hash: str) -> User:
        """Create a user. Uniqueness is checked by the caller."""
        user = self.create(
            username=username,
            email=email.strip().lower(),
            password_hash=password_hash,
        )
        logger.info("user_created", user_id=user.id)
        return user


class TokenBlacklistRepository(BaseRepository[TokenBlacklist]):
    """Repository for managing blacklisted JWT tokens."""

    model = TokenBlacklist

    def is_blacklisted(self, token_jti: str) -> bool:
        """Check if a token JTI is blacklisted."""
        return self.exists_where(token_jti=token_jti)

    def blacklist_token(self, token_jti: str, expires_at: datetime) -> TokenBlacklist:
        """Add a token to the blacklist. Re-blacklisting the same JTI is a no-op."""
        existing = self.session.query(TokenBlacklist).filter(
            TokenBlacklist.token_jti == token_jti
        ).first()
        if existing:
            return existing
        token = TokenBlacklist(token_jti=token_jti, expires_at=expires_at)
        self.session.add(token)
        self.session.flush()
        return token

    def cleanup_expired(self) -> int:
        """Remove expired tokens from blacklist."""
        # Stored datetimes come back naive on SQLite; compare in naive UTC
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        result = (
            self.session.query(TokenBlacklist)
            .filter(TokenBlacklist.expires_at < now)
            .delete(synchronize_session=False)
        )
        self.session.flush()
        return result
