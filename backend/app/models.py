"""
SQLAlchemy ORM models used by the API.

Re-exports from the unified core.models package.
"""

from core.models import Base, Issue, TokenBlacklist, User

__all__ = [
    "Base",
    "User",
    "TokenBlacklist",
    "Issue",
]
