"""
SQLAlchemy models for the Issue Tracker.

Single source of truth for all database models. Used by both the API and tests.

Usage:
    from core.models import User, Issue
"""

from .base import Base
from .issue import Issue
from .user import TokenBlacklist, User

__all__ = [
    "Base",
    "User",
    "TokenBlacklist",
    "Issue",
]
