"""
Repository pattern implementations for data access.

Usage:
    from core.repositories import IssueRepository
    from core.db import db

    with db.session() as session:
        issues = IssueRepository(session).list_newest_first()
"""

from .base import BaseRepository
from .issue_repository import IssueRepository
from .user_repository import TokenBlacklistRepository, UserRepository

__all__ = [
    "BaseRepository",
    "IssueRepository",
    "UserRepository",
    "TokenBlacklistRepository",
]
