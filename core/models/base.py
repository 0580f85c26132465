"""
Base model class for SQLAlchemy ORM.

Re-exports the Base class from the database module for convenience.
"""

from datetime import datetime, timezone

from core.db import Base


def utcnow() -> datetime:
    """Timezone-aware current time used for model timestamps."""
    return datetime.now(timezone.utc)


__all__ = ["Base", "utcnow"]
