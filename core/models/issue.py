"""
Issue SQLAlchemy model.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from core.constants import DEFAULT_PRIORITY, DEFAULT_STATUS

from .base import Base, utcnow


def generate_issue_id() -> str:
    """Opaque store-assigned identifier."""
    return uuid.uuid4().hex


class Issue(Base):
    """
    A tracked unit of work.

    The identifier and created_at are fixed at insert time. updated_at stays
    NULL until the first mutation, which is how clients tell a never-edited
    issue apart from an edited one.

    seq is an internal insertion counter that orders issues sharing a
    created_at; it never leaves the server.
    """
    __tablename__ = "issues"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(32), unique=True, index=True, default=generate_issue_id)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    status: Mapped[str] = mapped_column(String(32), default=DEFAULT_STATUS.value, index=True)
    priority: Mapped[str] = mapped_column(String(32), default=DEFAULT_PRIORITY.value)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<Issue {self.id} {self.status!r} {self.title[:30]!r}>"
