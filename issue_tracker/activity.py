"""Activity feed shown on the issue detail page.

The feed is derived from the issue's own timestamps; no events are stored.
"""

from dataclasses import dataclass
from datetime import datetime

from .models import Issue


@dataclass(frozen=True)
class ActivityEntry:
    label: str
    timestamp: datetime


def build_activity(issue: Issue) -> list[ActivityEntry]:
    """Oldest first: creation, then the last update if there was one."""
    entries = [ActivityEntry("Issue created", issue.created_at)]
    if issue.updated_at is not None:
        entries.append(ActivityEntry("Issue updated", issue.updated_at))
    return entries


__all__ = ["ActivityEntry", "build_activity"]
