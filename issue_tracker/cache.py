"""
Holder for the most recently fetched issue list.

Only server-confirmed data enters the cache. Every fetch takes a ticket from
a monotonically increasing sequence; a completed fetch is applied only if its
ticket is newer than the last one applied, so a slow response can never
overwrite a newer list.
"""

import itertools
import threading
from collections.abc import Callable

from core.logging import get_logger

from .models import Issue

logger = get_logger("issue_tracker.cache")


class IssueListCache:
    def __init__(self, fetch: Callable[[], list[Issue]]):
        self._fetch = fetch
        self._lock = threading.Lock()
        self._tickets = itertools.count(1)
        self._applied_ticket = 0
        self._issues: tuple[Issue, ...] | None = None

    @property
    def issues(self) -> list[Issue]:
        """Snapshot of the cached list (empty before the first fetch)."""
        return list(self._issues or ())

    @property
    def is_loaded(self) -> bool:
        return self._issues is not None

    def begin_fetch(self) -> int:
        with self._lock:
            return next(self._tickets)

    def complete_fetch(self, ticket: int, issues: list[Issue]) -> bool:
        """Apply a fetched list; returns False if a newer fetch already landed."""
        with self._lock:
            if ticket <= self._applied_ticket:
                logger.debug("stale_fetch_discarded", ticket=ticket, applied=self._applied_ticket)
                return False
            self._applied_ticket = ticket
            self._issues = tuple(issues)
            return True

    def refresh(self) -> list[Issue]:
        """Fetch the list from the server and apply it."""
        ticket = self.begin_fetch()
        issues = self._fetch()
        self.complete_fetch(ticket, issues)
        return self.issues

    def get(self) -> list[Issue]:
        """Cached list, fetching it first if nothing is loaded yet."""
        if not self.is_loaded:
            return self.refresh()
        return self.issues

    def after_mutation(self) -> list[Issue]:
        """Re-fetch following a successful create, update or delete."""
        return self.refresh()


__all__ = ["IssueListCache"]
