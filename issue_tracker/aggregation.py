"""
Client-side filtering and grouping of fetched issues.

Everything here is pure: functions take the full issue list (already fetched,
newest first) and return new lists or mappings without touching the input.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone

from core.constants import STATUS_DISPLAY_ORDER

from .models import Issue

END_OF_DAY = time(23, 59, 59)


@dataclass
class FilterSpecification:
    """
    Filter bar state. Empty fields impose no restriction; set fields are ANDed.

    Attributes:
        search_term: Case-insensitive substring matched against title or description.
        statuses: Allowed status values.
        priorities: Allowed priority values.
        start_date: Keep issues created on or after this day.
        end_date: Keep issues created on or before the end of this day.
    """

    search_term: str = ""
    statuses: frozenset[str] = field(default_factory=frozenset)
    priorities: frozenset[str] = field(default_factory=frozenset)
    start_date: date | None = None
    end_date: date | None = None

    def __post_init__(self):
        self.search_term = self.search_term or ""
        self.statuses = frozenset(self.statuses or ())
        self.priorities = frozenset(self.priorities or ())
        # Bounds are whole days
        if isinstance(self.start_date, datetime):
            self.start_date = self.start_date.date()
        if isinstance(self.end_date, datetime):
            self.end_date = self.end_date.date()

    def is_empty(self) -> bool:
        return not (
            self.search_term
            or self.statuses
            or self.priorities
            or self.start_date
            or self.end_date
        )

    def cleared(self) -> "FilterSpecification":
        return FilterSpecification()


def _as_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _matches(issue: Issue, filters: FilterSpecification, term: str) -> bool:
    if term:
        title = (issue.title or "").lower()
        description = (issue.description or "").lower()
        if term not in title and term not in description:
            return False

    if filters.statuses and issue.status not in filters.statuses:
        return False

    if filters.priorities and issue.priority not in filters.priorities:
        return False

    if filters.start_date or filters.end_date:
        created = _as_utc_naive(issue.created_at)
        if filters.start_date and created < datetime.combine(filters.start_date, time.min):
            return False
        if filters.end_date and created > datetime.combine(filters.end_date, END_OF_DAY):
            return False

    return True


def apply_filters(issues: Iterable[Issue], filters: FilterSpecification | None = None) -> list[Issue]:
    """Return the issues matching every set predicate, in input order."""
    if filters is None or filters.is_empty():
        return list(issues)
    term = filters.search_term.lower()
    return [issue for issue in issues if _matches(issue, filters, term)]


def group_by_status(issues: Iterable[Issue]) -> dict[str, list[Issue]]:
    """
    Group issues by status in dashboard display order.

    Empty groups are omitted and statuses outside the display order are
    dropped. Within a group the input order is kept.
    """
    buckets: dict[str, list[Issue]] = {status: [] for status in STATUS_DISPLAY_ORDER}
    for issue in issues:
        bucket = buckets.get(issue.status)
        if bucket is not None:
            bucket.append(issue)
    return {status: grouped for status, grouped in buckets.items() if grouped}


def summarize(issues: Sequence[Issue]) -> dict[str, int]:
    """Issue count per known status, in display order, zeros included."""
    counts = dict.fromkeys(STATUS_DISPLAY_ORDER, 0)
    for issue in issues:
        if issue.status in counts:
            counts[issue.status] += 1
    return counts


def status_suggestions(term: str) -> list[str]:
    """Known statuses whose name contains the term (all of them for an empty term)."""
    needle = (term or "").strip().lower()
    return [status for status in STATUS_DISPLAY_ORDER if needle in status.lower()]


__all__ = [
    "FilterSpecification",
    "apply_filters",
    "group_by_status",
    "summarize",
    "status_suggestions",
]
