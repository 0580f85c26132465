"""
Issue Tracker client.

Typed API client, session owner, and the client-side aggregator that filters
and groups fetched issues.
"""

from .aggregation import (
    FilterSpecification,
    apply_filters,
    group_by_status,
    status_suggestions,
    summarize,
)
from .api import IssueTrackerClient
from .cache import IssueListCache
from .drafts import IssueDraft
from .errors import (
    AuthError,
    IssueTrackerError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from .models import AuthResult, Issue, User
from .session import AuthSession, AuthState, TokenStore

__all__ = [
    "AuthError",
    "AuthResult",
    "AuthSession",
    "AuthState",
    "FilterSpecification",
    "Issue",
    "IssueDraft",
    "IssueListCache",
    "IssueTrackerClient",
    "IssueTrackerError",
    "NetworkError",
    "NotFoundError",
    "ServerError",
    "TokenStore",
    "User",
    "ValidationError",
    "apply_filters",
    "group_by_status",
    "status_suggestions",
    "summarize",
]
