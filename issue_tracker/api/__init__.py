"""REST API client."""

from .client import IssueTrackerClient, TokenProvider

__all__ = ["IssueTrackerClient", "TokenProvider"]
