"""
Backend services for the Issue Tracker.
"""

from . import auth_service, issue_service

__all__ = [
    "auth_service",
    "issue_service",
]
