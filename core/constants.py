"""
Application constants for the Issue Tracker.

Contains the canonical issue status/priority enums, display ordering, and
field limits shared by the server and the client.
"""

from enum import Enum


# =============================================================================
# Issue Enums
# =============================================================================


class IssueStatus(str, Enum):
    """Issue workflow status."""
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    IN_REVIEW = "In Review"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class IssuePriority(str, Enum):
    """Issue priority."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


DEFAULT_STATUS = IssueStatus.OPEN
DEFAULT_PRIORITY = IssuePriority.MEDIUM

# Dashboard grouping order; statuses outside this list are never rendered
STATUS_DISPLAY_ORDER = [status.value for status in IssueStatus]
PRIORITY_VALUES = [priority.value for priority in IssuePriority]

# Priorities highlighted in list and detail views
URGENT_PRIORITIES = frozenset({IssuePriority.HIGH.value, IssuePriority.CRITICAL.value})


# =============================================================================
# Field Limits
# =============================================================================

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 10_000

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
USERNAME_PATTERN = r"^[A-Za-z0-9_-]+$"
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 128
