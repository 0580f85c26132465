"""
Issue service - bridges FastAPI endpoints with the issue store.

Uses IssueRepository for database access.
"""

from sqlalchemy.orm import Session

from core.logging import get_logger
from core.repositories import IssueRepository

from ..models import Issue, User
from ..schemas import IssueCreateRequest, IssueUpdateRequest

logger = get_logger("api.issue_service")


class IssueNotFoundError(LookupError):
    """Raised when no issue has the requested identifier."""

    def __init__(self, issue_id: str):
        self.issue_id = issue_id
        super().__init__(f"Issue not found: {issue_id}")


def list_issues(db: Session) -> list[Issue]:
    """All issues, newest first."""
    return IssueRepository(db).list_newest_first()


def get_issue(db: Session, issue_id: str) -> Issue:
    issue = IssueRepository(db).get_by_id(issue_id)
    if issue is None:
        raise IssueNotFoundError(issue_id)
    return issue


def create_issue(db: Session, user: User, request: IssueCreateRequest) -> Issue:
    """
    Persist a new issue.

    Args:
        db: Database session.
        user: Authenticated user submitting the issue (used for logging only).
        request: Validated issue fields.

    Returns:
        The stored Issue with its assigned id and created_at.
    """
    issue = IssueRepository(db).create_issue(**request.to_fields())
    logger.info(
        "issue_created",
        issue_id=issue.id,
        user_id=user.id,
        status=issue.status,
        priority=issue.priority,
    )
    return issue


def update_issue(db: Session, user: User, issue_id: str, request: IssueUpdateRequest) -> Issue:
    """Merge the supplied fields over the stored issue and return the result."""
    changes = request.to_changes()
    issue = IssueRepository(db).merge_update(issue_id, changes)
    if issue is None:
        raise IssueNotFoundError(issue_id)
    logger.info("issue_updated", issue_id=issue_id, user_id=user.id, fields=sorted(changes))
    return issue


def delete_issue(db: Session, user: User, issue_id: str) -> None:
    """Delete an issue. A second delete of the same id raises IssueNotFoundError."""
    if not IssueRepository(db).delete(issue_id):
        raise IssueNotFoundError(issue_id)
    logger.info("issue_deleted", issue_id=issue_id, user_id=user.id)
