"""
Issue repository: the persistent issue store.
"""

from sqlalchemy.orm import Session

from core.models import Issue
from core.models.base import utcnow

from .base import BaseRepository

# Fields a client may set; id and timestamps are store-owned
MUTABLE_FIELDS = ("title", "description", "status", "priority")


class IssueRepository(BaseRepository[Issue]):
    """
    Repository for Issue documents.

    The store performs no enum validation of its own; callers hand it values
    that the API schemas have already checked.
    """

    model = Issue

    def __init__(self, session: Session):
        super().__init__(session)

    def get_by_id(self, issue_id: str) -> Issue | None:
        """Look up by the public identifier (the primary key is the internal seq)."""
        return self.session.query(Issue).filter(Issue.id == issue_id).first()

    def list_newest_first(self) -> list[Issue]:
        """Full scan of the store, newest issue first."""
        return (
            self.session.query(Issue)
            .order_by(Issue.created_at.desc(), Issue.seq.desc())
            .all()
        )

    def create_issue(self, **fields) -> Issue:
        """Insert a new issue; id and created_at are assigned here."""
        values = {key: value for key, value in fields.items() if key in MUTABLE_FIELDS}
        return self.create(**values)

    def merge_update(self, issue_id: str, changes: dict) -> Issue | None:
        """
        Merge the supplied fields over the stored document.

        Fields absent from ``changes`` keep their stored values. updated_at is
        stamped on every call, even when the supplied values match.

        Returns:
            The merged issue, or None when no issue has this id.
        """
        issue = self.get_by_id(issue_id)
        if issue is None:
            return None

        for key, value in changes.items():
            if key in MUTABLE_FIELDS:
                setattr(issue, key, value)
        issue.updated_at = utcnow()
        self.session.flush()
        return issue
