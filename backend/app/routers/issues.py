"""
Issue CRUD endpoints.

Every route requires a valid bearer token. Listing is a full scan, newest
first; filtering and grouping happen client-side.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..auth.dependencies import get_current_user
from ..database import get_db
from ..models import User
from ..schemas import IssueCreateRequest, IssueResponse, IssueUpdateRequest, MessageResponse
from ..services import issue_service

router = APIRouter(
    prefix="/issues",
    tags=["issues"],
    dependencies=[Depends(get_current_user)],
)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Issue not found")


@router.get("", response_model=list[IssueResponse])
def list_issues(db: Session = Depends(get_db)):
    """List every issue, newest first."""
    return issue_service.list_issues(db)


@router.post("", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
def create_issue(
    request: IssueCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create an issue. Status defaults to Open and priority to Medium."""
    return issue_service.create_issue(db, current_user, request)


@router.get("/{issue_id}", response_model=IssueResponse)
def get_issue(issue_id: str, db: Session = Depends(get_db)):
    """Get a single issue."""
    try:
        return issue_service.get_issue(db, issue_id)
    except issue_service.IssueNotFoundError:
        raise _not_found() from None


@router.put("/{issue_id}", response_model=IssueResponse)
def update_issue(
    issue_id: str,
    request: IssueUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Merge the supplied fields over the stored issue; returns the merged issue."""
    try:
        return issue_service.update_issue(db, current_user, issue_id, request)
    except issue_service.IssueNotFoundError:
        raise _not_found() from None


@router.delete("/{issue_id}", response_model=MessageResponse)
def delete_issue(
    issue_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete an issue irreversibly."""
    try:
        issue_service.delete_issue(db, current_user, issue_id)
    except issue_service.IssueNotFoundError:
        raise _not_found() from None
    return MessageResponse(message="Issue deleted")
