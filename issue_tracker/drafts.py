"""Form state for creating and editing issues."""

from dataclasses import dataclass, fields

from core.constants import (
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    DESCRIPTION_MAX_LENGTH,
    PRIORITY_VALUES,
    STATUS_DISPLAY_ORDER,
    TITLE_MAX_LENGTH,
)

from .errors import ValidationError
from .models import Issue


@dataclass
class IssueDraft:
    """
    Editable issue fields. A field left as None was not touched by the user.

    Create submissions fill untouched fields with defaults; update submissions
    send only the touched fields.
    """

    title: str | None = None
    description: str | None = None
    status: str | None = None
    priority: str | None = None

    @classmethod
    def from_issue(cls, issue: Issue) -> "IssueDraft":
        return cls(
            title=issue.title,
            description=issue.description or "",
            status=issue.status,
            priority=issue.priority,
        )

    def problems(self, *, creating: bool) -> list[str]:
        found = []
        if self.title is not None or creating:
            title = (self.title or "").strip()
            if not title:
                found.append("Title is required")
            elif len(title) > TITLE_MAX_LENGTH:
                found.append(f"Title must be at most {TITLE_MAX_LENGTH} characters")
        if self.description is not None and len(self.description) > DESCRIPTION_MAX_LENGTH:
            found.append(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters")
        if self.status is not None and self.status not in STATUS_DISPLAY_ORDER:
            found.append(f"Unknown status '{self.status}'")
        if self.priority is not None and self.priority not in PRIORITY_VALUES:
            found.append(f"Unknown priority '{self.priority}'")
        return found

    def validate(self, *, creating: bool = True) -> None:
        """Raise ValidationError listing every problem with the draft."""
        found = self.problems(creating=creating)
        if found:
            raise ValidationError("; ".join(found))

    def to_create_payload(self) -> dict:
        self.validate(creating=True)
        return {
            "title": self.title.strip(),
            "description": self.description or "",
            "status": self.status or DEFAULT_STATUS.value,
            "priority": self.priority or DEFAULT_PRIORITY.value,
        }

    def to_update_payload(self) -> dict:
        self.validate(creating=False)
        changes = {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}
        if not changes:
            raise ValidationError("Nothing to update")
        if "title" in changes:
            changes["title"] = changes["title"].strip()
        return changes


__all__ = ["IssueDraft"]
