"""
Pydantic schemas for request and response validation.

Wire format uses camelCase keys (createdAt, updatedAt); Python code uses the
snake_case attribute names.
"""

from datetime import datetime, timezone

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from core.constants import (
    DESCRIPTION_MAX_LENGTH,
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    TITLE_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    USERNAME_PATTERN,
    IssuePriority,
    IssueStatus,
)


class APIModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; stored values are always UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =============================================================================
# Auth
# =============================================================================


class UserResponse(APIModel):
    id: int
    username: str
    email: str


class RegisterRequest(APIModel):
    username: str = Field(
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
        pattern=USERNAME_PATTERN,
    )
    email: EmailStr
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)


class LoginRequest(APIModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX_LENGTH)


class AuthResponse(APIModel):
    user: UserResponse
    token: str


class VerifyResponse(APIModel):
    user: UserResponse


class MessageResponse(APIModel):
    message: str


# =============================================================================
# Issues
# =============================================================================


class IssueCreateRequest(APIModel):
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    status: IssueStatus = IssueStatus.OPEN
    priority: IssuePriority = IssuePriority.MEDIUM

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def description_default(cls, v):
        return "" if v is None else v

    def to_fields(self) -> dict:
        return self.model_dump(mode="json")


class IssueUpdateRequest(APIModel):
    """Partial update: only the fields present in the body are merged."""

    title: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    status: IssueStatus | None = None
    priority: IssuePriority | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        for name in ("title", "status", "priority"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def to_changes(self) -> dict:
        changes = self.model_dump(mode="json", exclude_unset=True)
        if "description" in changes and changes["description"] is None:
            changes["description"] = ""
        return changes


class IssueResponse(APIModel):
    id: str
    title: str
    description: str = ""
    status: str
    priority: str
    created_at: datetime
    updated_at: datetime | None = None

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime | None):
        value = _as_utc(value)
        return value.isoformat() if value else None
