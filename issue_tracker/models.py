"""
Wire models for the client.

Status and priority are kept as plain strings: the client renders whatever
the server sends, and the aggregator drops values it does not recognize.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class User(WireModel):
    id: int | str
    username: str
    email: str


class Issue(WireModel):
    id: str
    title: str
    description: str | None = ""
    status: str
    priority: str
    created_at: datetime
    updated_at: datetime | None = None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class AuthResult(WireModel):
    user: User
    token: str = Field(min_length=1)


__all__ = ["User", "Issue", "AuthResult"]
