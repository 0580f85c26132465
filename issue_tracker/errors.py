"""
Client-side exception hierarchy.

Every failure the API client can raise derives from IssueTrackerError so the
CLI can catch one type at its command boundary.
"""


class IssueTrackerError(Exception):
    """Base class for all client errors."""

    default_message = "Something went wrong"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(IssueTrackerError):
    """Rejected input: a 400/422 response or a draft that failed local checks."""

    default_message = "Invalid input"


class AuthError(IssueTrackerError):
    """Missing, invalid, expired or revoked credentials (401/403)."""

    default_message = "Authentication required"


class NotFoundError(IssueTrackerError):
    default_message = "Not found"


class NetworkError(IssueTrackerError):
    """The request never produced a response."""

    default_message = "Could not reach the server"


class ServerError(IssueTrackerError):
    """5xx or any status the client does not classify."""

    default_message = "Server error"


def error_for_status(status_code: int, message: str | None = None) -> IssueTrackerError:
    """Map an HTTP status code onto the matching exception instance."""
    if status_code in (400, 422):
        cls = ValidationError
    elif status_code in (401, 403):
        cls = AuthError
    elif status_code == 404:
        cls = NotFoundError
    else:
        cls = ServerError
    return cls(message, status_code=status_code)


__all__ = [
    "IssueTrackerError",
    "ValidationError",
    "AuthError",
    "NotFoundError",
    "NetworkError",
    "ServerError",
    "error_for_status",
]
