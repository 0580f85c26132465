"""
HTTP client for the Issue Tracker REST API.

Wraps an httpx.Client; any httpx-compatible client (including FastAPI's
TestClient) can be injected. The bearer token is read from a token provider
on every request, so whoever owns the session controls what is attached.
"""

from collections.abc import Callable
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from core.config import get_settings
from core.logging import get_logger

from ..errors import AuthError, IssueTrackerError, NetworkError, ServerError, error_for_status
from ..models import AuthResult, Issue, User

logger = get_logger("issue_tracker.api")

TokenProvider = Callable[[], str | None]


def _error_detail(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message")
        if isinstance(detail, str):
            return detail
        if detail is not None:
            return str(detail)
    return None


class IssueTrackerClient:
    """
    Typed access to the auth and issue endpoints.

    Non-2xx responses raise the matching IssueTrackerError subclass; transport
    failures raise NetworkError. No call is ever retried.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http_client: httpx.Client | None = None,
        token_provider: TokenProvider | None = None,
        timeout: float | None = None,
    ):
        settings = get_settings()
        if http_client is None:
            http_client = httpx.Client(
                base_url=base_url or settings.api_base_url,
                timeout=timeout or settings.request_timeout,
            )
        self._http = http_client
        self.token_provider = token_provider

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "IssueTrackerClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict | None = None,
        token: str | None = None,
        authenticated: bool = True,
    ) -> Any:
        headers = {"Accept": "application/json"}
        if token is None and authenticated and self.token_provider is not None:
            token = self.token_provider()
        if token:
            # Header values must be ASCII; anything else cannot be a server-issued token
            if not token.isascii():
                raise AuthError("Stored token is malformed")
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self._http.request(method, path, json=json, headers=headers)
        except httpx.TransportError as exc:
            logger.warning("api_request_failed", method=method, path=path, error=str(exc))
            raise NetworkError(f"Could not reach the server: {exc}") from exc

        if not response.is_success:
            error = error_for_status(response.status_code, _error_detail(response))
            logger.debug(
                "api_error_response",
                method=method,
                path=path,
                status_code=response.status_code,
                error_type=type(error).__name__,
            )
            raise error

        try:
            return response.json()
        except ValueError as exc:
            raise ServerError("Server returned a malformed response", response.status_code) from exc

    @staticmethod
    def _parse(model, data):
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            raise ServerError(f"Unexpected response shape: {exc.error_count()} error(s)") from exc

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    def register(self, username: str, email: str, password: str) -> AuthResult:
        data = self._request(
            "POST",
            "/auth/register",
            json={"username": username, "email": email, "password": password},
            authenticated=False,
        )
        return self._parse(AuthResult, data)

    def login(self, email: str, password: str) -> AuthResult:
        data = self._request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password},
            authenticated=False,
        )
        return self._parse(AuthResult, data)

    def verify(self, token: str) -> User:
        """Return the user a token belongs to; raises AuthError if it is not accepted."""
        data = self._request("GET", "/auth/verify", token=token)
        if not isinstance(data, dict) or "user" not in data:
            raise ServerError("Unexpected response shape: missing user")
        return self._parse(User, data["user"])

    def logout(self, token: str | None) -> None:
        self._request("POST", "/auth/logout", token=token, authenticated=token is not None)

    # -------------------------------------------------------------------------
    # Issues
    # -------------------------------------------------------------------------

    def list_issues(self) -> list[Issue]:
        """All issues, newest first."""
        data = self._request("GET", "/issues")
        if not isinstance(data, list):
            raise ServerError("Unexpected response shape: expected a list")
        return [self._parse(Issue, item) for item in data]

    def get_issue(self, issue_id: str) -> Issue:
        return self._parse(Issue, self._request("GET", f"/issues/{issue_id}"))

    def create_issue(self, payload: dict) -> Issue:
        return self._parse(Issue, self._request("POST", "/issues", json=payload))

    def update_issue(self, issue_id: str, changes: dict) -> Issue:
        """Send a partial update; returns the merged issue."""
        return self._parse(Issue, self._request("PUT", f"/issues/{issue_id}", json=changes))

    def delete_issue(self, issue_id: str) -> str:
        data = self._request("DELETE", f"/issues/{issue_id}")
        return data.get("message", "") if isinstance(data, dict) else ""


__all__ = ["IssueTrackerClient", "IssueTrackerError", "TokenProvider"]
