import pytest

from issue_tracker.api import IssueTrackerClient
from issue_tracker.session import AuthSession, TokenStore


@pytest.fixture
def token_store(tmp_path) -> TokenStore:
    return TokenStore(tmp_path / "session" / "token")


@pytest.fixture
def api(api_http_client) -> IssueTrackerClient:
    return IssueTrackerClient(http_client=api_http_client)


@pytest.fixture
def session(api, token_store) -> AuthSession:
    return AuthSession(api, token_store)


@pytest.fixture
def logged_in(session) -> AuthSession:
    session.register("tester", "tester@example.com", "correct-horse")
    return session
