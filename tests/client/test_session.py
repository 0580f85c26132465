import os
import stat

import httpx
import pytest

from backend.app.auth.jwt import create_access_token
from issue_tracker.api import IssueTrackerClient
from issue_tracker.errors import AuthError, ValidationError
from issue_tracker.session import AuthSession, AuthState, TokenStore


def _restart(api_http_client, token_store) -> AuthSession:
    """A new process: fresh client and session over the same token file."""
    return AuthSession(IssueTrackerClient(http_client=api_http_client), token_store)


class TestTokenStore:
    def test_missing_file_means_no_token(self, token_store):
        assert token_store.load() is None

    def test_save_load_clear(self, token_store):
        token_store.save("abc")
        assert token_store.load() == "abc"
        token_store.clear()
        assert token_store.load() is None
        token_store.clear()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_token_file_is_owner_only(self, token_store):
        token_store.save("abc")
        assert stat.S_IMODE(token_store.path.stat().st_mode) == 0o600

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_overwrite_tightens_existing_file(self, token_store):
        token_store.path.parent.mkdir(parents=True)
        token_store.path.write_text("old")
        token_store.path.chmod(0o644)
        token_store.save("new")
        assert stat.S_IMODE(token_store.path.stat().st_mode) == 0o600
        assert token_store.load() == "new"

    def test_undecodable_file_is_removed(self, token_store):
        token_store.path.parent.mkdir(parents=True)
        token_store.path.write_bytes(b"\xff\xfe\x00garbage")
        assert token_store.load() is None
        assert not token_store.path.exists()


class TestLoginAndRegister:
    def test_register_authenticates_and_persists(self, session, token_store):
        result = session.register("alice", "alice@example.com", "s3cret-pw")

        assert session.state is AuthState.AUTHENTICATED
        assert session.user.username == "alice"
        assert session.token == result.token
        assert token_store.load() == result.token

    def test_register_validation_error(self, session, token_store):
        with pytest.raises(ValidationError):
            session.register("a", "alice@example.com", "s3cret-pw")
        assert session.state is AuthState.UNAUTHENTICATED
        assert token_store.load() is None

    def test_login_with_bad_credentials(self, logged_in, api_http_client, token_store):
        fresh = _restart(api_http_client, token_store)
        with pytest.raises(AuthError):
            fresh.login("tester@example.com", "wrong-password")
        assert fresh.user is None

    def test_login_replaces_token(self, logged_in, token_store):
        old_token = logged_in.token
        logged_in.login("tester@example.com", "correct-horse")
        assert logged_in.token != old_token
        assert token_store.load() == logged_in.token


class TestRestore:
    def test_restore_without_token(self, session):
        assert session.restore() is None
        assert session.state is AuthState.UNAUTHENTICATED

    def test_restore_valid_token(self, logged_in, api_http_client, token_store):
        fresh = _restart(api_http_client, token_store)
        user = fresh.restore()

        assert user is not None
        assert user.username == "tester"
        assert fresh.is_authenticated

    def test_expired_token_clears_user_and_token(self, logged_in, api_http_client, token_store):
        expired = create_access_token({"sub": str(logged_in.user.id)}, expires_minutes=-5)
        token_store.save(expired)

        fresh = _restart(api_http_client, token_store)
        assert fresh.restore() is None
        assert (fresh.user, fresh.token) == (None, None)
        assert fresh.state is AuthState.UNAUTHENTICATED
        assert token_store.load() is None

    def test_revoked_token_clears_session(self, logged_in, api_http_client, token_store):
        token = logged_in.token
        logged_in.client.logout(token)

        fresh = _restart(api_http_client, token_store)
        assert fresh.restore() is None
        assert fresh.token is None

    def test_non_ascii_token_clears_session(self, session, token_store):
        token_store.path.parent.mkdir(parents=True)
        token_store.path.write_text("t\u00f6k\u00e9n", encoding="utf-8")

        assert session.restore() is None
        assert (session.user, session.token) == (None, None)
        assert session.state is AuthState.UNAUTHENTICATED
        assert not token_store.path.exists()

    def test_undecodable_token_file_clears_session(self, session, token_store):
        token_store.path.parent.mkdir(parents=True)
        token_store.path.write_bytes(b"\xff\xfe\x00garbage")

        assert session.restore() is None
        assert (session.user, session.token) == (None, None)
        assert not token_store.path.exists()

    def test_network_failure_clears_session(self, token_store):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        http = httpx.Client(base_url="http://tracker.invalid/api", transport=httpx.MockTransport(refuse))
        token_store.save("some-token")
        session = AuthSession(IssueTrackerClient(http_client=http), token_store)

        assert session.restore() is None
        assert (session.user, session.token) == (None, None)
        assert token_store.load() is None


class TestLogout:
    def test_logout_clears_everything(self, logged_in, token_store):
        token = logged_in.token
        logged_in.logout()

        assert (logged_in.user, logged_in.token) == (None, None)
        assert logged_in.state is AuthState.UNAUTHENTICATED
        assert token_store.load() is None
        with pytest.raises(AuthError):
            logged_in.client.verify(token)

    def test_logout_when_server_unreachable(self, token_store):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        http = httpx.Client(base_url="http://tracker.invalid/api", transport=httpx.MockTransport(refuse))
        session = AuthSession(IssueTrackerClient(http_client=http), token_store)
        session.token = "held-token"
        token_store.save("held-token")

        session.logout()

        assert session.token is None
        assert token_store.load() is None


def test_requests_carry_current_token(logged_in):
    assert logged_in.client.list_issues() == []

    logged_in.token = None
    with pytest.raises(AuthError):
        logged_in.client.list_issues()


def test_require_user(session, logged_in):
    assert logged_in.require_user().username == "tester"
    logged_in.logout()
    with pytest.raises(AuthError):
        logged_in.require_user()
