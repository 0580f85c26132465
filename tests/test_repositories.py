from datetime import datetime, timedelta, timezone

import pytest

from core.models import Issue
from core.repositories import IssueRepository, TokenBlacklistRepository, UserRepository


def test_count_unknown_filter_key_raises(test_session):
    repo = UserRepository(test_session)

    with pytest.raises(ValueError, match="Unknown filter key"):
        repo.count(typo_key=5)


def test_create_issue_assigns_id_and_defaults(test_session):
    issue = IssueRepository(test_session).create_issue(title="First")

    assert len(issue.id) == 32
    assert issue.status == "Open"
    assert issue.priority == "Medium"
    assert issue.description == ""
    assert issue.created_at is not None
    assert issue.updated_at is None


def test_create_issue_ignores_store_owned_fields(test_session):
    issue = IssueRepository(test_session).create_issue(title="First", id="chosen", updated_at="x")

    assert issue.id != "chosen"
    assert issue.updated_at is None


def test_list_newest_first(test_session):
    repo = IssueRepository(test_session)
    base = datetime(2024, 6, 1, tzinfo=timezone.utc)
    for offset, title in [(1, "middle"), (0, "oldest"), (2, "newest")]:
        test_session.add(Issue(title=title, created_at=base + timedelta(hours=offset)))
    test_session.flush()

    assert [i.title for i in repo.list_newest_first()] == ["newest", "middle", "oldest"]


def test_list_newest_first_breaks_timestamp_ties_by_insertion(test_session):
    repo = IssueRepository(test_session)
    same = datetime(2024, 6, 1, tzinfo=timezone.utc)
    titles = [f"issue {n}" for n in range(10)]
    for title in titles:
        test_session.add(Issue(title=title, created_at=same))
        test_session.flush()

    assert [i.title for i in repo.list_newest_first()] == titles[::-1]


def test_get_by_id_uses_public_id(test_session):
    repo = IssueRepository(test_session)
    issue = repo.create_issue(title="Find me")

    assert repo.get_by_id(issue.id) is issue
    assert repo.get_by_id(str(issue.seq)) is None


def test_merge_update_keeps_absent_fields(test_session):
    repo = IssueRepository(test_session)
    issue = repo.create_issue(title="Original", description="body", priority="High")

    merged = repo.merge_update(issue.id, {"status": "Resolved", "id": "ignored"})

    assert merged.id == issue.id
    assert merged.status == "Resolved"
    assert merged.title == "Original"
    assert merged.description == "body"
    assert merged.priority == "High"
    assert merged.updated_at is not None


def test_merge_update_missing_returns_none(test_session):
    assert IssueRepository(test_session).merge_update("missing", {"title": "x"}) is None


def test_delete_is_not_repeatable(test_session):
    repo = IssueRepository(test_session)
    issue = repo.create_issue(title="Doomed")

    assert repo.delete(issue.id) is True
    assert repo.delete(issue.id) is False


def test_get_by_email_is_case_insensitive(test_session):
    repo = UserRepository(test_session)
    repo.create_user(username="carol", email="Carol@Example.com", password_hash="x")

    user = repo.get_by_email("CAROL@example.COM")
    assert user is not None
    assert user.email == "carol@example.com"


def test_blacklist_is_idempotent(test_session):
    repo = TokenBlacklistRepository(test_session)
    expiry = datetime.now(timezone.utc) + timedelta(hours=1)

    first = repo.blacklist_token("jti-1", expiry)
    second = repo.blacklist_token("jti-1", expiry)

    assert first.id == second.id
    assert repo.is_blacklisted("jti-1")
    assert not repo.is_blacklisted("jti-2")


def test_cleanup_expired_removes_only_expired(test_session):
    repo = TokenBlacklistRepository(test_session)
    now = datetime.now(timezone.utc)
    repo.blacklist_token("old", now - timedelta(hours=1))
    repo.blacklist_token("live", now + timedelta(hours=1))

    assert repo.cleanup_expired() == 1
    assert not repo.is_blacklisted("old")
    assert repo.is_blacklisted("live")
