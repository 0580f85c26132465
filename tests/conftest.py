"""
Pytest fixtures for Issue Tracker tests.

Every test gets a fresh in-memory SQLite database behind the DatabaseManager
singleton, so the API and repositories share one store.
"""

import itertools
import os

# Must be set before core.config.get_settings() is first called
os.environ.setdefault("ENV", "development")
os.environ.setdefault("JWT_SECRET_KEY", "issue-tracker-test-signing-key-0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from core.db import db  # noqa: E402
from issue_tracker.models import Issue  # noqa: E402


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh in-memory database for each test."""
    db.reset()
    db.initialize("sqlite://")
    db.create_all_tables()

    yield db

    db.drop_all_tables()
    db.reset()


@pytest.fixture
def test_session(test_db):
    """Session that commits on success and rolls back on error."""
    with test_db.session() as session:
        yield session


@pytest.fixture
def app(test_db):
    from backend.app.main import create_app

    return create_app()


@pytest.fixture
def api_http_client(app):
    """httpx-compatible client rooted at the API prefix, for IssueTrackerClient."""
    with TestClient(app, base_url="http://testserver/api") as client:
        yield client


@pytest.fixture
def make_issue():
    """Build client-side Issue models from wire-format (camelCase) overrides."""
    counter = itertools.count(1)

    def _make(**overrides) -> Issue:
        n = next(counter)
        data = {
            "id": f"issue{n}",
            "title": f"Issue {n}",
            "description": "",
            "status": "Open",
            "priority": "Medium",
            "createdAt": "2024-06-01T12:00:00Z",
            "updatedAt": None,
        }
        data.update(overrides)
        return Issue.model_validate(data)

    return _make
