from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from backend.app.auth.jwt import create_access_token

TEST_PASSWORD = "correct-horse"


@pytest.fixture
def test_app_client(app) -> Iterator[TestClient]:
    with TestClient(app) as client:
        yield client


@pytest.fixture
def registered_user(test_app_client) -> dict:
    """Register a user through the API; returns the {user, token} body."""
    resp = test_app_client.post(
        "/api/auth/register",
        json={"username": "tester", "email": "tester@example.com", "password": TEST_PASSWORD},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def auth_headers(registered_user) -> dict:
    return {"Authorization": f"Bearer {registered_user['token']}"}


@pytest.fixture
def expired_token(registered_user) -> str:
    return create_access_token({"sub": str(registered_user["user"]["id"])}, expires_minutes=-5)


@pytest.fixture
def create_issue(test_app_client, auth_headers):
    def _create(**fields) -> dict:
        body = {"title": "Untitled"}
        body.update(fields)
        resp = test_app_client.post("/api/issues", json=body, headers=auth_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create
