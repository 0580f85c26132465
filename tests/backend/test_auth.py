from backend.app.auth.jwt import create_access_token, decode_access_token
from backend.app.models import TokenBlacklist, User
from core.repositories import UserRepository

TEST_PASSWORD = "correct-horse"


def test_register_returns_user_and_token(test_app_client):
    resp = test_app_client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "Alice@Example.com", "password": "s3cret-pw"},
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["user"]["username"] == "alice"
    assert data["user"]["email"] == "alice@example.com"
    assert set(data["user"]) == {"id", "username", "email"}
    assert decode_access_token(data["token"])["sub"] == str(data["user"]["id"])


def test_register_never_exposes_password_hash(test_app_client):
    resp = test_app_client.post(
        "/api/auth/register",
        json={"username": "bob", "email": "bob@example.com", "password": "hunter22"},
    )
    assert "password" not in resp.text.lower()


def test_register_duplicate_email_rejected(test_app_client, registered_user):
    resp = test_app_client.post(
        "/api/auth/register",
        json={"username": "other", "email": "TESTER@example.com", "password": "whatever1"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email is already registered"


def test_register_duplicate_username_rejected(test_app_client, registered_user):
    resp = test_app_client.post(
        "/api/auth/register",
        json={"username": "tester", "email": "fresh@example.com", "password": "whatever1"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Username is already taken"


def test_register_unique_constraint_race_is_400(test_app_client, registered_user, test_db, monkeypatch):
    # Both lookups miss, as when another request inserts between check and insert
    monkeypatch.setattr(UserRepository, "get_by_email", lambda self, email: None)
    monkeypatch.setattr(UserRepository, "get_by_username", lambda self, username: None)

    resp = test_app_client.post(
        "/api/auth/register",
        json={"username": "tester", "email": "tester@example.com", "password": "whatever1"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email or username is already registered"

    with test_db.session() as session:
        assert session.query(User).count() == 1


def test_register_validation_errors_are_400(test_app_client):
    resp = test_app_client.post(
        "/api/auth/register",
        json={"username": "x", "email": "not-an-email", "password": "123"},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["status_code"] == 400
    fields = {tuple(err["loc"]) for err in body["errors"]}
    assert ("username",) in fields
    assert ("email",) in fields
    assert ("password",) in fields


def test_login_success(test_app_client, registered_user):
    resp = test_app_client.post(
        "/api/auth/login",
        json={"email": "tester@example.com", "password": TEST_PASSWORD},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["user"] == registered_user["user"]
    assert data["token"]


def test_login_wrong_password(test_app_client, registered_user):
    resp = test_app_client.post(
        "/api/auth/login",
        json={"email": "tester@example.com", "password": "wrong-password"},
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid email or password"


def test_login_unknown_email_same_error(test_app_client):
    resp = test_app_client.post(
        "/api/auth/login",
        json={"email": "ghost@example.com", "password": "whatever"},
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid email or password"


def test_verify_returns_user(test_app_client, registered_user, auth_headers):
    resp = test_app_client.get("/api/auth/verify", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"user": registered_user["user"]}


def test_verify_requires_token(test_app_client):
    resp = test_app_client.get("/api/auth/verify")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Not authenticated"


def test_verify_rejects_expired_token(test_app_client, expired_token):
    resp = test_app_client.get(
        "/api/auth/verify", headers={"Authorization": f"Bearer {expired_token}"}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token has expired"


def test_verify_rejects_garbage_token(test_app_client):
    resp = test_app_client.get("/api/auth/verify", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid authentication credentials"


def test_verify_rejects_token_for_deleted_user(test_app_client, test_db):
    token = create_access_token({"sub": "9999"})
    resp = test_app_client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "User not found"


def test_logout_revokes_token(test_app_client, auth_headers, test_db):
    resp = test_app_client.post("/api/auth/logout", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logged out"}

    resp = test_app_client.get("/api/auth/verify", headers=auth_headers)
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token has been revoked"

    resp = test_app_client.get("/api/issues", headers=auth_headers)
    assert resp.status_code == 401

    with test_db.session() as session:
        assert session.query(TokenBlacklist).count() == 1


def test_logout_without_token_still_succeeds(test_app_client):
    resp = test_app_client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logged out"}


def test_logout_with_expired_token_still_succeeds(test_app_client, expired_token):
    resp = test_app_client.post(
        "/api/auth/logout", headers={"Authorization": f"Bearer {expired_token}"}
    )
    assert resp.status_code == 200


def test_password_is_stored_hashed(test_app_client, registered_user, test_db):
    with test_db.session() as session:
        user = session.query(User).filter_by(username="tester").one()
        assert user.password_hash != TEST_PASSWORD
        assert user.password_hash.startswith("$2")
