"""
Tests for password hashing, JWT helpers and startup security validation.
"""

import pytest

from backend.app.auth.jwt import (
    TokenExpiredError,
    create_access_token,
    decode_access_token,
    get_token_expiry,
)
from core.security import (
    SecurityConfigError,
    hash_password,
    validate_security_config,
    verify_password,
)
from core.security.validation import validate_cors_origins, validate_database_url

STRONG_SECRET = "k" * 16 + "0123456789abcdef"


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret-pw", rounds=4)
        assert hashed != "s3cret-pw"
        assert verify_password("s3cret-pw", hashed)
        assert not verify_password("wrong", hashed)

    def test_hashes_are_salted(self):
        assert hash_password("same", rounds=4) != hash_password("same", rounds=4)

    def test_input_truncated_at_72_bytes(self):
        hashed = hash_password("a" * 72, rounds=4)
        assert verify_password("a" * 72 + "ignored", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestJWT:
    def test_round_trip_claims(self):
        token = create_access_token({"sub": "42"})
        payload = decode_access_token(token)
        assert payload["sub"] == "42"
        assert payload["jti"]
        assert get_token_expiry(token) is not None

    def test_each_token_has_unique_jti(self):
        first = decode_access_token(create_access_token({"sub": "1"}))
        second = decode_access_token(create_access_token({"sub": "1"}))
        assert first["jti"] != second["jti"]

    def test_expired_token(self):
        token = create_access_token({"sub": "1"}, expires_minutes=-1)
        with pytest.raises(TokenExpiredError):
            decode_access_token(token)
        assert get_token_expiry(token) is None

    def test_tampered_token(self):
        token = create_access_token({"sub": "1"})
        with pytest.raises(ValueError):
            decode_access_token(token[:-4] + "AAAA")


class TestSecurityValidation:
    def test_default_secret_rejected(self):
        with pytest.raises(SecurityConfigError) as exc_info:
            validate_security_config(jwt_secret="CHANGE_ME")
        assert "default value" in str(exc_info.value)

    def test_short_secret_rejected(self):
        with pytest.raises(SecurityConfigError):
            validate_security_config(jwt_secret="short-but-unique")

    def test_strong_secret_passes(self):
        result = validate_security_config(
            jwt_secret=STRONG_SECRET,
            cors_origins="http://localhost:5173",
            database_url="sqlite:///issues.db",
        )
        assert result.valid
        assert result.warnings == []

    def test_warnings_do_not_abort_startup(self):
        result = validate_security_config(
            jwt_secret=STRONG_SECRET,
            cors_origins="*",
            database_url="sqlite:///issues.db",
            is_production=True,
        )
        assert result.valid
        assert len(result.warnings) == 2

    def test_wildcard_cors_warns(self):
        valid, error, warning = validate_cors_origins("*")
        assert valid and error is None
        assert "all origins" in warning

    def test_sqlite_in_production_warns(self):
        valid, _, warning = validate_database_url("sqlite:///x.db", is_production=True)
        assert valid
        assert "SQLite" in warning

    def test_weak_database_password_warns(self):
        _, _, warning = validate_database_url("postgresql://app:postgres@db/issues")
        assert "weak" in warning
