from pathlib import Path

import pytest

from core.config import Settings


def test_defaults(monkeypatch):
    for key in ("API_PREFIX", "DATABASE_URL", "API_BASE_URL", "TOKEN_FILE"):
        monkeypatch.delenv(key, raising=False)
    settings = Settings(_env_file=None)
    assert settings.api_prefix == "/api"
    assert settings.jwt_algorithm == "HS256"
    assert settings.database_url.startswith("sqlite")
    assert settings.token_file.name == "token"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("API_BASE_URL", "http://tracker.internal/api")
    monkeypatch.setenv("TOKEN_FILE", str(tmp_path / "tok"))
    monkeypatch.setenv("REQUEST_TIMEOUT", "5")
    settings = Settings(_env_file=None)
    assert settings.api_base_url == "http://tracker.internal/api"
    assert settings.token_file == Path(tmp_path / "tok")
    assert settings.request_timeout == 5.0


def test_cors_origins_list(monkeypatch):
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "http://a.test, http://b.test,")
    assert Settings(_env_file=None).cors_origins_list == ["http://a.test", "http://b.test"]


def test_default_secret_rejected_in_production(monkeypatch):
    monkeypatch.setenv("ENV", "production")
    monkeypatch.setenv("JWT_SECRET_KEY", "CHANGE_ME")
    with pytest.raises(ValueError):
        Settings(_env_file=None)


def test_default_secret_warns_in_development(monkeypatch):
    monkeypatch.setenv("ENV", "development")
    monkeypatch.setenv("JWT_SECRET_KEY", "CHANGE_ME")
    with pytest.warns(UserWarning):
        Settings(_env_file=None)


def test_production_config_reports_sqlite(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///prod.db")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    errors, warnings = Settings(_env_file=None).validate_production_config()
    assert errors == []
    assert any("SQLite" in w for w in warnings)
    assert any("BCRYPT_ROUNDS" in w for w in warnings)
