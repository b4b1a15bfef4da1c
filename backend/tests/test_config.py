import pytest
from pydantic import ValidationError

from tasktrack.config import Settings


def test_from_env(monkeypatch):
    monkeypatch.setenv("TASKTRACK_JWT_SECRET", "env-secret-0123456789")
    monkeypatch.setenv("TASKTRACK_MAX_PAGE_SIZE", "25")
    monkeypatch.setenv("TASKTRACK_CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("TASKTRACK_ENV", "Production")

    settings = Settings.from_env()

    assert settings.jwt_secret == "env-secret-0123456789"
    assert settings.max_page_size == 25
    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.is_production


def test_defaults_generate_a_secret(monkeypatch):
    monkeypatch.delenv("TASKTRACK_JWT_SECRET", raising=False)

    first, second = Settings(), Settings()

    assert len(first.jwt_secret) >= 16
    assert first.jwt_secret != second.jwt_secret
    assert first.access_token_ttl_minutes == 15
    assert first.refresh_token_ttl_days == 7
    assert not first.is_production


def test_short_secret_rejected():
    with pytest.raises(ValidationError):
        Settings(jwt_secret="short")


def test_production_requires_explicit_secret(monkeypatch):
    monkeypatch.delenv("TASKTRACK_JWT_SECRET", raising=False)
    monkeypatch.setenv("TASKTRACK_ENV", "production")

    with pytest.raises(ValidationError, match="TASKTRACK_JWT_SECRET"):
        Settings.from_env()
    with pytest.raises(ValidationError):
        Settings(environment="production")
    assert Settings(environment="production", jwt_secret="prod-secret-0123456789").is_production
