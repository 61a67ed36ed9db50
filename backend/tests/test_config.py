"""Tests for settings loading."""

from usage_ledger.core.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.APP_NAME == "Billing System API"
    assert settings.PORT == 3000
    assert settings.CLIENT_MAX_RETRIES == 3
    assert settings.version == settings.APP_VERSION


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("APP_DATABASE_DSN", "postgresql://billing@db/billing")
    monkeypatch.setenv("CLIENT_MAX_RETRIES", "5")
    monkeypatch.setenv("CLIENT_TIMEOUT_SECONDS", "2.5")
    settings = Settings(_env_file=None)
    assert settings.APP_DATABASE_DSN == "postgresql://billing@db/billing"
    assert settings.CLIENT_MAX_RETRIES == 5
    assert settings.CLIENT_TIMEOUT_SECONDS == 2.5
