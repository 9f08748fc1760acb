"""Settings parsing"""
from datetime import timedelta

import pytest

from attendance_backend.config import Settings, load_settings, parse_duration


@pytest.mark.parametrize("value,expected", [
    ("7d", timedelta(days=7)),
    ("12h", timedelta(hours=12)),
    ("30m", timedelta(minutes=30)),
    ("45s", timedelta(seconds=45)),
    ("3600", timedelta(hours=1)),
])
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "7w", "forever", "-1d"])
def test_parse_duration_rejects(value):
    with pytest.raises(ValueError):
        parse_duration(value)


def test_rate_limit_string():
    settings = Settings(rate_limit_window_ms=900000, rate_limit_max_requests=100)
    assert settings.rate_limit == "100 per 900 seconds"


def test_defaults():
    settings = Settings()
    assert settings.token_lifetime == timedelta(days=7)
    assert settings.is_development


def test_load_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./other.db")
    monkeypatch.setenv("JWT_EXPIRES_IN", "2h")
    monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "not-a-number")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
    monkeypatch.setenv("ENVIRONMENT", "production")

    settings = load_settings(str(tmp_path / "missing.env"))

    assert settings.database_url == "sqlite+aiosqlite:///./other.db"
    assert settings.token_lifetime == timedelta(hours=2)
    assert settings.rate_limit_max_requests == 100
    assert settings.rate_limit_enabled is False
    assert not settings.is_development


def test_invalid_token_lifetime(monkeypatch, tmp_path):
    monkeypatch.setenv("JWT_EXPIRES_IN", "one week")
    with pytest.raises(ValueError):
        load_settings(str(tmp_path / "missing.env"))
