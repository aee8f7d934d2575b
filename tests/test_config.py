"""
Tests for environment-driven settings.
"""

import pytest

from config import Settings, get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    for name in ("RATE_LIMIT", "SHARE_URL", "MAX_SESSIONS", "LOG_LEVEL", "HOST", "PORT"):
        monkeypatch.delenv(f"SLIDE2048_{name}", raising=False)

    assert get_settings() == Settings()


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("SLIDE2048_RATE_LIMIT", "5/second")
    monkeypatch.setenv("SLIDE2048_SHARE_URL", "https://play.example.org")
    monkeypatch.setenv("SLIDE2048_MAX_SESSIONS", "12")
    monkeypatch.setenv("SLIDE2048_LOG_LEVEL", "debug")
    monkeypatch.setenv("SLIDE2048_HOST", "0.0.0.0")
    monkeypatch.setenv("SLIDE2048_PORT", "9000")

    settings = get_settings()

    assert settings.rate_limit == "5/second"
    assert settings.share_url == "https://play.example.org"
    assert settings.max_sessions == 12
    assert settings.log_level == "DEBUG"
    assert settings.host == "0.0.0.0"
    assert settings.port == 9000


def test_settings_are_cached(monkeypatch):
    monkeypatch.setenv("SLIDE2048_PORT", "9001")
    first = get_settings()
    monkeypatch.setenv("SLIDE2048_PORT", "9002")
    assert get_settings() is first


@pytest.mark.parametrize("value", ["0", "-3"])
def test_max_sessions_must_be_positive(monkeypatch, value):
    monkeypatch.setenv("SLIDE2048_MAX_SESSIONS", value)
    with pytest.raises(ValueError):
        get_settings()


def test_max_sessions_must_be_an_integer(monkeypatch):
    monkeypatch.setenv("SLIDE2048_MAX_SESSIONS", "many")
    with pytest.raises(ValueError):
        get_settings()
