"""Tests for environment-driven settings."""

from shepherd.config import ShepherdSettings


def test_defaults():
    settings = ShepherdSettings(_env_file=None)
    assert settings.search_debounce == 0.3
    assert settings.search_limit == 10
    assert settings.request_timeout == 10.0
    assert settings.reconnect.max_attempts == 5


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SHEPHERD_API_URL", "https://api.example.org")
    monkeypatch.setenv("SHEPHERD_SEARCH_DEBOUNCE_MS", "150")
    monkeypatch.setenv("SHEPHERD_RECONNECT__MAX_ATTEMPTS", "2")
    settings = ShepherdSettings(_env_file=None)
    assert settings.api_url == "https://api.example.org"
    assert settings.search_debounce == 0.15
    assert settings.reconnect.max_attempts == 2
