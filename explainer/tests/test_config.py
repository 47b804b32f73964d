"""
Tests for environment-driven settings and dashboard username resolution.
"""
from __future__ import annotations

import pytest

from explainer.config import DEFAULT_MODEL, DEFAULT_TIMEOUT_SECONDS, Settings, get_settings, reset_settings
from explainer.dashboard import _resolve_username


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings()
    yield
    reset_settings()


def test_defaults(monkeypatch):
    for name in ("GROQ_API_KEY", "EXPLAINER_MODEL", "EXPLAINER_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    s = Settings()
    assert s.model == DEFAULT_MODEL
    assert s.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
    assert s.temperature == 1.0
    assert s.top_p == 1.0
    assert not s.has_api_key


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "  gsk-test  ")
    monkeypatch.setenv("EXPLAINER_MODEL", "llama-3.1-8b-instant")
    monkeypatch.setenv("EXPLAINER_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("EXPLAINER_CORS_ORIGINS", "http://a.test, http://b.test")
    s = get_settings()
    assert s.api_key == "gsk-test"
    assert s.has_api_key
    assert s.model == "llama-3.1-8b-instant"
    assert s.timeout_seconds == 12.5
    assert s.cors_origins == ["http://a.test", "http://b.test"]
    assert get_settings() is s


def test_bad_numeric_values_fall_back(monkeypatch):
    monkeypatch.setenv("EXPLAINER_TIMEOUT_SECONDS", "soon")
    monkeypatch.setenv("EXPLAINER_MAX_TOKENS", "lots")
    s = Settings()
    assert s.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
    assert s.max_tokens == 1024


def test_username_from_flag_wins(monkeypatch):
    monkeypatch.setenv("EXPLAINER_USERNAME", "env-user")
    assert _resolve_username("alice") == "alice"


def test_username_blocks_until_given(monkeypatch):
    monkeypatch.delenv("EXPLAINER_USERNAME", raising=False)
    answers = iter(["", "   ", "bob"])
    assert _resolve_username(None, read=lambda prompt: next(answers)) == "bob"
