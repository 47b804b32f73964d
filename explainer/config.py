"""
Runtime configuration, read from the environment (and a local .env file if present).
The inference credential is only ever read here, on the server side.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

DEFAULT_MODEL = "llama3-8b-8192"
DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_TOKENS = 1024
DEFAULT_API_URL = "http://127.0.0.1:8000"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    """Server and dashboard settings. Sampling parameters are fixed, not configurable."""
    api_key: str = field(default_factory=lambda: os.environ.get("GROQ_API_KEY", "").strip())
    model: str = field(default_factory=lambda: os.environ.get("EXPLAINER_MODEL", "").strip() or DEFAULT_MODEL)
    base_url: str = field(default_factory=lambda: os.environ.get("EXPLAINER_BASE_URL", "").strip() or DEFAULT_BASE_URL)
    timeout_seconds: float = field(default_factory=lambda: _env_float("EXPLAINER_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
    max_tokens: int = field(default_factory=lambda: _env_int("EXPLAINER_MAX_TOKENS", DEFAULT_MAX_TOKENS))
    log_level: str = field(default_factory=lambda: os.environ.get("EXPLAINER_LOG_LEVEL", "").strip() or "INFO")
    api_url: str = field(default_factory=lambda: os.environ.get("EXPLAINER_API_URL", "").strip() or DEFAULT_API_URL)
    cors_origins: list[str] = field(
        default_factory=lambda: _env_list(
            "EXPLAINER_CORS_ORIGINS",
            ["http://localhost:3000", "http://127.0.0.1:3000"],
        )
    )

    # Fixed sampling defaults shared by every call site.
    temperature: float = 1.0
    top_p: float = 1.0

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, built on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
