from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from explainer.config import Settings
from explainer.tests.fakes import FakeSpeechEngine, make_completion


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_key="test-key",
        model="llama3-8b-8192",
        base_url="https://api.groq.com/openai/v1",
        timeout_seconds=30.0,
        max_tokens=1024,
    )


@pytest.fixture
def fake_openai() -> MagicMock:
    """OpenAI-like client whose chat.completions.create returns one completion."""
    client = MagicMock()
    client.chat.completions.create.return_value = make_completion("A binary search halves the range.")
    return client


@pytest.fixture
def speech_engine() -> FakeSpeechEngine:
    return FakeSpeechEngine()
