"""
Tests for the shared explanation client: request shape, reply shaping, and
conversion of every failure into a generic Failure.
"""
from __future__ import annotations

import logging
from types import SimpleNamespace
from unittest.mock import patch

import httpx
import openai
import pytest

from explainer.config import Settings
from explainer.errors import CONCEPT_REQUIRED, GENERIC_FAILURE, MalformedResponseError
from explainer.explanation import (
    NO_EXPLANATION,
    ExplanationClient,
    ExplanationRequest,
    Failure,
    Success,
    get_explanation,
)
from explainer.explanation.llm import extract_text
from explainer.explanation.prompt import build_messages
from explainer.tests.fakes import make_completion

GROQ_URL = "https://api.groq.com/openai/v1/chat/completions"


def test_success_returns_first_choice_text(settings, fake_openai):
    client = ExplanationClient(settings, client=fake_openai)
    result = client.request_explanation("Binary Search")
    assert result == Success("A binary search halves the range.")
    assert result.ok


def test_request_shape_is_fixed(settings, fake_openai):
    """One user message, fixed model, temperature=1, top_p=1, no streaming."""
    ExplanationClient(settings, client=fake_openai).request_explanation("  Recursion  ")
    fake_openai.chat.completions.create.assert_called_once()
    kwargs = fake_openai.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "llama3-8b-8192"
    assert kwargs["messages"] == [{"role": "user", "content": "Explain: Recursion"}]
    assert kwargs["temperature"] == 1
    assert kwargs["top_p"] == 1
    assert kwargs["stream"] is False
    assert kwargs["max_tokens"] == 1024


def test_zero_choices_yields_fallback_text(settings, fake_openai):
    fake_openai.chat.completions.create.return_value = make_completion()
    result = ExplanationClient(settings, client=fake_openai).request_explanation("Trees")
    assert result == Success(NO_EXPLANATION)


def test_empty_content_yields_fallback_text(settings, fake_openai):
    fake_openai.chat.completions.create.return_value = make_completion(None)
    result = ExplanationClient(settings, client=fake_openai).request_explanation("Trees")
    assert result == Success("No explanation found.")


def test_missing_choices_field_is_failure(settings, fake_openai, caplog):
    fake_openai.chat.completions.create.return_value = SimpleNamespace(id="cmpl-1")
    with caplog.at_level(logging.ERROR):
        result = ExplanationClient(settings, client=fake_openai).request_explanation("Trees")
    assert result == Failure(GENERIC_FAILURE)
    assert "choices" in caplog.text
    assert "MALFORMED_RESPONSE" in caplog.text


@pytest.mark.parametrize("concept", ["", "   ", "\n\t", None])
def test_empty_concept_makes_no_call(settings, fake_openai, concept):
    result = ExplanationClient(settings, client=fake_openai).request_explanation(concept)
    assert result == Failure(CONCEPT_REQUIRED)
    assert fake_openai.chat.completions.create.call_count == 0


def test_network_error_is_failure_and_logged(settings, fake_openai, caplog):
    """Exactly one call, no retry, generic reason; raw error only in the log."""
    fake_openai.chat.completions.create.side_effect = openai.APIConnectionError(
        request=httpx.Request("POST", GROQ_URL)
    )
    with caplog.at_level(logging.ERROR):
        result = ExplanationClient(settings, client=fake_openai).request_explanation("Arrays")
    assert result == Failure("Failed to fetch explanation.")
    assert fake_openai.chat.completions.create.call_count == 1
    assert "Error calling inference API" in caplog.text
    assert "TRANSPORT_ERROR" in caplog.text


def test_status_error_is_failure(settings, fake_openai):
    request = httpx.Request("POST", GROQ_URL)
    fake_openai.chat.completions.create.side_effect = openai.APIStatusError(
        "Service unavailable",
        response=httpx.Response(503, request=request),
        body=None,
    )
    result = ExplanationClient(settings, client=fake_openai).request_explanation("Arrays")
    assert isinstance(result, Failure)
    assert "503" not in result.reason


def test_unexpected_error_never_escapes(settings, fake_openai):
    fake_openai.chat.completions.create.side_effect = RuntimeError("socket exploded")
    result = ExplanationClient(settings, client=fake_openai).request_explanation("Arrays")
    assert result == Failure(GENERIC_FAILURE)
    assert "socket" not in result.reason


def test_missing_api_key_is_failure_without_client():
    client = ExplanationClient(Settings(api_key=""))
    with patch("explainer.explanation.llm.OpenAI") as openai_cls:
        result = client.request_explanation("Arrays")
    assert result == Failure(GENERIC_FAILURE)
    openai_cls.assert_not_called()


def test_sdk_client_built_without_retries(settings):
    with patch("explainer.explanation.llm.OpenAI") as openai_cls:
        openai_cls.return_value.chat.completions.create.return_value = make_completion("ok")
        result = ExplanationClient(settings).request_explanation("Strings")
    assert result == Success("ok")
    openai_cls.assert_called_once_with(
        api_key="test-key",
        base_url="https://api.groq.com/openai/v1",
        timeout=30.0,
        max_retries=0,
    )


def test_get_explanation_returns_text_or_reason(settings, fake_openai):
    client = ExplanationClient(settings, client=fake_openai)
    assert get_explanation("Arrays", client) == "A binary search halves the range."
    fake_openai.chat.completions.create.side_effect = RuntimeError("down")
    assert get_explanation("Arrays", client) == "Failed to fetch explanation."


def test_extract_text_raises_on_malformed():
    with pytest.raises(MalformedResponseError):
        extract_text(object())


def test_build_messages_single_turn():
    messages = build_messages(ExplanationRequest.from_raw(" Linked Lists "))
    assert messages == [{"role": "user", "content": "Explain: Linked Lists"}]
