"""
LLM invocation for the explanation feature.

The only place that talks to the inference API (Groq, through its OpenAI-compatible
endpoint). One configuration for every caller: fixed model id, temperature=1,
top_p=1, no streaming. The SDK client is built with max_retries=0 so each
invocation makes exactly one outbound call, bounded by the configured timeout.

Failures never escape request_explanation(): they are logged and returned as a
Failure carrying a generic message.
"""
from __future__ import annotations

from typing import Any

from openai import APIError, OpenAI

from explainer.config import Settings, get_settings
from explainer.errors import (
    CONCEPT_REQUIRED,
    GENERIC_FAILURE,
    ExplainerError,
    ExplanationUnavailableError,
    MalformedResponseError,
    TransportError,
    ValidationError,
)
from explainer.explanation.prompt import build_messages
from explainer.explanation.schemas import (
    ExplanationRequest,
    ExplanationResult,
    Failure,
    Success,
)
from explainer.logging_config import get_logger

logger = get_logger(__name__)

NO_EXPLANATION = "No explanation found."


def extract_text(response: Any) -> str:
    """
    Return choices[0].message.content from a chat completion.
    Empty choices or empty content yield NO_EXPLANATION; a response with no
    choices field at all is malformed.
    """
    choices = getattr(response, "choices", None)
    if choices is None:
        raise MalformedResponseError("Inference response has no 'choices' field")
    if not choices:
        return NO_EXPLANATION
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None) if message is not None else None
    if not content:
        return NO_EXPLANATION
    return str(content)


class ExplanationClient:
    """Builds the chat request for a concept, sends it, and shapes the reply."""

    def __init__(self, settings: Settings | None = None, client: Any | None = None) -> None:
        self.settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.settings.has_api_key:
                raise ExplanationUnavailableError("GROQ_API_KEY is not set")
            self._client = OpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                timeout=self.settings.timeout_seconds,
                max_retries=0,
            )
        return self._client

    def complete(self, request: ExplanationRequest) -> str:
        """
        Send one chat completion for the request and return the reply text.
        Raises TransportError, MalformedResponseError or ExplanationUnavailableError.
        """
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                model=self.settings.model,
                messages=build_messages(request),
                temperature=self.settings.temperature,
                top_p=self.settings.top_p,
                max_tokens=self.settings.max_tokens,
                stream=False,
            )
        except APIError as e:
            raise TransportError(f"Inference call failed: {e!s}") from e
        return extract_text(response)

    def request_explanation(self, concept: str | None) -> ExplanationResult:
        """
        Explain one concept. Returns Success(text) or Failure(reason); never raises.
        Empty or whitespace-only concepts are rejected without a network call.
        """
        try:
            request = ExplanationRequest.from_raw(concept)
        except ValidationError:
            return Failure(CONCEPT_REQUIRED)

        try:
            return Success(self.complete(request))
        except ExplanationUnavailableError as e:
            logger.warning("Explanation unavailable for %r: [%s] %s", request.concept, e.code, e.message)
        except ExplainerError as e:
            logger.error("Error calling inference API for %r: [%s] %s", request.concept, e.code, e.message)
        except Exception:
            logger.exception("Unexpected error explaining %r", request.concept)
        return Failure(GENERIC_FAILURE)


_default_client: ExplanationClient | None = None


def get_client() -> ExplanationClient:
    """Process-wide client built from get_settings()."""
    global _default_client
    if _default_client is None:
        _default_client = ExplanationClient()
    return _default_client


def get_explanation(concept: str, client: ExplanationClient | None = None) -> str:
    """Convenience wrapper: the explanation text, or the failure message."""
    result = (client or get_client()).request_explanation(concept)
    if isinstance(result, Success):
        return result.text
    return result.reason
