"""
Error taxonomy. Each error carries a short public message safe to show a user;
the underlying cause is only ever logged.
"""
from __future__ import annotations

from typing import Any

GENERIC_FAILURE = "Failed to fetch explanation."
CLIENT_FAILURE = "Something went wrong. Please try again."
CONCEPT_REQUIRED = "Concept is required"
INVALID_BODY = "Invalid request body"
INTERNAL_ERROR = "Internal Server Error"
SPEECH_UNSUPPORTED = "Text-to-Speech is not supported in this environment."


class ExplainerError(Exception):
    """Base error. status_code is used when the error reaches the HTTP boundary."""

    code = "EXPLAINER_ERROR"
    status_code = 500
    public_message = INTERNAL_ERROR

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message or self.public_message)
        self.message = message or self.public_message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Payload for API responses. Never includes the internal message or details."""
        return {"error": self.public_message}


class ValidationError(ExplainerError):
    """Missing or empty concept; raised before any network call."""

    code = "VALIDATION_ERROR"
    status_code = 400
    public_message = CONCEPT_REQUIRED


class TransportError(ExplainerError):
    """Network failure, timeout or non-success status from the inference API."""

    code = "TRANSPORT_ERROR"
    status_code = 500
    public_message = GENERIC_FAILURE


class MalformedResponseError(ExplainerError):
    """Inference response lacks the choices list entirely."""

    code = "MALFORMED_RESPONSE"
    status_code = 500
    public_message = GENERIC_FAILURE


class CapabilityUnavailableError(ExplainerError):
    """Host has no usable text-to-speech engine."""

    code = "CAPABILITY_UNAVAILABLE"
    public_message = SPEECH_UNSUPPORTED


class ExplanationUnavailableError(ExplainerError):
    """No inference credential configured on the server."""

    code = "NOT_CONFIGURED"
    status_code = 500
    public_message = GENERIC_FAILURE
