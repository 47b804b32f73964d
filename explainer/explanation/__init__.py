"""
Concept explanation feature: one shared client for every call site.
Single-turn, stateless; the inference credential stays on the server.
"""
from __future__ import annotations

from explainer.explanation.llm import (
    NO_EXPLANATION,
    ExplanationClient,
    get_client,
    get_explanation,
)
from explainer.explanation.schemas import (
    ExplanationRequest,
    ExplanationResult,
    Failure,
    Success,
)

__all__ = [
    "NO_EXPLANATION",
    "ExplanationClient",
    "ExplanationRequest",
    "ExplanationResult",
    "Failure",
    "Success",
    "get_client",
    "get_explanation",
]
