"""
Prompt construction for the explanation feature.

Single-turn only: one user message derived from the concept. No system prompt,
no history.
"""
from __future__ import annotations

from explainer.explanation.schemas import ExplanationRequest

PROMPT_PREFIX = "Explain: "


def build_messages(request: ExplanationRequest) -> list[dict[str, str]]:
    """Return the chat message list for one concept."""
    return [{"role": "user", "content": f"{PROMPT_PREFIX}{request.concept}"}]
