"""
Dashboard-side logic: interaction state machine, speech playback, and the
HTTP client that reaches the explanation server.
"""
from __future__ import annotations

from explainer.interaction.controller import ExplanationSource, InteractionController
from explainer.interaction.service_client import ServiceClient
from explainer.interaction.speech import Pyttsx3Engine, SpeechController, SpeechEngine
from explainer.interaction.state import InteractionState, Phase
from explainer.interaction.topics import PRESET_TOPICS, list_topics

__all__ = [
    "ExplanationSource",
    "InteractionController",
    "InteractionState",
    "Phase",
    "PRESET_TOPICS",
    "Pyttsx3Engine",
    "ServiceClient",
    "SpeechController",
    "SpeechEngine",
    "list_topics",
]
