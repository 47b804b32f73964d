"""
Interaction controller: the dashboard's state machine.

Idle -> Loading on submit (or preset topic selection), Loading -> Idle when the
explanation source returns. Dispatch is refused while a request is already in
flight; the check and the loading flag are set with no await in between, so
they are atomic on the event loop.
"""
from __future__ import annotations

import asyncio
from typing import Callable, Protocol

from explainer.errors import CLIENT_FAILURE
from explainer.explanation.schemas import ExplanationResult, Success
from explainer.interaction.speech import SpeechController
from explainer.interaction.state import InteractionState
from explainer.logging_config import get_logger

logger = get_logger(__name__)


class ExplanationSource(Protocol):
    async def request_explanation(self, concept: str) -> ExplanationResult:
        ...


class InteractionController:
    """
    Owns InteractionState and drives it from user actions.

    Speech callbacks arrive on the playback thread. When a loop is given they are
    forwarded onto it, so state changes and on_change always run on the loop;
    without one, on_change must be safe to call from any thread.
    """

    def __init__(
        self,
        source: ExplanationSource,
        speech: SpeechController | None = None,
        on_change: Callable[[InteractionState], None] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.state = InteractionState()
        self._source = source
        self._on_change = on_change
        self._speech = speech
        self._loop = loop
        if speech is not None:
            speech.on_speaking_changed = self._speaking_changed

    def _emit(self) -> None:
        if self._on_change is not None:
            self._on_change(self.state)

    def _speaking_changed(self, speaking: bool) -> None:
        if self._loop is not None:
            self._loop.call_soon_threadsafe(self._set_speaking, speaking)
        else:
            self._set_speaking(speaking)

    def _set_speaking(self, speaking: bool) -> None:
        self.state.is_speaking = speaking
        self._emit()

    @property
    def can_submit(self) -> bool:
        """False while loading; mirrors the disabled submit button."""
        return not self.state.loading

    def set_query(self, text: str) -> None:
        self.state.query = text
        self._emit()

    async def submit(self) -> bool:
        """Explain the current query. Returns True if a request was dispatched."""
        return await self.fetch_explanation(self.state.query)

    async def select_topic(self, topic: str) -> bool:
        """Preset topic: set the query, then behave exactly like submit()."""
        self.set_query(topic)
        return await self.submit()

    async def fetch_explanation(self, concept: str) -> bool:
        if not concept.strip():
            return False
        if self.state.loading:
            logger.debug("Ignoring dispatch for %r: a request is already in flight", concept)
            return False

        self.state.loading = True
        self.state.explanation = ""
        self.state.error = ""
        self._emit()

        try:
            result = await self._source.request_explanation(concept)
        except Exception:
            logger.exception("Error fetching explanation for %r", concept)
            result = None

        if isinstance(result, Success):
            self.state.explanation = result.text
            self.state.error = ""
        else:
            self.state.explanation = ""
            self.state.error = result.reason if result is not None else CLIENT_FAILURE
        self.state.loading = False
        self._emit()
        return True

    def toggle_speech(self) -> None:
        """Read the current explanation aloud, or stop if already reading."""
        if self._speech is None or not self.state.explanation:
            return
        self._speech.toggle_speech(self.state.explanation)

    def teardown(self) -> None:
        """Called when the dashboard goes away; silences any active utterance."""
        if self._speech is not None:
            self._speech.teardown()
