"""
Speech controller: reads an explanation aloud, or stops it.

The controller owns the single utterance slot. Starting always cancels whatever
is in the slot first, so at most one utterance is ever active. Engine callbacks
arrive on the playback thread; the slot is guarded by a lock and each utterance
carries a token so a late callback from a superseded utterance is ignored.
"""
from __future__ import annotations

import threading
import uuid
from typing import Callable, Protocol

import pyttsx3

from explainer.errors import CapabilityUnavailableError
from explainer.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_LOCALE = "en-US"
DEFAULT_RATE = 1.0


class SpeechEngine(Protocol):
    def speak(
        self,
        text: str,
        locale: str,
        rate: float,
        on_start: Callable[[], None],
        on_end: Callable[[], None],
    ) -> None:
        ...

    def cancel(self) -> None:
        ...


def _locale_keys(locale: str) -> set[str]:
    lang = locale.replace("_", "-").lower()
    return {lang, lang.replace("-", "_")}


class Pyttsx3Engine:
    """
    Local text-to-speech through pyttsx3. Each utterance plays on a daemon thread;
    cancel() stops the run loop and waits briefly for the thread to exit. The
    driver fires finished-utterance on that thread while cancel() is waiting.
    """

    JOIN_TIMEOUT_SECONDS = 2.0

    def __init__(self) -> None:
        try:
            self._engine = pyttsx3.init()
        except (RuntimeError, OSError, ImportError) as e:
            raise CapabilityUnavailableError(f"No speech driver available: {e!s}") from e
        self._base_rate = self._engine.getProperty("rate") or 200
        self._callbacks: dict[str, tuple[Callable[[], None], Callable[[], None]]] = {}
        self._thread: threading.Thread | None = None
        self._engine.connect("started-utterance", self._on_started)
        self._engine.connect("finished-utterance", self._on_finished)

    def _on_started(self, name: str) -> None:
        callbacks = self._callbacks.get(name)
        if callbacks:
            callbacks[0]()

    def _on_finished(self, name: str, completed: bool) -> None:
        callbacks = self._callbacks.pop(name, None)
        if callbacks:
            callbacks[1]()

    def _select_voice(self, locale: str) -> None:
        keys = _locale_keys(locale)
        for voice in self._engine.getProperty("voices") or []:
            langs = [
                (lang.decode("utf-8", errors="ignore") if isinstance(lang, bytes) else str(lang)).lower()
                for lang in (getattr(voice, "languages", None) or [])
            ]
            voice_id = str(getattr(voice, "id", "")).lower()
            if any(lang.strip("\x05") in keys for lang in langs) or any(k in voice_id for k in keys):
                self._engine.setProperty("voice", voice.id)
                return

    def _run(self, name: str) -> None:
        try:
            self._engine.runAndWait()
        except RuntimeError:
            logger.exception("Speech run loop failed")
            self._on_finished(name, False)

    def _wait_for_thread(self) -> None:
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.JOIN_TIMEOUT_SECONDS)
            if thread.is_alive():
                logger.warning("Speech thread still running after %.1fs", self.JOIN_TIMEOUT_SECONDS)
                return
        self._thread = None

    def speak(
        self,
        text: str,
        locale: str,
        rate: float,
        on_start: Callable[[], None],
        on_end: Callable[[], None],
    ) -> None:
        # pyttsx3 allows one run loop per engine
        self._wait_for_thread()
        self._select_voice(locale)
        self._engine.setProperty("rate", int(self._base_rate * rate))
        name = uuid.uuid4().hex
        self._callbacks[name] = (on_start, on_end)
        self._engine.say(text, name)
        self._thread = threading.Thread(target=self._run, args=(name,), name="speech", daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        """Must not be called while holding a lock the end callback takes."""
        self._engine.stop()
        self._wait_for_thread()
        self._callbacks.clear()


class SpeechController:
    """Toggles one utterance on and off and keeps is_speaking in sync with it."""

    def __init__(
        self,
        engine_factory: Callable[[], SpeechEngine] | None = None,
        locale: str = DEFAULT_LOCALE,
        rate: float = DEFAULT_RATE,
        notify: Callable[[str], None] | None = None,
        on_speaking_changed: Callable[[bool], None] | None = None,
    ) -> None:
        self._engine_factory = engine_factory or Pyttsx3Engine
        self._engine: SpeechEngine | None = None
        self.locale = locale
        self.rate = rate
        self.notify = notify
        self.on_speaking_changed = on_speaking_changed
        self.is_speaking = False
        # Guards _active and is_speaking only; engine calls and listeners run outside it.
        self._lock = threading.Lock()
        self._active: str | None = None

    @property
    def has_active_utterance(self) -> bool:
        return self._active is not None

    def _get_engine(self) -> SpeechEngine:
        if self._engine is None:
            self._engine = self._engine_factory()
        return self._engine

    def _update(self, token: str | None, speaking: bool) -> bool:
        """Set the slot under the lock; returns True if is_speaking changed."""
        self._active = token
        changed = self.is_speaking != speaking
        self.is_speaking = speaking
        return changed

    def _announce(self, changed: bool, speaking: bool) -> None:
        if changed and self.on_speaking_changed is not None:
            self.on_speaking_changed(speaking)

    def toggle_speech(self, text: str) -> None:
        """Start reading text, or cancel if an utterance is already playing."""
        try:
            engine = self._get_engine()
        except CapabilityUnavailableError as e:
            logger.info("Speech unavailable: [%s] %s", e.code, e.message)
            if self.notify is not None:
                self.notify(e.public_message)
            return

        with self._lock:
            stopping = self._active is not None or self.is_speaking
            token = None if stopping else uuid.uuid4().hex
            changed = self._update(token, False)

        engine.cancel()
        if stopping:
            self._announce(changed, False)
            return

        try:
            engine.speak(
                text,
                self.locale,
                self.rate,
                on_start=lambda: self._handle_start(token),
                on_end=lambda: self._handle_end(token),
            )
        except Exception:
            logger.exception("Speech playback failed to start")
            self._handle_end(token)

    def _handle_start(self, token: str) -> None:
        with self._lock:
            if self._active != token:
                return
            changed = self._update(token, True)
        self._announce(changed, True)

    def _handle_end(self, token: str) -> None:
        with self._lock:
            if self._active != token:
                return
            changed = self._update(None, False)
        self._announce(changed, False)

    def teardown(self) -> None:
        """Cancel whatever is playing, whatever is_speaking last said."""
        with self._lock:
            changed = self._update(None, False)
        if self._engine is not None:
            self._engine.cancel()
        self._announce(changed, False)
