"""Recognition lifecycle and debounced dispatch.

Recognizers stream partial transcripts while the user is still talking.
The controller holds the latest transcript and only dispatches it once no
new result has arrived for the debounce window, so each utterance is
handled exactly once.

States:
    IDLE        not listening; recognizer events are ignored
    LISTENING   recognizer running, nothing heard yet
    DEBOUNCING  transcript buffered, waiting for the window to expire
"""

import logging
import threading
from collections.abc import Callable
from enum import Enum, auto
from typing import TYPE_CHECKING

from ..stt.recognizer import RecognizerEvents

if TYPE_CHECKING:
    from ..config import VoiceConfig
    from ..scheduler import CancelToken, Scheduler
    from ..session.state import CookingSession
    from ..stt.recognizer import SpeechRecognizer

logger = logging.getLogger(__name__)

START_FAILED_MESSAGE = "音声認識の起動に失敗しました"
STOP_FAILED_MESSAGE = "音声認識の停止に失敗しました"
RESTART_FAILED_MESSAGE = "音声認識の再起動に失敗しました"


class RecognitionState(Enum):
    """Listening lifecycle state."""

    IDLE = auto()
    LISTENING = auto()
    DEBOUNCING = auto()


class RecognitionController:
    """Drives a SpeechRecognizer and debounces its transcripts.

    The dispatch callback receives each finalized utterance. It runs on
    whichever thread finalized it (scheduler thread or recognizer thread).
    """

    def __init__(
        self,
        recognizer: "SpeechRecognizer",
        scheduler: "Scheduler",
        session: "CookingSession",
        config: "VoiceConfig | None" = None,
        on_utterance: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            recognizer: Streaming speech recognizer
            scheduler: Scheduler for the debounce window and restarts
            session: Session whose recognized text mirrors the transcript
            config: Locale, debounce window and restart policy
            on_utterance: Dispatch callback for finalized utterances
        """
        self._recognizer = recognizer
        self._scheduler = scheduler
        self._session = session
        self._on_utterance = on_utterance

        self._locale = config.locale if config is not None else "ja-JP"
        self._debounce_s = (config.debounce_ms if config is not None else 800) / 1000
        self._restart_delay_s = (config.restart_delay_ms if config is not None else 500) / 1000
        self._max_restarts = config.max_restart_attempts if config is not None else 3

        self._lock = threading.RLock()
        self._state = RecognitionState.IDLE
        self._transcript = ""
        self._error = ""
        self._debounce_token: "CancelToken | None" = None
        self._window = 0
        self._restart_token: "CancelToken | None" = None
        self._restart_attempts = 0

        self._recognizer.attach(
            RecognizerEvents(
                on_start=self._handle_start,
                on_end=self._handle_end,
                on_result=self._handle_result,
                on_error=self._handle_error,
            )
        )

    @property
    def state(self) -> RecognitionState:
        """Current lifecycle state."""
        with self._lock:
            return self._state

    @property
    def is_listening(self) -> bool:
        """True while the recognizer is running."""
        with self._lock:
            return self._state != RecognitionState.IDLE

    @property
    def transcript(self) -> str:
        """Transcript buffered for the pending dispatch."""
        with self._lock:
            return self._transcript

    @property
    def error(self) -> str:
        """Last recognition error message, empty if none."""
        with self._lock:
            return self._error

    def set_dispatch(self, on_utterance: Callable[[str], None] | None) -> None:
        """Set the callback that receives finalized utterances."""
        self._on_utterance = on_utterance

    # Lifecycle

    def start(self) -> bool:
        """Start listening with a fresh transcript.

        Returns:
            True if the recognizer started.
        """
        with self._lock:
            self._cancel_pending_unsafe()
            self._transcript = ""
            self._error = ""
        self._session.set_recognized_text("")

        try:
            self._recognizer.start(self._locale)
        except Exception as e:
            logger.error(f"Recognizer failed to start: {e}")
            with self._lock:
                self._state = RecognitionState.IDLE
                self._error = START_FAILED_MESSAGE
            return False

        with self._lock:
            self._state = RecognitionState.LISTENING
        logger.debug("Recognition started")
        return True

    def stop(self) -> None:
        """Stop listening and drop any buffered transcript without dispatching."""
        with self._lock:
            self._cancel_pending_unsafe()
            self._state = RecognitionState.IDLE
            self._transcript = ""
        self._stop_recognizer()

    def restart(self) -> bool:
        """Tear the recognizer down and start listening again.

        Returns:
            True if the recognizer started.
        """
        with self._lock:
            self._restart_attempts = 0
        return self._restart()

    def submit_text(self, text: str) -> bool:
        """Dispatch typed text as if it had been recognized, without debounce.

        Args:
            text: User text

        Returns:
            False if the text was blank and ignored.
        """
        if not text.strip():
            return False

        with self._lock:
            was_listening = self._state != RecognitionState.IDLE
            self._cancel_pending_unsafe()
            self._state = RecognitionState.IDLE
            self._transcript = ""
        if was_listening:
            self._stop_recognizer()

        logger.info(f"Manual input: {text}")
        self._session.set_recognized_text(text)
        self._dispatch(text)
        return True

    def shutdown(self) -> None:
        """Stop listening and release the recognizer."""
        self.stop()
        try:
            self._recognizer.destroy()
        except Exception as e:
            logger.warning(f"Recognizer destroy failed: {e}")

    # Recognizer events

    def _handle_start(self) -> None:
        with self._lock:
            if self._state != RecognitionState.LISTENING:
                return
            self._transcript = ""
        self._session.set_recognized_text("")

    def _handle_result(self, text: str) -> None:
        with self._lock:
            if self._state == RecognitionState.IDLE:
                logger.debug(f"Ignoring result while idle: {text}")
                return
            self._transcript = text
            self._restart_attempts = 0
            self._cancel_debounce_unsafe()
            self._state = RecognitionState.DEBOUNCING
            self._window += 1
            window = self._window
            self._debounce_token = self._scheduler.schedule_once(
                self._debounce_s, lambda: self._finalize(window=window)
            )
        self._session.set_recognized_text(text)

    def _handle_end(self) -> None:
        with self._lock:
            if self._state == RecognitionState.IDLE:
                return
            has_transcript = bool(self._transcript)
        if has_transcript:
            self._finalize()
        else:
            self._go_idle_and_retry("speech ended without a result")

    def _handle_error(self, message: str) -> None:
        logger.warning(f"Recognition error: {message}")
        with self._lock:
            self._error = message or "Unknown error"
            if self._state == RecognitionState.IDLE:
                return
            has_transcript = bool(self._transcript)
        if has_transcript:
            self._finalize()
        else:
            self._go_idle_and_retry(message)

    # Internals

    def _finalize(self, window: int | None = None) -> None:
        """Close the listening session and dispatch the buffered transcript once.

        Args:
            window: Debounce window that expired; stale windows are ignored
        """
        with self._lock:
            if window is not None and window != self._window:
                return
            if self._state == RecognitionState.IDLE or not self._transcript:
                return
            text = self._transcript
            self._cancel_debounce_unsafe()
            self._state = RecognitionState.IDLE
            self._transcript = ""

        logger.info(f"Utterance: {text}")
        self._stop_recognizer()
        self._dispatch(text)

    def _dispatch(self, text: str) -> None:
        callback = self._on_utterance
        if callback is None:
            logger.warning(f"No dispatch callback, dropping utterance: {text}")
            return
        try:
            callback(text)
        except Exception:
            logger.exception("Utterance handler failed")

    def _go_idle_and_retry(self, reason: str) -> None:
        with self._lock:
            self._cancel_pending_unsafe()
            self._state = RecognitionState.IDLE
            if self._restart_attempts >= self._max_restarts:
                logger.warning(
                    f"Recognition gave up after {self._restart_attempts} restarts ({reason})"
                )
                return
            self._restart_attempts += 1
            attempt = self._restart_attempts
            self._restart_token = self._scheduler.schedule_once(
                self._restart_delay_s, self._restart
            )
        logger.debug(f"Recognition restart {attempt}/{self._max_restarts} scheduled ({reason})")

    def _restart(self) -> bool:
        with self._lock:
            self._cancel_pending_unsafe()
            self._state = RecognitionState.IDLE
            self._transcript = ""
        try:
            self._recognizer.destroy()
        except Exception as e:
            logger.error(f"Recognizer restart failed: {e}")
            with self._lock:
                self._error = RESTART_FAILED_MESSAGE
            return False
        return self.start()

    def _stop_recognizer(self) -> None:
        try:
            self._recognizer.stop()
        except Exception as e:
            logger.warning(f"Recognizer stop failed: {e}")
            with self._lock:
                self._error = STOP_FAILED_MESSAGE

    def _cancel_debounce_unsafe(self) -> None:
        """Cancel debounce window without lock (must hold lock when calling)."""
        if self._debounce_token is not None:
            self._debounce_token.cancel()
            self._debounce_token = None

    def _cancel_pending_unsafe(self) -> None:
        """Cancel debounce window and restart (must hold lock when calling)."""
        self._cancel_debounce_unsafe()
        if self._restart_token is not None:
            self._restart_token.cancel()
            self._restart_token = None


__all__ = [
    "RESTART_FAILED_MESSAGE",
    "START_FAILED_MESSAGE",
    "STOP_FAILED_MESSAGE",
    "RecognitionController",
    "RecognitionState",
]
