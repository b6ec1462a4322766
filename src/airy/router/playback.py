"""Spoken response playback.

Every spoken response follows the same sequence: open the response
dialog, wait briefly so the dialog is on screen, speak, then on any
terminal outcome (done, error, stopped) close the dialog, open the video
modal if the response carried a video, and run the completion
continuation (normally: resume listening).

Timer announcements share the synthesizer with responses. They never
interrupt a response: one arriving mid-response is queued behind it, and
the response's continuation waits until the queue has been spoken.
"""

import logging
import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from ..tts.synthesizer import SpeakOptions

if TYPE_CHECKING:
    from ..config import TTSConfig
    from ..scheduler import CancelToken, Scheduler
    from ..session.state import CookingSession
    from ..tts.synthesizer import SpeechSynthesizer

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    """Speech output state."""

    IDLE = auto()
    SPEAKING = auto()


class PlaybackOutcome(Enum):
    """How an utterance ended."""

    DONE = "done"
    ERROR = "error"
    STOPPED = "stopped"


@dataclass
class _Utterance:
    id: int
    text: str
    video_url: str | None
    on_complete: Callable[[PlaybackOutcome], None] | None
    is_response: bool = True
    started: bool = False


class SpeechPlayback:
    """Speaks one utterance at a time through a SpeechSynthesizer.

    A new speak() supersedes the utterance in flight: the old one is
    stopped and its late callbacks, video and continuation are dropped.
    announce() queues instead of superseding.
    """

    def __init__(
        self,
        synthesizer: "SpeechSynthesizer",
        scheduler: "Scheduler",
        session: "CookingSession",
        config: "TTSConfig | None" = None,
    ) -> None:
        """Initialize playback.

        Args:
            synthesizer: Speech output engine
            scheduler: Scheduler for the pre-speech delay
            session: Session whose dialog and video flags are driven
            config: Locale and pre-speech delay
        """
        self._synthesizer = synthesizer
        self._scheduler = scheduler
        self._session = session
        self._locale = config.locale if config is not None else "ja-JP"
        self._start_delay_s = (config.start_delay_ms if config is not None else 100) / 1000

        self._lock = threading.RLock()
        self._state = PlaybackState.IDLE
        self._next_id = 0
        self._current: _Utterance | None = None
        self._start_token: "CancelToken | None" = None
        self._announcements: deque[_Utterance] = deque()
        # Continuations of finished responses waiting for queued announcements
        self._deferred: list[tuple[Callable[[PlaybackOutcome], None], PlaybackOutcome]] = []

    @property
    def state(self) -> PlaybackState:
        """Current playback state."""
        with self._lock:
            return self._state

    @property
    def is_speaking(self) -> bool:
        """True from speak() until the utterance and queued announcements end."""
        with self._lock:
            return self._state == PlaybackState.SPEAKING

    @property
    def pending_announcements(self) -> int:
        """Announcements waiting behind the utterance in flight."""
        with self._lock:
            return len(self._announcements)

    def speak(
        self,
        text: str,
        on_complete: Callable[[PlaybackOutcome], None] | None = None,
        video_url: str | None = None,
    ) -> int:
        """Speak a response.

        Args:
            text: Text to speak
            on_complete: Continuation run once the utterance ends, with its outcome
            video_url: Video to show once speaking ends

        Returns:
            Utterance id.
        """
        with self._lock:
            previous = self._current
            self._cancel_start_unsafe()
            self._deferred.clear()
            utterance = self._new_utterance_unsafe(text, video_url, on_complete)
            self._current = utterance
            self._state = PlaybackState.SPEAKING
            self._session.set_dialog_visible(True)

        if previous is not None and previous.started:
            logger.debug(f"Utterance {previous.id} superseded by {utterance.id}")
            self._stop_synthesizer()

        with self._lock:
            if self._current is utterance:
                self._start_token = self._scheduler.schedule_once(
                    self._start_delay_s, lambda: self._start(utterance)
                )
        return utterance.id

    def announce(self, text: str) -> int:
        """Speak a short announcement without the response dialog.

        Plays at once when nothing is being spoken, otherwise after the
        utterance in flight and any earlier announcements.

        Args:
            text: Announcement text

        Returns:
            Utterance id.
        """
        with self._lock:
            utterance = self._new_utterance_unsafe(text, None, None, is_response=False)
            if self._current is not None:
                self._announcements.append(utterance)
                logger.debug(f"Announcement {utterance.id} queued behind {self._current.id}")
                return utterance.id
            self._current = utterance
            self._state = PlaybackState.SPEAKING

        self._start(utterance)
        return utterance.id

    def stop(self) -> None:
        """Stop the utterance in flight and drop queued announcements.

        Continuations still run.
        """
        with self._lock:
            utterance = self._current
            self._cancel_start_unsafe()
            self._announcements.clear()
        if utterance is None:
            return
        if utterance.started:
            self._stop_synthesizer()
        self._finish(utterance, PlaybackOutcome.STOPPED)

    def _new_utterance_unsafe(
        self,
        text: str,
        video_url: str | None,
        on_complete: Callable[[PlaybackOutcome], None] | None,
        is_response: bool = True,
    ) -> _Utterance:
        self._next_id += 1
        return _Utterance(self._next_id, text, video_url, on_complete, is_response)

    def _start(self, utterance: _Utterance) -> None:
        with self._lock:
            if self._current is not utterance:
                return
            self._start_token = None
            utterance.started = True

        options = SpeakOptions(
            locale=self._locale,
            on_done=lambda: self._finish(utterance, PlaybackOutcome.DONE),
            on_error=lambda message: self._on_error(utterance, message),
            on_stopped=lambda: self._finish(utterance, PlaybackOutcome.STOPPED),
        )
        logger.info(f"Speaking: {utterance.text}")
        try:
            self._synthesizer.speak(utterance.text, options)
        except Exception as e:
            self._on_error(utterance, str(e))

    def _on_error(self, utterance: _Utterance, message: str) -> None:
        logger.warning(f"TTS error: {message}")
        self._finish(utterance, PlaybackOutcome.ERROR)

    def _finish(self, utterance: _Utterance, outcome: PlaybackOutcome) -> None:
        with self._lock:
            if self._current is not utterance:
                return
            following = self._announcements.popleft() if self._announcements else None
            self._current = following
            self._state = PlaybackState.SPEAKING if following else PlaybackState.IDLE

            if utterance.is_response:
                self._session.set_dialog_visible(False)
                if utterance.video_url:
                    self._session.set_video_modal_visible(True)

            continuations: list[tuple[Callable[[PlaybackOutcome], None], PlaybackOutcome]] = []
            if utterance.on_complete is not None:
                self._deferred.append((utterance.on_complete, outcome))
            if following is None:
                continuations, self._deferred = self._deferred, []

        logger.debug(f"Utterance {utterance.id} ended: {outcome.value}")

        if following is not None:
            self._start(following)
            return

        for on_complete, result in continuations:
            try:
                on_complete(result)
            except Exception:
                logger.exception("Playback continuation failed")

    def _stop_synthesizer(self) -> None:
        try:
            self._synthesizer.stop()
        except Exception as e:
            logger.warning(f"TTS stop failed: {e}")

    def _cancel_start_unsafe(self) -> None:
        """Cancel pending start without lock (must hold lock when calling)."""
        if self._start_token is not None:
            self._start_token.cancel()
            self._start_token = None


__all__ = ["PlaybackOutcome", "PlaybackState", "SpeechPlayback"]
