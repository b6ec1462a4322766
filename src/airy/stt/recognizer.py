"""Streaming speech recognizer protocol.

Recognizers push events (start, partial results, end, error) to an
attached RecognizerEvents sink. Each result carries the full transcript
so far, not a delta.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


def _noop() -> None:
    return None


def _noop_text(_: str) -> None:
    return None


@dataclass
class RecognizerEvents:
    """Callbacks a recognizer reports to."""

    on_start: Callable[[], None] = _noop
    on_end: Callable[[], None] = _noop
    on_result: Callable[[str], None] = _noop_text
    on_error: Callable[[str], None] = _noop_text


@runtime_checkable
class SpeechRecognizer(Protocol):
    """Interface for streaming speech-to-text engines."""

    def attach(self, events: RecognizerEvents) -> None:
        """Set the event sink."""
        ...

    def start(self, locale: str) -> None:
        """Begin a listening session.

        Raises:
            RuntimeError: If the engine cannot start
        """
        ...

    def stop(self) -> None:
        """End the listening session; the engine reports on_end."""
        ...

    def destroy(self) -> None:
        """Tear the engine down so start() can be called afresh."""
        ...


__all__ = ["RecognizerEvents", "SpeechRecognizer"]
