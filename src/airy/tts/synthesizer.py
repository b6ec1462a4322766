"""Speech synthesizer protocol definition."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass
class SpeakOptions:
    """Per-utterance options.

    Exactly one of on_done, on_error or on_stopped is called for every
    utterance that was started.
    """

    locale: str = "ja-JP"
    on_done: Callable[[], None] | None = None
    on_error: Callable[[str], None] | None = None
    on_stopped: Callable[[], None] | None = None


@runtime_checkable
class SpeechSynthesizer(Protocol):
    """Protocol for speech output engines."""

    def speak(self, text: str, options: SpeakOptions | None = None) -> None:
        """Start speaking text. Returns without waiting for completion.

        An utterance still in progress is stopped first and reports
        on_stopped before the new one starts.

        Args:
            text: Text to speak
            options: Locale and completion callbacks
        """
        ...

    def stop(self) -> None:
        """Stop the current utterance, if any."""
        ...

    @property
    def is_speaking(self) -> bool:
        """Return True while an utterance is in progress."""
        ...


__all__ = ["SpeakOptions", "SpeechSynthesizer"]
