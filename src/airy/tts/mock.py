"""Mock synthesizer for testing.

Provides a controllable mock implementation for unit and integration testing.
"""

from .synthesizer import SpeakOptions


class MockSynthesizer:
    """Mock synthesizer that records utterances.

    With auto_complete=True every utterance finishes immediately. Otherwise
    the test finishes it with finish() or fail().
    """

    def __init__(self, auto_complete: bool = True) -> None:
        """Initialize mock synthesizer.

        Args:
            auto_complete: Call on_done as soon as speak() is called
        """
        self._auto_complete = auto_complete
        self._spoken: list[str] = []
        self._locales: list[str] = []
        self._current: SpeakOptions | None = None
        self._raise_on_speak: Exception | None = None
        self._stop_count = 0

    def speak(self, text: str, options: SpeakOptions | None = None) -> None:
        """Record text and start a fake utterance."""
        if self._raise_on_speak is not None:
            raise self._raise_on_speak

        options = options or SpeakOptions()
        if self._current is not None:
            self.stop()
        self._spoken.append(text)
        self._locales.append(options.locale)
        self._current = options

        if self._auto_complete:
            self.finish()

    def stop(self) -> None:
        """Stop the current utterance, reporting on_stopped."""
        self._stop_count += 1
        options = self._current
        self._current = None
        if options is not None and options.on_stopped is not None:
            options.on_stopped()

    def finish(self) -> None:
        """Complete the current utterance successfully."""
        options = self._current
        self._current = None
        if options is not None and options.on_done is not None:
            options.on_done()

    def fail(self, message: str = "synthesis failed") -> None:
        """Complete the current utterance with an error."""
        options = self._current
        self._current = None
        if options is not None and options.on_error is not None:
            options.on_error(message)

    def set_raise_on_speak(self, error: Exception | None) -> None:
        """Make speak() raise the given exception."""
        self._raise_on_speak = error

    @property
    def is_speaking(self) -> bool:
        """Return True while an utterance is pending."""
        return self._current is not None

    @property
    def spoken_texts(self) -> list[str]:
        """Get list of spoken texts."""
        return self._spoken.copy()

    @property
    def locales(self) -> list[str]:
        """Locales passed with each utterance."""
        return self._locales.copy()

    @property
    def stop_count(self) -> int:
        """Number of stop() calls."""
        return self._stop_count

    def clear(self) -> None:
        """Reset recorded state."""
        self._spoken.clear()
        self._locales.clear()
        self._stop_count = 0


__all__ = ["MockSynthesizer"]
