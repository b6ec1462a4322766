"""Mock recognizer for testing.

Tests drive recognition by emitting events directly.
"""

from .recognizer import RecognizerEvents


class MockRecognizer:
    """Scriptable recognizer.

    Records start/stop/destroy calls; emit_* methods deliver events to the
    attached sink as a real engine would.
    """

    def __init__(self, emit_end_on_stop: bool = False) -> None:
        """Initialize mock recognizer.

        Args:
            emit_end_on_stop: Report on_end synchronously from stop()
        """
        self._events = RecognizerEvents()
        self._emit_end_on_stop = emit_end_on_stop
        self._listening = False
        self._start_count = 0
        self._stop_count = 0
        self._destroy_count = 0
        self._locales: list[str] = []
        self._start_error: Exception | None = None

    def attach(self, events: RecognizerEvents) -> None:
        """Set the event sink."""
        self._events = events

    def start(self, locale: str) -> None:
        """Record a start."""
        if self._start_error is not None:
            raise self._start_error
        self._start_count += 1
        self._locales.append(locale)
        self._listening = True

    def stop(self) -> None:
        """Record a stop."""
        self._stop_count += 1
        was_listening = self._listening
        self._listening = False
        if self._emit_end_on_stop and was_listening:
            self._events.on_end()

    def destroy(self) -> None:
        """Record a destroy."""
        self._destroy_count += 1
        self._listening = False

    def set_start_error(self, error: Exception | None) -> None:
        """Make start() raise the given exception."""
        self._start_error = error

    # Event injection

    def emit_start(self) -> None:
        """Report that speech started."""
        self._events.on_start()

    def emit_result(self, text: str) -> None:
        """Report a (partial) transcript."""
        self._events.on_result(text)

    def emit_end(self) -> None:
        """Report that speech ended."""
        self._listening = False
        self._events.on_end()

    def emit_error(self, message: str = "no match") -> None:
        """Report a recognition error."""
        self._listening = False
        self._events.on_error(message)

    @property
    def is_listening(self) -> bool:
        """True between start() and stop()/destroy()."""
        return self._listening

    @property
    def start_count(self) -> int:
        """Number of successful start() calls."""
        return self._start_count

    @property
    def stop_count(self) -> int:
        """Number of stop() calls."""
        return self._stop_count

    @property
    def destroy_count(self) -> int:
        """Number of destroy() calls."""
        return self._destroy_count

    @property
    def locales(self) -> list[str]:
        """Locales passed to start()."""
        return self._locales.copy()


__all__ = ["MockRecognizer"]
