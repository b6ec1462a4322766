"""Scheduler protocol definition.

Every delayed action in the voice loop (debounce window, timer tick,
pre-speech delay, recognition restart) goes through schedule_once so
tests can drive time by hand.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class CancelToken(Protocol):
    """Handle for a scheduled callback."""

    def cancel(self) -> None:
        """Cancel the callback.

        After cancel() returns the callback will not run. Cancelling a
        callback that already ran, or was already cancelled, is a no-op.
        """
        ...

    @property
    def cancelled(self) -> bool:
        """Return True if cancel() was called before the callback ran."""
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Protocol for one-shot delayed callbacks."""

    def schedule_once(self, delay_seconds: float, callback: Callable[[], None]) -> CancelToken:
        """Run callback once after delay_seconds.

        Args:
            delay_seconds: Delay before running, 0 or more
            callback: Function to call

        Returns:
            Token that cancels the pending callback.
        """
        ...

    def shutdown(self) -> None:
        """Cancel everything still pending."""
        ...


__all__ = ["CancelToken", "Scheduler"]
