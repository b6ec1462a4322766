"""Scheduler backed by threading.Timer."""

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class TimerHandle:
    """Cancel token for a threading.Timer callback."""

    def __init__(
        self,
        callback: Callable[[], None],
        on_finish: Callable[["TimerHandle"], None] | None = None,
    ) -> None:
        """Initialize handle.

        Args:
            callback: Function to run when the timer fires
            on_finish: Called once the handle has run or been cancelled
        """
        self._callback = callback
        self._on_finish = on_finish
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()
        self._cancelled = False
        self._fired = False

    @property
    def cancelled(self) -> bool:
        """Return True if cancelled before running."""
        with self._lock:
            return self._cancelled

    def start(self, delay_seconds: float) -> None:
        """Arm the timer."""
        with self._lock:
            self._timer = threading.Timer(delay_seconds, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """Cancel the pending callback."""
        with self._lock:
            if self._fired or self._cancelled:
                return
            self._cancelled = True
            self._cancel_timer_unsafe()
        self._finish()

    def _cancel_timer_unsafe(self) -> None:
        """Cancel timer without lock (must hold lock when calling)."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._fired = True
            self._timer = None
        try:
            self._callback()
        except Exception:
            logger.exception("Scheduled callback failed")
        finally:
            self._finish()

    def _finish(self) -> None:
        if self._on_finish is not None:
            self._on_finish(self)


class ThreadingScheduler:
    """Runs each callback on its own daemon timer thread.

    Callbacks run on the timer thread, so components that share state
    with the caller must guard it with a lock.
    """

    def __init__(self) -> None:
        """Initialize scheduler."""
        self._pending: set[TimerHandle] = set()
        self._lock = threading.Lock()

    def schedule_once(self, delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay_seconds.

        Args:
            delay_seconds: Delay before running
            callback: Function to call

        Returns:
            TimerHandle that cancels the callback.
        """
        handle = TimerHandle(callback, on_finish=self._discard)
        with self._lock:
            self._pending.add(handle)
        handle.start(max(0.0, delay_seconds))
        return handle

    def shutdown(self) -> None:
        """Cancel all pending callbacks."""
        with self._lock:
            pending = list(self._pending)
        for handle in pending:
            handle.cancel()
        if pending:
            logger.debug(f"Scheduler shut down with {len(pending)} pending callbacks")

    @property
    def pending_count(self) -> int:
        """Number of callbacks not yet run or cancelled."""
        with self._lock:
            return len(self._pending)

    def _discard(self, handle: TimerHandle) -> None:
        with self._lock:
            self._pending.discard(handle)


__all__ = ["ThreadingScheduler", "TimerHandle"]
