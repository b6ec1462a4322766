"""Manual scheduler for testing.

Time only moves when the test calls advance(), so debounce windows and
timer ticks can be stepped deterministically.
"""

from collections.abc import Callable

# Absorbs float drift when tests advance in fractional steps
_EPSILON = 1e-9


class ManualHandle:
    """Cancel token for a ManualScheduler entry."""

    def __init__(self, due: float, seq: int, callback: Callable[[], None]) -> None:
        self.due = due
        self.seq = seq
        self.callback = callback
        self._cancelled = False
        self.fired = False

    @property
    def cancelled(self) -> bool:
        """Return True if cancelled before running."""
        return self._cancelled

    def cancel(self) -> None:
        """Cancel the pending callback."""
        if not self.fired:
            self._cancelled = True


class ManualScheduler:
    """Fake-clock scheduler.

    Callbacks run synchronously inside advance(), in due-time order.
    Callbacks scheduled while advancing run too if they fall due before
    the new time.
    """

    def __init__(self) -> None:
        """Initialize with the clock at zero."""
        self._now = 0.0
        self._seq = 0
        self._entries: list[ManualHandle] = []

    @property
    def now(self) -> float:
        """Current fake time in seconds."""
        return self._now

    def schedule_once(self, delay_seconds: float, callback: Callable[[], None]) -> ManualHandle:
        """Queue callback to run delay_seconds after now."""
        self._seq += 1
        handle = ManualHandle(self._now + max(0.0, delay_seconds), self._seq, callback)
        self._entries.append(handle)
        return handle

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running everything that falls due.

        Args:
            seconds: How far to move the clock

        Returns:
            Number of callbacks run.
        """
        target = self._now + seconds
        ran = 0
        while True:
            due = [h for h in self._entries if not h.cancelled and h.due <= target + _EPSILON]
            if not due:
                break
            handle = min(due, key=lambda h: (h.due, h.seq))
            self._entries.remove(handle)
            self._now = max(self._now, handle.due)
            handle.fired = True
            handle.callback()
            ran += 1
        self._now = target
        self._entries = [h for h in self._entries if not h.cancelled]
        return ran

    def run_all(self, limit: int = 10_000) -> int:
        """Run pending callbacks until none remain.

        Args:
            limit: Safety cap for self-rescheduling callbacks

        Returns:
            Number of callbacks run.
        """
        ran = 0
        while ran < limit:
            live = [h for h in self._entries if not h.cancelled]
            if not live:
                break
            next_due = min(h.due for h in live)
            ran += self.advance(next_due - self._now)
        return ran

    def shutdown(self) -> None:
        """Cancel all pending callbacks."""
        for handle in self._entries:
            handle.cancel()
        self._entries.clear()

    @property
    def pending_count(self) -> int:
        """Number of callbacks waiting to run."""
        return sum(1 for h in self._entries if not h.cancelled)


__all__ = ["ManualHandle", "ManualScheduler"]
