"""Cancellable one-shot scheduling for the voice loop."""

from .mock import ManualHandle, ManualScheduler
from .scheduler import CancelToken, Scheduler
from .threaded import ThreadingScheduler, TimerHandle


def create_scheduler(use_mock: bool = False) -> Scheduler:
    """Create a scheduler.

    Args:
        use_mock: If True, return a manual fake-clock scheduler

    Returns:
        Scheduler implementation.
    """
    if use_mock:
        return ManualScheduler()
    return ThreadingScheduler()


__all__ = [
    "CancelToken",
    "ManualHandle",
    "ManualScheduler",
    "Scheduler",
    "ThreadingScheduler",
    "TimerHandle",
    "create_scheduler",
]
