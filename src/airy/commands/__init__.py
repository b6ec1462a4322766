"""Voice command handlers for AIry Voice Core."""

from .timer import (
    NOTIFICATION_MESSAGES,
    Announcer,
    TimerEngine,
    TimerState,
    format_time,
    parse_duration,
)

__all__ = [
    "NOTIFICATION_MESSAGES",
    "Announcer",
    "TimerEngine",
    "TimerState",
    "format_time",
    "parse_duration",
]
