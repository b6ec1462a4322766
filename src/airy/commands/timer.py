"""Cooking timer for voice commands.

One countdown per cooking session. A duration is first staged in a
confirmation dialog (by voice or manual entry) and only counts down once
confirmed. Remaining-time announcements are spoken at fixed marks and an
alert loops when the countdown reaches zero. Announcements go through an
Announcer so they never talk over a spoken response.
"""

import logging
import re
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..config import TimerConfig
    from ..feedback.alert import AlertLoop
    from ..scheduler import CancelToken, Scheduler

logger = logging.getLogger(__name__)

_MINUTES_PATTERN = re.compile(r"(\d+)\s*(分|min)", re.IGNORECASE)
_SECONDS_PATTERN = re.compile(r"(\d+)\s*(秒|sec)", re.IGNORECASE)

# Spoken at the matching remaining-seconds marks
NOTIFICATION_MESSAGES: dict[int, str] = {
    300: "残り5分です",
    60: "残り1分です",
    30: "残り30秒です",
    0: "タイマーが終了しました",
}


def parse_duration(text: str) -> int | None:
    """Parse a spoken duration into seconds.

    Takes the first "<n>分/min" and the first "<n>秒/sec" and sums them.

    Args:
        text: Utterance or step text (e.g., "3分30秒", "タイマー 5 min").

    Returns:
        Duration in seconds, or None if neither unit is present.

    Examples:
        >>> parse_duration("3分")
        180
        >>> parse_duration("1分30秒")
        90
    """
    if not text:
        return None

    total_seconds = 0
    found = False

    if match := _MINUTES_PATTERN.search(text):
        total_seconds += int(match.group(1)) * 60
        found = True
    if match := _SECONDS_PATTERN.search(text):
        total_seconds += int(match.group(1))
        found = True

    return total_seconds if found else None


def format_time(total_seconds: int) -> str:
    """Format seconds as m:ss."""
    minutes, seconds = divmod(max(0, total_seconds), 60)
    return f"{minutes}:{seconds:02d}"


def _coerce_non_negative(value: int | str | None) -> int:
    try:
        number = int(value) if value not in (None, "") else 0
    except (TypeError, ValueError):
        return 0
    return max(0, number)


class Announcer(Protocol):
    """Speaks short announcements."""

    def announce(self, text: str) -> object:
        """Speak text, after any spoken response already in progress."""
        ...


@dataclass(frozen=True)
class TimerState:
    """Snapshot of the timer."""

    is_active: bool = False
    remaining_seconds: int = 0
    duration_seconds: int = 0
    description: str | None = None
    is_confirm_dialog_visible: bool = False
    is_manual_entry_dialog_visible: bool = False

    @property
    def display(self) -> str:
        """Remaining time as m:ss."""
        return format_time(self.remaining_seconds)


class TimerEngine:
    """Countdown timer driven by a scheduler.

    Each tick is a one-shot callback that schedules the next one, so
    pausing or resetting only has to cancel the pending tick.
    """

    def __init__(
        self,
        scheduler: "Scheduler",
        announcer: Announcer | None = None,
        alert: "AlertLoop | None" = None,
        config: "TimerConfig | None" = None,
        on_change: Callable[[TimerState], None] | None = None,
    ) -> None:
        """Initialize the timer engine.

        Args:
            scheduler: Scheduler for ticks
            announcer: Speaks remaining-time announcements
            alert: Alert loop played when the countdown ends
            config: Tick interval and announcement marks
            on_change: Called with a snapshot after every state change
        """
        self._scheduler = scheduler
        self._announcer = announcer
        self._alert = alert
        self._on_change = on_change
        self._tick_interval = config.tick_interval_s if config is not None else 1.0
        marks = config.notify_at if config is not None else list(NOTIFICATION_MESSAGES)
        self._notify_at = {m for m in marks if m in NOTIFICATION_MESSAGES}

        self._lock = threading.RLock()
        self._is_active = False
        self._remaining = 0
        self._duration = 0
        self._description: str | None = None
        self._confirm_visible = False
        self._manual_visible = False
        self._tick_token: "CancelToken | None" = None

    @property
    def state(self) -> TimerState:
        """Current timer snapshot."""
        with self._lock:
            return TimerState(
                is_active=self._is_active,
                remaining_seconds=self._remaining,
                duration_seconds=self._duration,
                description=self._description,
                is_confirm_dialog_visible=self._confirm_visible,
                is_manual_entry_dialog_visible=self._manual_visible,
            )

    @property
    def is_confirm_dialog_visible(self) -> bool:
        """Whether the confirm dialog is open."""
        with self._lock:
            return self._confirm_visible

    # Staging

    def set_duration(self, seconds: int) -> None:
        """Set the duration; remaining time follows it."""
        seconds = max(0, int(seconds))
        with self._lock:
            self._duration = seconds
            self._remaining = seconds
        self._changed()

    def set_description(self, description: str | None) -> None:
        """Set the label shown with the timer."""
        with self._lock:
            self._description = description
        self._changed()

    def show_timer_dialog(self, seconds: int, description: str | None = None) -> None:
        """Stage a duration and open the confirm dialog. Does not start ticking.

        Args:
            seconds: Duration to stage
            description: Optional label (e.g. the step this timer is for)
        """
        seconds = max(0, int(seconds))
        with self._lock:
            self._duration = seconds
            self._remaining = seconds
            self._description = description
            self._confirm_visible = True
        logger.info(f"Timer staged: {format_time(seconds)} ({description or 'no description'})")
        self._changed()

    def hide_timer_dialog(self) -> None:
        """Close the confirm dialog without starting."""
        with self._lock:
            self._confirm_visible = False
        self._changed()

    def show_manual_timer_dialog(self) -> None:
        """Open the manual entry dialog."""
        with self._lock:
            self._manual_visible = True
        self._changed()

    def hide_manual_timer_dialog(self) -> None:
        """Close the manual entry dialog."""
        with self._lock:
            self._manual_visible = False
        self._changed()

    def submit_manual_entry(self, minutes: int | str | None, seconds: int | str | None) -> bool:
        """Stage a manually entered duration.

        Negative or non-numeric fields count as 0. A zero total changes
        nothing.

        Args:
            minutes: Minutes field
            seconds: Seconds field

        Returns:
            True if a duration was staged.
        """
        total = _coerce_non_negative(minutes) * 60 + _coerce_non_negative(seconds)
        if total <= 0:
            logger.debug(f"Ignoring manual timer entry: {minutes!r}m {seconds!r}s")
            return False

        with self._lock:
            self._manual_visible = False
        self.show_timer_dialog(total)
        return True

    # Countdown

    def start_timer(self) -> None:
        """Start counting down and close the confirm dialog.

        With nothing remaining the timer is marked active but never ticks.
        """
        with self._lock:
            self._cancel_tick_unsafe()
            self._is_active = True
            self._confirm_visible = False
            if self._remaining > 0:
                self._tick_token = self._scheduler.schedule_once(self._tick_interval, self.tick)
            remaining = self._remaining
        logger.info(f"Timer started: {format_time(remaining)}")
        self._changed()

    def pause_timer(self) -> None:
        """Stop counting down, keeping the remaining time."""
        with self._lock:
            self._cancel_tick_unsafe()
            self._is_active = False
        self._changed()

    def reset_timer(self) -> None:
        """Restore the full duration and stop counting down."""
        with self._lock:
            self._cancel_tick_unsafe()
            self._remaining = self._duration
            self._is_active = False
        self._changed()

    def tick(self) -> None:
        """Advance the countdown by one second.

        Ignored unless the timer is active with time remaining.
        """
        with self._lock:
            self._tick_token = None
            if not self._is_active or self._remaining <= 0:
                return
            self._remaining -= 1
            remaining = self._remaining
            if remaining == 0:
                self._is_active = False
            else:
                self._tick_token = self._scheduler.schedule_once(self._tick_interval, self.tick)

        self._changed()
        self.notify_time_remaining(remaining)

    def _cancel_tick_unsafe(self) -> None:
        """Cancel pending tick without lock (must hold lock when calling)."""
        if self._tick_token is not None:
            self._tick_token.cancel()
            self._tick_token = None

    # Announcements

    def notify_time_remaining(self, seconds: int) -> None:
        """Announce the remaining time at the configured marks.

        At zero the alert loop also starts. Failures are logged and never
        affect the countdown.

        Args:
            seconds: Remaining seconds
        """
        if seconds not in self._notify_at:
            return

        message = NOTIFICATION_MESSAGES[seconds]
        logger.info(f"Timer notification: {message}")

        if self._announcer is not None:
            try:
                self._announcer.announce(message)
            except Exception as e:
                logger.warning(f"Failed to speak timer notification: {e}")

        if seconds == 0 and self._alert is not None:
            self._alert.start()

    def stop_alert(self) -> None:
        """Silence the finished-timer alert."""
        if self._alert is not None:
            self._alert.stop()

    def shutdown(self) -> None:
        """Cancel the pending tick and stop any alert."""
        with self._lock:
            self._cancel_tick_unsafe()
            self._is_active = False
        self.stop_alert()

    def _changed(self) -> None:
        if self._on_change is None:
            return
        try:
            self._on_change(self.state)
        except Exception as e:
            logger.warning(f"Timer change listener failed: {e}")


__all__ = [
    "NOTIFICATION_MESSAGES",
    "Announcer",
    "TimerEngine",
    "TimerState",
    "format_time",
    "parse_duration",
]
