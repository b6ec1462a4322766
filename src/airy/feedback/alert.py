"""Repeating timer alert."""

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from . import AlertPlayer

logger = logging.getLogger(__name__)

DEFAULT_REPEAT = 5


class AlertLoop:
    """Plays an alert a fixed number of times, then releases the player.

    Each run gets a fresh player from the factory, so a released player
    is never played again.
    """

    def __init__(
        self,
        player_factory: Callable[[], "AlertPlayer"],
        repeat: int = DEFAULT_REPEAT,
    ) -> None:
        """Initialize alert loop.

        Args:
            player_factory: Creates a loaded player for each run
            repeat: Number of times the alert is played per run
        """
        self._player_factory = player_factory
        self._repeat = max(1, repeat)
        self._player: "AlertPlayer | None" = None
        self._played = 0
        self._lock = threading.RLock()

    @property
    def is_playing(self) -> bool:
        """Return True while a run is in progress."""
        with self._lock:
            return self._player is not None

    @property
    def played(self) -> int:
        """Completed plays in the current or last run."""
        with self._lock:
            return self._played

    def start(self) -> None:
        """Start a run. A run already in progress is stopped first.

        Failures are logged; they never propagate to the caller.
        """
        self.stop()
        try:
            player = self._player_factory()
        except Exception as e:
            logger.warning(f"Failed to load alert sound: {e}")
            return

        with self._lock:
            self._player = player
            self._played = 0
        self._play_next(player)

    def stop(self) -> None:
        """Stop the current run and release its player."""
        with self._lock:
            player = self._player
            self._player = None
        if player is not None:
            try:
                player.stop()
            except Exception as e:
                logger.warning(f"Failed to stop alert: {e}")
            self._release(player)

    def _play_next(self, player: "AlertPlayer") -> None:
        try:
            player.play(
                on_done=lambda: self._on_done(player),
                on_error=lambda message: self._on_error(player, message),
            )
        except Exception as e:
            logger.warning(f"Failed to play alert: {e}")
            self._finish(player)

    def _on_done(self, player: "AlertPlayer") -> None:
        with self._lock:
            if self._player is not player:
                return
            self._played += 1
            finished = self._played >= self._repeat
        if finished:
            self._finish(player)
        else:
            self._play_next(player)

    def _on_error(self, player: "AlertPlayer", message: str) -> None:
        logger.warning(f"Alert playback failed: {message}")
        self._finish(player)

    def _finish(self, player: "AlertPlayer") -> None:
        with self._lock:
            if self._player is not player:
                return
            self._player = None
        self._release(player)

    def _release(self, player: "AlertPlayer") -> None:
        try:
            player.release()
        except Exception as e:
            logger.warning(f"Failed to release alert sound: {e}")


__all__ = ["AlertLoop", "DEFAULT_REPEAT"]
