"""Feedback module for AIry Voice Core.

Provides the audible alert played when a cooking timer finishes.
"""

from collections.abc import Callable
from typing import Protocol

from .alert import AlertLoop
from .audio import CommandAlertPlayer, MockAlertPlayer, generate_tone, write_wav_file


class AlertPlayer(Protocol):
    """Interface for a loaded alert sound.

    play() plays the sound once without blocking and reports completion
    through on_done (or on_error). release() frees the loaded sound;
    a released player is not reused.
    """

    def play(
        self,
        on_done: Callable[[], None],
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        """Play the sound once.

        Args:
            on_done: Called when playback finishes
            on_error: Called instead of on_done if playback fails
        """
        ...

    def stop(self) -> None:
        """Stop playback in progress without reporting on_done or on_error."""
        ...

    def release(self) -> None:
        """Free the loaded sound."""
        ...


def create_alert_player(
    sound_path: str | None = None,
    frequency: int = 1000,
    duration_ms: int = 500,
    use_mock: bool = False,
) -> AlertPlayer:
    """Create an alert player.

    Args:
        sound_path: WAV file to play, or None for a generated tone
        frequency: Tone frequency in Hz when generating
        duration_ms: Tone duration in milliseconds when generating
        use_mock: If True, return a recording mock

    Returns:
        AlertPlayer implementation.
    """
    if use_mock:
        return MockAlertPlayer()
    return CommandAlertPlayer(sound_path=sound_path, frequency=frequency, duration_ms=duration_ms)


__all__ = [
    "AlertLoop",
    "AlertPlayer",
    "CommandAlertPlayer",
    "MockAlertPlayer",
    "create_alert_player",
    "generate_tone",
    "write_wav_file",
]
