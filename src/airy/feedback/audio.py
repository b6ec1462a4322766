"""Alert sound playback.

Plays a WAV file (or a generated tone written to a temporary WAV) through
the platform's command-line player:
- macOS: afplay
- Linux: aplay
"""

import logging
import math
import struct
import subprocess
import tempfile
import threading
import wave
from collections.abc import Callable
from pathlib import Path

from ..tts.platform import alert_player_command

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050


def generate_tone(frequency: int, duration_ms: int, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Generate a simple sine wave tone.

    Args:
        frequency: Tone frequency in Hz
        duration_ms: Duration in milliseconds
        sample_rate: Sample rate in Hz

    Returns:
        Raw PCM audio bytes (16-bit mono)
    """
    num_samples = int(sample_rate * duration_ms / 1000)
    attack_samples = max(1, int(sample_rate * 0.01))  # 10ms
    release_samples = max(1, int(sample_rate * 0.01))
    audio_data = []

    for i in range(num_samples):
        t = i / sample_rate
        # Envelope to avoid clicks
        envelope = 1.0
        if i < attack_samples:
            envelope = i / attack_samples
        elif i > num_samples - release_samples:
            envelope = (num_samples - i) / release_samples

        sample = int(32767 * 0.5 * envelope * math.sin(2 * math.pi * frequency * t))
        audio_data.append(struct.pack("<h", sample))

    return b"".join(audio_data)


def write_wav_file(path: Path, audio: bytes, sample_rate: int = SAMPLE_RATE) -> None:
    """Write 16-bit mono PCM to a WAV file."""
    with wave.open(str(path), "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(audio)


class CommandAlertPlayer:
    """Plays the alert through afplay/aplay on a worker thread."""

    def __init__(
        self,
        sound_path: str | None = None,
        frequency: int = 1000,
        duration_ms: int = 500,
    ) -> None:
        """Initialize alert player.

        Args:
            sound_path: WAV file to play, or None for a generated tone
            frequency: Generated tone frequency in Hz
            duration_ms: Generated tone duration in milliseconds
        """
        self._sound_path = Path(sound_path).expanduser() if sound_path else None
        self._frequency = frequency
        self._duration_ms = duration_ms
        self._temp_path: Path | None = None
        self._process: subprocess.Popen[bytes] | None = None
        self._stopped = False
        self._lock = threading.Lock()

    def _resolve_sound(self) -> Path:
        if self._sound_path is not None:
            if not self._sound_path.exists():
                raise FileNotFoundError(f"Alert sound not found: {self._sound_path}")
            return self._sound_path

        if self._temp_path is None:
            with tempfile.NamedTemporaryFile(suffix=".wav", delete=False) as f:
                self._temp_path = Path(f.name)
            write_wav_file(self._temp_path, generate_tone(self._frequency, self._duration_ms))
        return self._temp_path

    def play(
        self,
        on_done: Callable[[], None],
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        """Play the alert once.

        Raises:
            RuntimeError: If no command-line player is available
            FileNotFoundError: If the configured sound file is missing
        """
        command = alert_player_command()
        if command is None:
            raise RuntimeError("No audio player command available (afplay/aplay)")

        path = self._resolve_sound()
        with self._lock:
            process = subprocess.Popen(
                [*command, str(path)], stdout=subprocess.DEVNULL, stderr=subprocess.PIPE
            )
            self._stopped = False
            self._process = process

        threading.Thread(
            target=self._wait, args=(process, on_done, on_error), daemon=True
        ).start()

    def _wait(
        self,
        process: "subprocess.Popen[bytes]",
        on_done: Callable[[], None],
        on_error: Callable[[str], None] | None,
    ) -> None:
        _, stderr = process.communicate()
        with self._lock:
            stopped = self._stopped and self._process is process
            if self._process is process:
                self._process = None

        if stopped:
            logger.debug("Alert playback stopped")
        elif process.returncode == 0:
            on_done()
        elif on_error is not None:
            on_error(stderr.decode(errors="replace").strip() or f"exit code {process.returncode}")

    def stop(self) -> None:
        """Stop playback in progress. A stopped play reports neither callback."""
        with self._lock:
            process = self._process
            if process is None or process.poll() is not None:
                return
            self._stopped = True
        process.terminate()

    def release(self) -> None:
        """Stop playback and delete the generated tone file."""
        self.stop()
        if self._temp_path is not None:
            self._temp_path.unlink(missing_ok=True)
            self._temp_path = None


class MockAlertPlayer:
    """Mock alert player for testing.

    Records plays. With auto_complete=True every play finishes at once;
    otherwise the test calls finish() or fail().
    """

    def __init__(self, auto_complete: bool = True) -> None:
        """Initialize mock player."""
        self._auto_complete = auto_complete
        self._play_count = 0
        self._released = False
        self._stopped = False
        self._pending: tuple[Callable[[], None], Callable[[str], None] | None] | None = None
        self._raise_on_play: Exception | None = None

    def play(
        self,
        on_done: Callable[[], None],
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        """Record a play."""
        if self._raise_on_play is not None:
            raise self._raise_on_play
        self._play_count += 1
        if self._auto_complete:
            on_done()
        else:
            self._pending = (on_done, on_error)

    def finish(self) -> None:
        """Complete the pending play."""
        pending, self._pending = self._pending, None
        if pending is not None:
            pending[0]()

    def fail(self, message: str = "playback failed") -> None:
        """Fail the pending play."""
        pending, self._pending = self._pending, None
        if pending is not None and pending[1] is not None:
            pending[1](message)

    def stop(self) -> None:
        """Record a stop."""
        self._stopped = True
        self._pending = None

    def release(self) -> None:
        """Record a release."""
        self._released = True

    def set_raise_on_play(self, error: Exception | None) -> None:
        """Make play() raise the given exception."""
        self._raise_on_play = error

    @property
    def play_count(self) -> int:
        """Number of plays."""
        return self._play_count

    @property
    def released(self) -> bool:
        """True once release() was called."""
        return self._released

    @property
    def stopped(self) -> bool:
        """True once stop() was called."""
        return self._stopped


__all__ = [
    "CommandAlertPlayer",
    "MockAlertPlayer",
    "generate_tone",
    "write_wav_file",
]
