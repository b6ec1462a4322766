"""macOS speech output using the native `say` command."""

import logging
import shutil
import subprocess
import threading

from .synthesizer import SpeakOptions

logger = logging.getLogger(__name__)

# Voices used when no voice is configured for a locale
DEFAULT_VOICES: dict[str, str] = {
    "ja-JP": "Kyoko",
    "en-US": "Samantha",
}


class MacOSSynthesizer:
    """Speaks through `say`, one process per utterance.

    The process runs on a worker thread; completion callbacks are called
    from that thread once the process exits.
    """

    def __init__(self, voice: str | None = None, speed: float = 1.0) -> None:
        """Initialize macOS synthesizer.

        Args:
            voice: Voice name, or None to pick one from the locale
            speed: Speech speed multiplier (0.5 to 2.0)
        """
        self._voice = voice
        self._speed = max(0.5, min(2.0, speed))
        self._say_path = shutil.which("say")
        self._process: subprocess.Popen[bytes] | None = None
        self._stopped = False
        self._lock = threading.Lock()

    @property
    def is_available(self) -> bool:
        """Check if the `say` command is available."""
        return self._say_path is not None

    @property
    def is_speaking(self) -> bool:
        """Return True while a `say` process is running."""
        with self._lock:
            return self._process is not None and self._process.poll() is None

    def speak(self, text: str, options: SpeakOptions | None = None) -> None:
        """Start speaking text.

        Args:
            text: Text to speak
            options: Locale and completion callbacks

        Raises:
            RuntimeError: If `say` is not available
        """
        if not self.is_available:
            raise RuntimeError("macOS TTS not available: say command not found")

        options = options or SpeakOptions()
        self.stop()

        voice = self._voice or DEFAULT_VOICES.get(options.locale, "Kyoko")
        # say uses words per minute, ~175 at normal speed
        rate = int(175 * self._speed)
        cmd = ["say", "-v", voice, "-r", str(rate), text or " "]

        with self._lock:
            self._stopped = False
            process = subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE)
            self._process = process

        worker = threading.Thread(target=self._wait, args=(process, options), daemon=True)
        worker.start()
        logger.debug(f"Speaking '{text[:30]}' with voice {voice}")

    def stop(self) -> None:
        """Terminate the running `say` process, if any."""
        with self._lock:
            process = self._process
            if process is None or process.poll() is not None:
                return
            self._stopped = True
        process.terminate()

    def _wait(self, process: "subprocess.Popen[bytes]", options: SpeakOptions) -> None:
        _, stderr = process.communicate()
        with self._lock:
            stopped = self._stopped and self._process is process
            if self._process is process:
                self._process = None

        if stopped:
            if options.on_stopped is not None:
                options.on_stopped()
        elif process.returncode == 0:
            if options.on_done is not None:
                options.on_done()
        else:
            message = stderr.decode(errors="replace").strip() or f"say exited with {process.returncode}"
            logger.warning(f"macOS TTS failed: {message}")
            if options.on_error is not None:
                options.on_error(message)


__all__ = ["MacOSSynthesizer"]
