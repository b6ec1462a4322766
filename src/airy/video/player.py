"""Recipe video player.

Videos are offered by assistant responses and shown in a modal once the
response has been spoken. While the modal is open, voice commands can
control playback.
"""

import logging
import re
import threading
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)

_YOUTUBE_PATTERNS = [
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/watch\?v=([^&]+)"),
    re.compile(r"(?:https?://)?(?:www\.)?youtube\.com/embed/([^/?]+)"),
    re.compile(r"(?:https?://)?(?:www\.)?youtu\.be/([^/?]+)"),
]
_YOUTUBE_ID = re.compile(r"^[a-zA-Z0-9_-]{11}$")


class VideoAction(Enum):
    """Voice-controllable video actions."""

    PLAY = "play"
    PAUSE = "pause"
    TOGGLE_PLAY = "toggle_play"
    TOGGLE_FULLSCREEN = "toggle_fullscreen"
    CLOSE = "close"


def extract_youtube_id(url: str | None) -> str | None:
    """Extract the YouTube video id from a watch, embed or short link.

    A bare 11-character id is returned unchanged.

    Args:
        url: Video URL or id

    Returns:
        Video id, or None if the URL is not a YouTube video.
    """
    if not url:
        return None

    for pattern in _YOUTUBE_PATTERNS:
        if (match := pattern.search(url)) and match.group(1):
            return match.group(1)

    if _YOUTUBE_ID.match(url):
        return url
    return None


class VideoPlayer(Protocol):
    """Interface for the video modal's player."""

    def play(self) -> None:
        """Start playback."""
        ...

    def pause(self) -> None:
        """Pause playback."""
        ...

    def toggle_play(self) -> None:
        """Toggle between playing and paused."""
        ...

    def toggle_fullscreen(self) -> None:
        """Toggle fullscreen; entering fullscreen also starts playback."""
        ...

    def close(self) -> None:
        """Pause and leave fullscreen."""
        ...


class VideoPlayerState:
    """In-memory player tracking playing and fullscreen flags."""

    def __init__(self) -> None:
        """Initialize a stopped, windowed player."""
        self._playing = False
        self._fullscreen = False
        self._video_id: str | None = None
        self._lock = threading.Lock()

    @property
    def is_playing(self) -> bool:
        """Whether the video is playing."""
        with self._lock:
            return self._playing

    @property
    def is_fullscreen(self) -> bool:
        """Whether the video is fullscreen."""
        with self._lock:
            return self._fullscreen

    @property
    def video_id(self) -> str | None:
        """Loaded YouTube video id."""
        with self._lock:
            return self._video_id

    def load(self, url: str | None) -> str | None:
        """Load a video URL, resetting playback state.

        Returns:
            The extracted video id, or None if the URL is not playable.
        """
        video_id = extract_youtube_id(url)
        with self._lock:
            self._video_id = video_id
            self._playing = False
            self._fullscreen = False
        if url and video_id is None:
            logger.warning(f"Unsupported video URL: {url}")
        return video_id

    def play(self) -> None:
        """Start playback."""
        with self._lock:
            self._playing = True
        logger.debug("Video play")

    def pause(self) -> None:
        """Pause playback."""
        with self._lock:
            self._playing = False
        logger.debug("Video pause")

    def toggle_play(self) -> None:
        """Toggle between playing and paused."""
        with self._lock:
            self._playing = not self._playing

    def toggle_fullscreen(self) -> None:
        """Toggle fullscreen; entering fullscreen also starts playback."""
        with self._lock:
            if self._fullscreen:
                self._fullscreen = False
            else:
                self._fullscreen = True
                self._playing = True

    def close(self) -> None:
        """Stop playback and leave fullscreen when the modal closes."""
        with self._lock:
            self._playing = False
            self._fullscreen = False
        logger.debug("Video closed")

    def on_ended(self) -> None:
        """Handle the video reaching its end."""
        with self._lock:
            self._playing = False
            self._fullscreen = False


__all__ = [
    "VideoAction",
    "VideoPlayer",
    "VideoPlayerState",
    "extract_youtube_id",
]
