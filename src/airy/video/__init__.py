"""Recipe video playback."""

from .player import VideoAction, VideoPlayer, VideoPlayerState, extract_youtube_id

__all__ = ["VideoAction", "VideoPlayer", "VideoPlayerState", "extract_youtube_id"]
