"""Text-to-speech module for AIry Voice Core.

Provides platform-adaptive speech output:
- macOS: Native `say` with a Japanese voice
- Other: Falls back to Mock synthesizer
"""

import logging
from typing import TYPE_CHECKING

from .mock import MockSynthesizer
from .platform import Platform, detect_platform
from .synthesizer import SpeakOptions, SpeechSynthesizer

if TYPE_CHECKING:
    from ..config import TTSConfig

logger = logging.getLogger(__name__)


def create_synthesizer(
    config: "TTSConfig | None" = None,
    use_mock: bool = False,
) -> SpeechSynthesizer:
    """Create the appropriate synthesizer for the current platform.

    Args:
        config: TTS configuration (optional)
        use_mock: If True, force mock synthesizer for testing

    Returns:
        SpeechSynthesizer implementation appropriate for the platform.
        Never returns None - always falls back to MockSynthesizer.
    """
    if use_mock:
        logger.info("TTS: Using MockSynthesizer (requested)")
        return MockSynthesizer()

    platform = detect_platform()
    logger.debug(f"TTS: Detected platform: {platform.name}")

    if platform == Platform.MACOS:
        from .macos import MacOSSynthesizer

        voice = config.voice if config is not None else None
        speed = config.speed if config is not None else 1.0
        synth = MacOSSynthesizer(voice=voice, speed=speed)
        if synth.is_available:
            logger.info(f"TTS: Using MacOSSynthesizer (voice: {voice})")
            return synth
        logger.warning("TTS: say command not found")

    logger.warning("TTS: No speech engine available, using MockSynthesizer")
    return MockSynthesizer()


__all__ = [
    "MockSynthesizer",
    "Platform",
    "SpeakOptions",
    "SpeechSynthesizer",
    "create_synthesizer",
    "detect_platform",
]
