"""Text wake word detection.

The recognizer transcribes the wake word along with the command, so the
wake word is found by checking the start of the transcript.
"""

import logging
import unicodedata
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import WakeWordConfig

logger = logging.getLogger(__name__)

DEFAULT_TOKENS = ("アイリ", "あいり", "エリ", "えり", "エアリ", "えあり", "あり")
DEFAULT_AMBIGUOUS_TOKEN = "あり"
DEFAULT_EXCLUDED_PREFIXES = ("ありがとう", "ありました", "ありませ", "ありゃ", "ありゃしない", "ありえ")
DEFAULT_MARKER = "AIry"

# Stripped from both ends of the command text
_COMMAND_PUNCTUATION = " \t　、。,.!?！？"


def normalize_text(text: str) -> str:
    """Normalize width and case for keyword matching."""
    return unicodedata.normalize("NFKC", text).lower()


@dataclass(frozen=True)
class WakeWordResult:
    """Result of wake word detection.

    Attributes:
        detected: True if the transcript starts with a wake word
        keyword: The wake word that was detected (empty if not detected)
        logged_text: Transcript with the wake word replaced by the marker
        command_text: Normalized text following the wake word
    """

    detected: bool
    keyword: str = ""
    logged_text: str = ""
    command_text: str = ""


class TextWakeWordDetector:
    """Detects a wake word at the start of a transcript."""

    def __init__(self, config: "WakeWordConfig | None" = None) -> None:
        """Initialize detector.

        Args:
            config: Wake word configuration (tokens, exclusions, marker)
        """
        if config is not None:
            tokens = tuple(config.tokens)
            self._ambiguous = config.ambiguous_token
            self._excluded = tuple(normalize_text(p) for p in config.excluded_prefixes)
            self._marker = config.marker
        else:
            tokens = DEFAULT_TOKENS
            self._ambiguous = DEFAULT_AMBIGUOUS_TOKEN
            self._excluded = DEFAULT_EXCLUDED_PREFIXES
            self._marker = DEFAULT_MARKER

        self._tokens = tuple(normalize_text(t) for t in tokens)
        self._ambiguous = normalize_text(self._ambiguous)

    @property
    def marker(self) -> str:
        """Canonical name the wake word is replaced with."""
        return self._marker

    def detect(self, text: str) -> WakeWordResult:
        """Check a transcript for a leading wake word.

        The ambiguous token only counts when the transcript does not start
        with one of the excluded everyday words.

        Args:
            text: Finalized transcript

        Returns:
            WakeWordResult; command_text is empty for a bare wake word.
        """
        stripped = text.strip()
        normalized = normalize_text(stripped)

        keyword = self._match_token(normalized)
        if keyword is None:
            return WakeWordResult(detected=False)

        # Keep the speaker's original text after the wake word when widths line up
        if normalize_text(stripped[: len(keyword)]) == keyword:
            rest = stripped[len(keyword):]
        else:
            rest = normalized[len(keyword):]
        command_text = normalized[len(keyword):].strip(_COMMAND_PUNCTUATION)

        logger.debug(f"Wake word '{keyword}' detected, command: '{command_text}'")
        return WakeWordResult(
            detected=True,
            keyword=keyword,
            logged_text=f"{self._marker}{rest}",
            command_text=command_text,
        )

    def _match_token(self, normalized: str) -> str | None:
        for token in self._tokens:
            if not normalized.startswith(token):
                continue
            if token == self._ambiguous and normalized.startswith(self._excluded):
                continue
            return token
        return None


__all__ = ["TextWakeWordDetector", "WakeWordResult", "normalize_text"]
