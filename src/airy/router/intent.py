"""Intent classification for voice commands.

Classifies one finalized utterance, together with what is on screen,
into exactly one intent. Rules are tried in a fixed priority order and
the first match wins:

1. External command handler (caller supplied)
2. Video control, while the video modal is open
3. Timer confirm/cancel while the confirm dialog is open, else timer setup
4. Wake word gated navigation and display commands
5. Free-form question for the recipe assistant
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..commands.timer import parse_duration
from ..video.player import VideoAction
from ..wake_word.detector import TextWakeWordDetector, normalize_text

if TYPE_CHECKING:
    from ..config import WakeWordConfig

logger = logging.getLogger(__name__)


class IntentType(Enum):
    """Types of intents the system can handle."""

    EXTERNAL = "external"
    VIDEO_CONTROL = "video_control"
    TIMER_CONFIRM = "timer_confirm"
    TIMER_CANCEL = "timer_cancel"
    TIMER_SETUP = "timer_setup"
    WAKE_ONLY = "wake_only"
    NAVIGATE_NEXT = "navigate_next"
    NAVIGATE_PREVIOUS = "navigate_previous"
    SHOW_INGREDIENTS = "show_ingredients"
    SHOW_STEPS = "show_steps"
    FREE_FORM = "free_form"
    NOOP = "noop"


@dataclass(frozen=True)
class Intent:
    """Classified intent with its payload.

    Attributes:
        type: Intent type
        raw_text: Utterance as recognized
        logged_text: Utterance with the wake word replaced by the marker
        command_text: Normalized text after the wake word
        query_text: Text after the wake word as spoken, for the assistant
        seconds: Staged timer duration (TIMER_SETUP)
        description: Timer label (TIMER_SETUP)
        video_action: Requested action (VIDEO_CONTROL)
    """

    type: IntentType
    raw_text: str = ""
    logged_text: str = ""
    command_text: str = ""
    query_text: str = ""
    seconds: int | None = None
    description: str | None = None
    video_action: VideoAction | None = None


@dataclass(frozen=True)
class ClassificationContext:
    """What the screen shows when the utterance arrives."""

    current_step_text: str | None = None
    is_timer_dialog_open: bool = False
    is_video_modal_open: bool = False


ClassificationRule = Callable[[str, str, ClassificationContext], Intent | None]


class CommandClassifier:
    """Rule-based classifier for cooking voice commands.

    Matching is substring containment on width- and case-normalized text,
    which tolerates recognizer punctuation and surrounding filler words.
    """

    # Video control, first matching set wins
    VIDEO_KEYWORDS: list[tuple[VideoAction, tuple[str, ...]]] = [
        (VideoAction.PLAY, ("再生", "プレイ", "play")),
        (VideoAction.PAUSE, ("一時停止", "止めて", "とめて", "ポーズ", "pause")),
        (VideoAction.TOGGLE_PLAY, ("切り替え", "きりかえ", "toggle")),
        (VideoAction.TOGGLE_FULLSCREEN, ("全画面", "フルスクリーン", "fullscreen")),
        (VideoAction.CLOSE, ("閉じ", "とじ", "close")),
    ]

    # Timer dialog responses
    TIMER_CONFIRM_KEYWORDS = ("ok", "okay", "はい", "よし", "開始", "スタート", "start")
    TIMER_CANCEL_KEYWORDS = ("cancel", "キャンセル", "やめ", "いいえ", "ダメ", "no")
    TIMER_TRIGGER_KEYWORDS = ("タイマー", "timer", "タイム")

    # Wake word gated commands
    NEXT_KEYWORDS = ("次", "次へ", "進める")
    PREVIOUS_KEYWORDS = ("戻る", "前", "前へ", "戻って")
    INGREDIENTS_KEYWORDS = ("材料", "ざいりょう", "ingredient")
    STEPS_KEYWORDS = ("手順", "てじゅん", "ステップ", "step")

    def __init__(
        self,
        wake_word_config: "WakeWordConfig | None" = None,
        external_handler: Callable[[str], bool] | None = None,
    ) -> None:
        """Initialize classifier.

        Args:
            wake_word_config: Wake word tokens and marker
            external_handler: Called first with every utterance; returning
                True claims it
        """
        self._detector = TextWakeWordDetector(wake_word_config)
        self._external_handler = external_handler
        self._rules: list[tuple[str, ClassificationRule]] = [
            ("external", self._try_external),
            ("video", self._try_video_control),
            ("timer", self._try_timer),
            ("wake_word", self._try_wake_word_command),
        ]

    @property
    def rule_names(self) -> list[str]:
        """Rule names in priority order."""
        return [name for name, _ in self._rules]

    def set_external_handler(self, handler: Callable[[str], bool] | None) -> None:
        """Replace the external command handler."""
        self._external_handler = handler

    def classify(self, text: str, context: ClassificationContext | None = None) -> Intent:
        """Classify the given text into an intent.

        Args:
            text: The finalized utterance
            context: Screen state; defaults to nothing open

        Returns:
            Exactly one Intent. Blank text is NOOP.
        """
        context = context or ClassificationContext()
        if not text.strip():
            return Intent(type=IntentType.NOOP, raw_text=text)

        normalized = normalize_text(text)
        for name, rule in self._rules:
            if intent := rule(text, normalized, context):
                logger.debug(f"Rule '{name}' matched: {intent.type.value}")
                return intent

        # Unreachable: the wake word rule always answers
        return Intent(type=IntentType.NOOP, raw_text=text)

    def _try_external(
        self, text: str, normalized: str, context: ClassificationContext
    ) -> Intent | None:
        if self._external_handler is None:
            return None
        try:
            handled = self._external_handler(text)
        except Exception as e:
            logger.warning(f"External command handler failed: {e}")
            return None
        if handled:
            return Intent(type=IntentType.EXTERNAL, raw_text=text)
        return None

    def _try_video_control(
        self, text: str, normalized: str, context: ClassificationContext
    ) -> Intent | None:
        if not context.is_video_modal_open:
            return None
        for action, keywords in self.VIDEO_KEYWORDS:
            if _contains_any(normalized, keywords):
                return Intent(type=IntentType.VIDEO_CONTROL, raw_text=text, video_action=action)
        return None

    def _try_timer(
        self, text: str, normalized: str, context: ClassificationContext
    ) -> Intent | None:
        if context.is_timer_dialog_open:
            if _contains_any(normalized, self.TIMER_CONFIRM_KEYWORDS):
                return Intent(type=IntentType.TIMER_CONFIRM, raw_text=text)
            if _contains_any(normalized, self.TIMER_CANCEL_KEYWORDS):
                return Intent(type=IntentType.TIMER_CANCEL, raw_text=text)
            return None

        if not _contains_any(normalized, self.TIMER_TRIGGER_KEYWORDS):
            return None

        if seconds := parse_duration(normalized):
            return Intent(type=IntentType.TIMER_SETUP, raw_text=text, seconds=seconds)

        step = context.current_step_text
        if step and (seconds := parse_duration(step)):
            return Intent(
                type=IntentType.TIMER_SETUP,
                raw_text=text,
                seconds=seconds,
                description=f"{step}のタイマー",
            )
        return None

    def _try_wake_word_command(
        self, text: str, normalized: str, context: ClassificationContext
    ) -> Intent:
        wake = self._detector.detect(text)
        if not wake.detected:
            return Intent(type=IntentType.NOOP, raw_text=text)

        command = wake.command_text
        query = wake.logged_text.replace(self._detector.marker, "", 1)
        fields = {
            "raw_text": text,
            "logged_text": wake.logged_text,
            "command_text": command,
            "query_text": query.lstrip("、。,. 　").strip(),
        }

        if not command:
            return Intent(type=IntentType.WAKE_ONLY, **fields)
        if _contains_any(command, self.NEXT_KEYWORDS):
            return Intent(type=IntentType.NAVIGATE_NEXT, **fields)
        if _contains_any(command, self.PREVIOUS_KEYWORDS):
            return Intent(type=IntentType.NAVIGATE_PREVIOUS, **fields)
        if _contains_any(command, self.INGREDIENTS_KEYWORDS):
            return Intent(type=IntentType.SHOW_INGREDIENTS, **fields)
        if _contains_any(command, self.STEPS_KEYWORDS):
            return Intent(type=IntentType.SHOW_STEPS, **fields)
        return Intent(type=IntentType.FREE_FORM, **fields)


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


__all__ = [
    "ClassificationContext",
    "CommandClassifier",
    "Intent",
    "IntentType",
]
