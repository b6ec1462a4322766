"""Unit tests for intent classification."""

import pytest

from airy.config import WakeWordConfig
from airy.router.intent import (
    ClassificationContext,
    CommandClassifier,
    IntentType,
)
from airy.video.player import VideoAction


@pytest.fixture
def classifier() -> CommandClassifier:
    """Classifier with the default wake words."""
    return CommandClassifier(WakeWordConfig())


DIALOG_OPEN = ClassificationContext(is_timer_dialog_open=True)
VIDEO_OPEN = ClassificationContext(is_video_modal_open=True)


class TestRuleOrder:
    """Tests for rule priority."""

    def test_rule_names(self, classifier: CommandClassifier) -> None:
        """Test rules are tried in a fixed order."""
        assert classifier.rule_names == ["external", "video", "timer", "wake_word"]

    def test_external_handler_shadows_everything(self, classifier: CommandClassifier) -> None:
        """Test a claiming external handler wins over built-in rules."""
        seen: list[str] = []

        def handler(text: str) -> bool:
            seen.append(text)
            return True

        classifier.set_external_handler(handler)
        intent = classifier.classify("アイリ次", VIDEO_OPEN)

        assert intent.type == IntentType.EXTERNAL
        assert seen == ["アイリ次"]

    def test_external_handler_declining(self, classifier: CommandClassifier) -> None:
        """Test a declining handler lets the built-in rules run."""
        classifier.set_external_handler(lambda text: False)
        assert classifier.classify("アイリ次").type == IntentType.NAVIGATE_NEXT

    def test_raising_external_handler_is_not_handled(self, classifier: CommandClassifier) -> None:
        """Test a raising handler counts as not handled."""

        def handler(text: str) -> bool:
            raise RuntimeError("screen gone")

        classifier.set_external_handler(handler)
        assert classifier.classify("アイリ次").type == IntentType.NAVIGATE_NEXT

    def test_blank_text(self, classifier: CommandClassifier) -> None:
        """Test blank text is NOOP."""
        assert classifier.classify("   ").type == IntentType.NOOP


class TestVideoRule:
    """Tests for video control."""

    @pytest.mark.parametrize(
        "text,action",
        [
            ("再生して", VideoAction.PLAY),
            ("一時停止", VideoAction.PAUSE),
            ("ちょっと止めて", VideoAction.PAUSE),
            ("全画面にして", VideoAction.TOGGLE_FULLSCREEN),
            ("フルスクリーン", VideoAction.TOGGLE_FULLSCREEN),
            ("閉じて", VideoAction.CLOSE),
            ("PLAY", VideoAction.PLAY),
        ],
    )
    def test_actions(self, classifier: CommandClassifier, text: str, action: VideoAction) -> None:
        """Test keyword sets map to actions while the modal is open."""
        intent = classifier.classify(text, VIDEO_OPEN)
        assert intent.type == IntentType.VIDEO_CONTROL
        assert intent.video_action == action

    def test_not_gated_by_wake_word(self, classifier: CommandClassifier) -> None:
        """Test video commands need no wake word."""
        assert classifier.classify("再生", VIDEO_OPEN).type == IntentType.VIDEO_CONTROL

    def test_ignored_when_modal_closed(self, classifier: CommandClassifier) -> None:
        """Test video keywords do nothing with the modal closed."""
        assert classifier.classify("再生").type == IntentType.NOOP


class TestTimerRule:
    """Tests for timer setup, confirm and cancel."""

    def test_explicit_duration(self, classifier: CommandClassifier) -> None:
        """Test a trigger word with minutes and seconds."""
        intent = classifier.classify("アイリタイマー3分30秒")
        assert intent.type == IntentType.TIMER_SETUP
        assert intent.seconds == 210
        assert intent.description is None

    def test_ambiguous_wake_word_timer(self, classifier: CommandClassifier) -> None:
        """Test あり followed by a timer command opens a five minute timer."""
        intent = classifier.classify("ありタイマー5分")
        assert intent.type == IntentType.TIMER_SETUP
        assert intent.seconds == 300

    def test_duration_from_step(self, classifier: CommandClassifier) -> None:
        """Test the step text supplies the duration when none is spoken."""
        context = ClassificationContext(current_step_text="レンジで5分加熱する")
        intent = classifier.classify("アイリタイマー開始", context)

        assert intent.type == IntentType.TIMER_SETUP
        assert intent.seconds == 300
        assert intent.description is not None
        assert "レンジで5分加熱する" in intent.description

    def test_no_duration_falls_through(self, classifier: CommandClassifier) -> None:
        """Test a timer request without any duration falls through."""
        context = ClassificationContext(current_step_text="よく混ぜる")
        intent = classifier.classify("アイリタイマー", context)
        assert intent.type == IntentType.FREE_FORM

    def test_zero_duration_uses_step(self, classifier: CommandClassifier) -> None:
        """Test an explicit zero is treated as no duration."""
        context = ClassificationContext(current_step_text="2分蒸らす")
        intent = classifier.classify("タイマー0分", context)
        assert intent.seconds == 120

    def test_timer_without_wake_word(self, classifier: CommandClassifier) -> None:
        """Test timer commands are not wake word gated."""
        assert classifier.classify("timer 2 min").type == IntentType.TIMER_SETUP

    @pytest.mark.parametrize("text", ["はい", "OK", "スタート", "開始して"])
    def test_confirm(self, classifier: CommandClassifier, text: str) -> None:
        """Test confirm keywords while the dialog is open."""
        assert classifier.classify(text, DIALOG_OPEN).type == IntentType.TIMER_CONFIRM

    @pytest.mark.parametrize("text", ["キャンセル", "やめて", "いいえ"])
    def test_cancel(self, classifier: CommandClassifier, text: str) -> None:
        """Test cancel keywords while the dialog is open."""
        assert classifier.classify(text, DIALOG_OPEN).type == IntentType.TIMER_CANCEL

    def test_other_input_falls_through(self, classifier: CommandClassifier) -> None:
        """Test other input with the dialog open reaches the later rules."""
        assert classifier.classify("アイリ次", DIALOG_OPEN).type == IntentType.NAVIGATE_NEXT
        assert classifier.classify("こんにちは", DIALOG_OPEN).type == IntentType.NOOP

    def test_confirm_words_ignored_without_dialog(self, classifier: CommandClassifier) -> None:
        """Test confirm words do nothing with the dialog closed."""
        assert classifier.classify("はい").type == IntentType.NOOP


class TestWakeWordRule:
    """Tests for wake word gated commands."""

    def test_no_wake_word(self, classifier: CommandClassifier) -> None:
        """Test ungated speech is NOOP."""
        assert classifier.classify("こんにちは").type == IntentType.NOOP

    def test_excluded_word(self, classifier: CommandClassifier) -> None:
        """Test thank-you is not a wake word."""
        assert classifier.classify("ありがとうございます").type == IntentType.NOOP

    def test_wake_only(self, classifier: CommandClassifier) -> None:
        """Test a bare wake word."""
        intent = classifier.classify("アイリ")
        assert intent.type == IntentType.WAKE_ONLY
        assert intent.logged_text == "AIry"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("アイリ次へ", IntentType.NAVIGATE_NEXT),
            ("アイリ、次のステップ", IntentType.NAVIGATE_NEXT),
            ("えり戻って", IntentType.NAVIGATE_PREVIOUS),
            ("アイリ前へ", IntentType.NAVIGATE_PREVIOUS),
            ("アイリ材料を見せて", IntentType.SHOW_INGREDIENTS),
            ("アイリ手順を見せて", IntentType.SHOW_STEPS),
        ],
    )
    def test_commands(self, classifier: CommandClassifier, text: str, expected: IntentType) -> None:
        """Test navigation and display keywords."""
        intent = classifier.classify(text)
        assert intent.type == expected
        assert intent.logged_text.startswith("AIry")

    def test_free_form(self, classifier: CommandClassifier) -> None:
        """Test anything else after the wake word is a question."""
        intent = classifier.classify("アイリ、砂糖の代わりは何がいい？")

        assert intent.type == IntentType.FREE_FORM
        assert intent.query_text == "砂糖の代わりは何がいい？"
        assert intent.logged_text == "AIry、砂糖の代わりは何がいい？"
