"""Unit tests for speech output."""

import threading
from unittest.mock import MagicMock, patch

import pytest

from airy.config import TTSConfig
from airy.tts import (
    MockSynthesizer,
    Platform,
    SpeakOptions,
    SpeechSynthesizer,
    create_synthesizer,
    detect_platform,
)


class TestPlatformDetection:
    """Tests for platform detection."""

    @pytest.mark.parametrize(
        "system,expected",
        [("Darwin", Platform.MACOS), ("Linux", Platform.LINUX), ("Windows", Platform.OTHER)],
    )
    def test_detect(self, system: str, expected: Platform) -> None:
        """Test mapping platform.system() to Platform."""
        with patch("platform.system", return_value=system):
            assert detect_platform() == expected

    def test_alert_player_per_platform(self) -> None:
        """Test the WAV player command for each platform."""
        from airy.tts.platform import alert_player_command

        with patch("shutil.which", return_value="/usr/bin/player"):
            assert alert_player_command(Platform.MACOS) == ["afplay"]
            assert alert_player_command(Platform.LINUX) == ["aplay", "-q"]
            assert alert_player_command(Platform.OTHER) is None

    def test_alert_player_not_installed(self) -> None:
        """Test a missing player binary yields None."""
        from airy.tts.platform import alert_player_command

        with patch("shutil.which", return_value=None):
            assert alert_player_command(Platform.LINUX) is None


class TestMockSynthesizer:
    """Tests for MockSynthesizer."""

    def test_protocol(self) -> None:
        """Test the mock satisfies the synthesizer protocol."""
        assert isinstance(MockSynthesizer(), SpeechSynthesizer)

    def test_auto_complete(self) -> None:
        """Test speak completes immediately by default."""
        synth = MockSynthesizer()
        done: list[str] = []

        synth.speak("こんにちは", SpeakOptions(locale="ja-JP", on_done=lambda: done.append("done")))

        assert done == ["done"]
        assert synth.spoken_texts == ["こんにちは"]
        assert synth.locales == ["ja-JP"]
        assert synth.is_speaking is False

    def test_manual_completion(self) -> None:
        """Test finish, fail and stop report the matching callback."""
        synth = MockSynthesizer(auto_complete=False)
        events: list[str] = []
        options = SpeakOptions(
            on_done=lambda: events.append("done"),
            on_error=lambda message: events.append(f"error:{message}"),
            on_stopped=lambda: events.append("stopped"),
        )

        synth.speak("a", options)
        assert synth.is_speaking is True
        synth.finish()
        synth.speak("b", options)
        synth.fail("boom")
        synth.speak("c", options)
        synth.stop()

        assert events == ["done", "error:boom", "stopped"]
        assert synth.stop_count == 1

    def test_speak_supersedes_utterance_in_flight(self) -> None:
        """Test a new speak reports on_stopped for the unfinished one."""
        synth = MockSynthesizer(auto_complete=False)
        events: list[str] = []
        first = SpeakOptions(
            on_done=lambda: events.append("first done"),
            on_stopped=lambda: events.append("first stopped"),
        )
        second = SpeakOptions(on_done=lambda: events.append("second done"))

        synth.speak("一つ目", first)
        synth.speak("二つ目", second)
        synth.finish()

        assert events == ["first stopped", "second done"]
        assert synth.spoken_texts == ["一つ目", "二つ目"]


class TestMacOSSynthesizer:
    """Tests for MacOSSynthesizer with the say process mocked."""

    def test_availability(self) -> None:
        """Test availability follows the say command."""
        from airy.tts.macos import MacOSSynthesizer

        with patch("shutil.which", return_value="/usr/bin/say"):
            assert MacOSSynthesizer().is_available is True
        with patch("shutil.which", return_value=None):
            assert MacOSSynthesizer().is_available is False

    def test_speak_unavailable_raises(self) -> None:
        """Test speaking without say raises RuntimeError."""
        from airy.tts.macos import MacOSSynthesizer

        with patch("shutil.which", return_value=None):
            synth = MacOSSynthesizer()
        with pytest.raises(RuntimeError):
            synth.speak("こんにちは")

    def test_speak_runs_say_and_reports_done(self) -> None:
        """Test a successful say process calls on_done."""
        from airy.tts.macos import MacOSSynthesizer

        process = MagicMock()
        process.communicate.return_value = (b"", b"")
        process.returncode = 0
        process.poll.return_value = 0
        done = threading.Event()

        with patch("shutil.which", return_value="/usr/bin/say"):
            synth = MacOSSynthesizer(voice="Kyoko", speed=1.0)
        with patch("airy.tts.macos.subprocess.Popen", return_value=process) as popen:
            synth.speak("残り1分です", SpeakOptions(on_done=done.set))
            assert done.wait(timeout=2.0)

        cmd = popen.call_args[0][0]
        assert cmd[:3] == ["say", "-v", "Kyoko"]
        assert cmd[-1] == "残り1分です"

    def test_failed_say_reports_error(self) -> None:
        """Test a failing say process calls on_error."""
        from airy.tts.macos import MacOSSynthesizer

        process = MagicMock()
        process.communicate.return_value = (b"", b"voice not found")
        process.returncode = 1
        process.poll.return_value = 1
        errors: list[str] = []
        finished = threading.Event()

        def on_error(message: str) -> None:
            errors.append(message)
            finished.set()

        with patch("shutil.which", return_value="/usr/bin/say"):
            synth = MacOSSynthesizer()
        with patch("airy.tts.macos.subprocess.Popen", return_value=process):
            synth.speak("テスト", SpeakOptions(on_error=on_error))
            assert finished.wait(timeout=2.0)

        assert errors == ["voice not found"]


class TestCreateSynthesizer:
    """Tests for the synthesizer factory."""

    def test_mock_requested(self) -> None:
        """Test use_mock returns the mock."""
        assert isinstance(create_synthesizer(TTSConfig(), use_mock=True), MockSynthesizer)

    def test_non_macos_falls_back_to_mock(self) -> None:
        """Test platforms without a speech engine get the mock."""
        with patch("airy.tts.detect_platform", return_value=Platform.LINUX):
            assert isinstance(create_synthesizer(TTSConfig()), MockSynthesizer)

    def test_macos_uses_say(self) -> None:
        """Test macOS with say available uses the native synthesizer."""
        from airy.tts.macos import MacOSSynthesizer

        with (
            patch("airy.tts.detect_platform", return_value=Platform.MACOS),
            patch("shutil.which", return_value="/usr/bin/say"),
        ):
            assert isinstance(create_synthesizer(TTSConfig()), MacOSSynthesizer)
