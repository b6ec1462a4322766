"""Configuration module for AIry Voice Core.

This module provides configuration loading and profile management.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


@dataclass
class WakeWordConfig:
    """Text wake word configuration.

    The recognizer transcribes the wake word like any other speech, so
    detection is a prefix match on the transcript.
    """

    tokens: list[str] = field(
        default_factory=lambda: ["アイリ", "あいり", "エリ", "えり", "エアリ", "えあり", "あり"]
    )
    # "あり" is also the start of ordinary words ("ありがとう")
    ambiguous_token: str = "あり"
    excluded_prefixes: list[str] = field(
        default_factory=lambda: ["ありがとう", "ありました", "ありませ", "ありゃ", "ありゃしない", "ありえ"]
    )
    marker: str = "AIry"


@dataclass
class VoiceConfig:
    """Speech recognition configuration."""

    locale: str = "ja-JP"
    debounce_ms: int = 800
    restart_delay_ms: int = 500
    max_restart_attempts: int = 3


@dataclass
class TTSConfig:
    """Text-to-speech configuration."""

    locale: str = "ja-JP"
    voice: str = "Kyoko"
    speed: float = 1.0
    start_delay_ms: int = 100


@dataclass
class TimerConfig:
    """Cooking timer configuration."""

    tick_interval_s: float = 1.0
    notify_at: list[int] = field(default_factory=lambda: [300, 60, 30, 0])
    alert_repeat: int = 5
    alert_sound: str | None = None
    alert_frequency: int = 1000
    alert_duration_ms: int = 500


@dataclass
class AssistantConfig:
    """Recipe assistant (LLM) configuration.

    provider is one of "callable" (HTTPS callable function), "claude"
    (Anthropic API directly) or "mock".
    """

    provider: str = "callable"
    endpoint: str = ""
    timeout_seconds: float = 30.0
    model: str = "claude-3-5-haiku-latest"
    max_tokens: int = 300
    temperature: float = 0.2


@dataclass
class RecipesConfig:
    """Recipe catalog configuration."""

    path: str = "data/recipes.json"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class TestingConfig:
    """Testing configuration."""

    use_mocks: bool = False


@dataclass
class AiryConfig:
    """Main AIry Voice Core configuration."""

    voice: VoiceConfig = field(default_factory=VoiceConfig)
    wake_word: WakeWordConfig = field(default_factory=WakeWordConfig)
    tts: TTSConfig = field(default_factory=TTSConfig)
    timer: TimerConfig = field(default_factory=TimerConfig)
    assistant: AssistantConfig = field(default_factory=AssistantConfig)
    recipes: RecipesConfig = field(default_factory=RecipesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    testing: TestingConfig = field(default_factory=TestingConfig)


class ConfigLoader(Protocol):
    """Protocol for configuration loading."""

    def load(self, path: Path) -> AiryConfig:
        """Load configuration from file path."""
        ...

    def load_profile(self, profile: str) -> AiryConfig:
        """Load configuration by profile name (dev, prod, test)."""
        ...

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        ...


__all__ = [
    "AiryConfig",
    "AssistantConfig",
    "ConfigLoader",
    "LoggingConfig",
    "RecipesConfig",
    "TTSConfig",
    "TestingConfig",
    "TimerConfig",
    "VoiceConfig",
    "WakeWordConfig",
]
