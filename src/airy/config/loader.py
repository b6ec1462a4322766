"""YAML configuration loader.

Profiles are YAML files under config/ that may name a parent with
'extends'. The merged document's 'airy' mapping is turned into typed
section dataclasses and checked before anything is built from it, so a
typo in a profile fails at startup rather than mid-cook.
"""

import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, TypeVar

import yaml

from . import (
    AiryConfig,
    AssistantConfig,
    LoggingConfig,
    RecipesConfig,
    TestingConfig,
    TimerConfig,
    TTSConfig,
    VoiceConfig,
    WakeWordConfig,
)
from .profiles import default_config_dir

logger = logging.getLogger(__name__)

ASSISTANT_PROVIDERS = ("callable", "claude", "mock")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_SECTIONS: dict[str, type] = {
    "voice": VoiceConfig,
    "wake_word": WakeWordConfig,
    "tts": TTSConfig,
    "timer": TimerConfig,
    "assistant": AssistantConfig,
    "recipes": RecipesConfig,
    "logging": LoggingConfig,
    "testing": TestingConfig,
}

T = TypeVar("T")


class ConfigError(ValueError):
    """Raised when a config file is malformed or has invalid values."""

    pass


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base.

    Nested mappings merge key by key; anything else in override replaces
    the base value outright (lists included).
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_yaml_with_inheritance(path: Path, _seen: tuple[Path, ...] = ()) -> dict[str, Any]:
    """Load a YAML file, resolving its 'extends' chain.

    Args:
        path: Profile file to load

    Returns:
        The merged document, parents first.

    Raises:
        FileNotFoundError: If the file or one of its parents is missing
        ConfigError: If the document is not a mapping or the chain loops
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    resolved = path.resolve()
    if resolved in _seen:
        chain = " -> ".join(p.name for p in (*_seen, resolved))
        raise ConfigError(f"Config inheritance loops: {chain}")

    with open(path, encoding="utf-8") as f:
        document = yaml.safe_load(f) or {}
    if not isinstance(document, dict):
        raise ConfigError(f"{path.name}: top level must be a mapping")

    parent = document.pop("extends", None)
    if parent is None:
        return document

    logger.debug(f"{path.name} extends {parent}")
    base = load_yaml_with_inheritance(path.parent / str(parent), (*_seen, resolved))
    return deep_merge(base, document)


def _build_section(cls: type[T], name: str, data: Any) -> T:
    # Present-but-empty YAML sections load as None
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"airy.{name} must be a mapping")

    known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    unknown = sorted(set(data) - known)
    if unknown:
        keys = ", ".join(f"airy.{name}.{key}" for key in unknown)
        raise ConfigError(f"Unknown config keys: {keys}")
    return cls(**data)


def dict_to_config(data: dict[str, Any]) -> AiryConfig:
    """Build a typed AiryConfig from a merged document.

    Missing sections take their defaults.

    Raises:
        ConfigError: If a section is not a mapping or has unknown keys
    """
    airy_data = data.get("airy") or {}
    if not isinstance(airy_data, dict):
        raise ConfigError("airy must be a mapping")

    unknown = sorted(set(airy_data) - set(_SECTIONS))
    if unknown:
        raise ConfigError(f"Unknown config sections: {', '.join(unknown)}")

    sections = {
        name: _build_section(cls, name, airy_data.get(name)) for name, cls in _SECTIONS.items()
    }
    return AiryConfig(**sections)


def validate_config(config: AiryConfig) -> AiryConfig:
    """Check values the voice loop depends on.

    Returns:
        The same config, for chaining

    Raises:
        ConfigError: Listing every invalid value found
    """
    problems: list[str] = []

    if config.voice.debounce_ms <= 0:
        problems.append("voice.debounce_ms must be positive")
    if config.voice.restart_delay_ms < 0:
        problems.append("voice.restart_delay_ms must not be negative")
    if config.voice.max_restart_attempts < 0:
        problems.append("voice.max_restart_attempts must not be negative")

    if not config.wake_word.tokens:
        problems.append("wake_word.tokens must not be empty")
    ambiguous = config.wake_word.ambiguous_token
    if ambiguous and ambiguous not in config.wake_word.tokens:
        problems.append(f"wake_word.ambiguous_token '{ambiguous}' is not one of the tokens")

    if config.tts.start_delay_ms < 0:
        problems.append("tts.start_delay_ms must not be negative")

    if config.timer.tick_interval_s <= 0:
        problems.append("timer.tick_interval_s must be positive")
    if config.timer.alert_repeat < 1:
        problems.append("timer.alert_repeat must be at least 1")
    if any(mark < 0 for mark in config.timer.notify_at):
        problems.append("timer.notify_at marks must not be negative")

    if config.assistant.provider not in ASSISTANT_PROVIDERS:
        problems.append(
            f"assistant.provider must be one of {', '.join(ASSISTANT_PROVIDERS)}"
            f" (got '{config.assistant.provider}')"
        )
    if config.assistant.timeout_seconds <= 0:
        problems.append("assistant.timeout_seconds must be positive")

    if config.logging.level.upper() not in LOG_LEVELS:
        problems.append(f"logging.level '{config.logging.level}' is not a log level")

    if problems:
        raise ConfigError("Invalid configuration: " + "; ".join(problems))
    return config


class YAMLConfigLoader:
    """Loads profiles from a config directory."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader.

        Args:
            config_dir: Directory holding the profile files.
                        Defaults to config/ at the project root.
        """
        self._config_dir = config_dir if config_dir is not None else default_config_dir()

    def load(self, path: Path) -> AiryConfig:
        """Load and validate one config file.

        Raises:
            FileNotFoundError: If the file is missing
            ConfigError: If the file is malformed or has invalid values
        """
        config = validate_config(dict_to_config(load_yaml_with_inheritance(path)))
        logger.debug(f"Loaded config from {path}")
        return config

    def load_profile(self, profile: str) -> AiryConfig:
        """Load a profile by name ('dev', 'prod', 'test')."""
        return self.load(self._config_dir / f"{profile}.yaml")

    def get_config_dir(self) -> Path:
        """Directory profiles are read from."""
        return self._config_dir


def load_config(path: str | Path | None = None, profile: str | None = None) -> AiryConfig:
    """Load AIry configuration.

    Args:
        path: Config file to load (takes precedence)
        profile: Profile name if no path is given; dev when neither is

    Returns:
        Validated AiryConfig

    Examples:
        >>> config = load_config(profile="test")
        >>> config.assistant.provider
        'mock'
    """
    loader = YAMLConfigLoader()
    if path is not None:
        return loader.load(Path(path))
    return loader.load_profile(profile or "dev")


__all__ = [
    "ASSISTANT_PROVIDERS",
    "ConfigError",
    "YAMLConfigLoader",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
    "validate_config",
]
