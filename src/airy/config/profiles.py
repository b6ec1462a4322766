"""Configuration profile management.

Detects which configuration profile to run with.
"""

import os
from enum import Enum
from pathlib import Path


class Profile(Enum):
    """Available configuration profiles."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


def default_config_dir() -> Path:
    """Return the config/ directory at the project root."""
    return Path(__file__).parent.parent.parent.parent / "config"


def detect_profile() -> Profile:
    """Detect appropriate configuration profile.

    Uses the AIRY_PROFILE environment variable, defaulting to dev.

    Returns:
        Profile enum value
    """
    env_profile = os.environ.get("AIRY_PROFILE", "").strip().lower()
    try:
        return Profile(env_profile)
    except ValueError:
        return Profile.DEV


def get_profile_path(profile: Profile | None = None, config_dir: Path | None = None) -> Path:
    """Get path to profile configuration file.

    Args:
        profile: Profile to use, or None to auto-detect
        config_dir: Configuration directory, or None for default

    Returns:
        Path to profile YAML file
    """
    if profile is None:
        profile = detect_profile()
    if config_dir is None:
        config_dir = default_config_dir()
    return config_dir / f"{profile.value}.yaml"


__all__ = [
    "Profile",
    "default_config_dir",
    "detect_profile",
    "get_profile_path",
]
