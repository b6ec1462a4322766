"""Platform detection for audio output.

Speech and the timer alert both go through command-line tools, so
picking a backend means finding which tools this platform ships.
"""

import platform as platform_module
import shutil
from enum import Enum, auto


class Platform(Enum):
    """Platform families with different audio tools."""

    MACOS = auto()
    LINUX = auto()
    OTHER = auto()


# Player command line per platform; the file path is appended
_ALERT_PLAYERS: dict[Platform, list[str]] = {
    Platform.MACOS: ["afplay"],
    Platform.LINUX: ["aplay", "-q"],
}


def detect_platform() -> Platform:
    """Detect the current platform family.

    Returns:
        MACOS for Darwin, LINUX for Linux, OTHER for anything else.
    """
    system = platform_module.system()
    if system == "Darwin":
        return Platform.MACOS
    if system == "Linux":
        return Platform.LINUX
    return Platform.OTHER


def alert_player_command(platform: Platform | None = None) -> list[str] | None:
    """Command line that plays a WAV file on this platform.

    Args:
        platform: Platform to look up (detected if None)

    Returns:
        Command and flags, or None if the platform has no player installed.
    """
    if platform is None:
        platform = detect_platform()
    command = _ALERT_PLAYERS.get(platform)
    if command is None or shutil.which(command[0]) is None:
        return None
    return list(command)


__all__ = ["Platform", "alert_player_command", "detect_platform"]
