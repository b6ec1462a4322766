"""Wake word detection module for AIry Voice Core."""

from .detector import TextWakeWordDetector, WakeWordResult, normalize_text

__all__ = ["TextWakeWordDetector", "WakeWordResult", "normalize_text"]
