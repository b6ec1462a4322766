"""Speech recognition module for AIry Voice Core.

The acoustic recognizer is platform provided; this package defines the
interface the voice loop drives and a scriptable mock.
"""

from .mock import MockRecognizer
from .recognizer import RecognizerEvents, SpeechRecognizer

__all__ = ["MockRecognizer", "RecognizerEvents", "SpeechRecognizer"]
