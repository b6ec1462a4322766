"""Voice loop routing for AIry Voice Core.

Recognition and debounce, intent classification, spoken response
playback and the orchestrator that ties them together.
"""

from .intent import ClassificationContext, CommandClassifier, Intent, IntentType
from .orchestrator import InteractionResult, Orchestrator
from .playback import PlaybackOutcome, PlaybackState, SpeechPlayback
from .recognition import RecognitionController, RecognitionState

__all__ = [
    "ClassificationContext",
    "CommandClassifier",
    "Intent",
    "IntentType",
    "InteractionResult",
    "Orchestrator",
    "PlaybackOutcome",
    "PlaybackState",
    "RecognitionController",
    "RecognitionState",
    "SpeechPlayback",
]
