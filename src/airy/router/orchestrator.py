"""Voice loop orchestrator.

Coordinates the cooking voice pipeline:
Recognition → Debounce → Intent → Timer/Video/Navigation/Assistant → TTS

Listening always resumes after the interaction is over: immediately for
silent state changes, and only after playback ends for spoken responses,
so the assistant never hears itself.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..llm.errors import AssistantError
from ..llm.model import AssistantRequest
from ..video.player import VideoAction
from .intent import ClassificationContext, CommandClassifier, Intent, IntentType
from .playback import PlaybackOutcome, SpeechPlayback
from .recognition import RecognitionController

if TYPE_CHECKING:
    from ..commands.timer import TimerEngine
    from ..config import AiryConfig
    from ..llm.model import RecipeAssistant
    from ..recipes.models import Recipe
    from ..scheduler import Scheduler
    from ..session.state import CookingSession
    from ..stt.recognizer import SpeechRecognizer
    from ..video.player import VideoPlayerState

logger = logging.getLogger(__name__)

WAKE_ONLY_RESPONSE = "はい、何をお手伝いしましょうか？"
NEXT_STEP_RESPONSE = "次のステップに進みます"
PREVIOUS_STEP_RESPONSE = "前のステップに戻ります"
SHOW_INGREDIENTS_RESPONSE = "材料リストを表示します"
SHOW_STEPS_RESPONSE = "手順リストを表示します"
PROCESSING_RESPONSE = "質問を処理しています..."
ASSISTANT_FAILURE_RESPONSE = "申し訳ありません、応答の処理中にエラーが発生しました"
ASSISTANT_ERROR_RESPONSE = "申し訳ありません、処理中にエラーが発生しました"


@dataclass
class InteractionResult:
    """Result of handling one utterance."""

    transcript: str
    intent: IntentType
    response_text: str = ""
    video_url: str | None = None
    latency_ms: int = 0
    error: str | None = None


class Orchestrator:
    """Routes finalized utterances to their handlers.

    Recognition dispatches into handle_utterance(); each intent type has
    one handler, and every handler ends by resuming listening, either
    directly or as the playback continuation.
    """

    def __init__(
        self,
        session: "CookingSession",
        recognition: RecognitionController,
        playback: SpeechPlayback,
        timer: "TimerEngine",
        assistant: "RecipeAssistant",
        classifier: CommandClassifier | None = None,
        video_player: "VideoPlayerState | None" = None,
        on_show_ingredients: Callable[[bool], None] | None = None,
        scheduler: "Scheduler | None" = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            session: Shared cooking session state
            recognition: Recognition and debounce controller
            playback: Spoken response playback
            timer: Cooking timer engine
            assistant: Recipe assistant for free-form questions
            classifier: Intent classifier (default rules if None)
            video_player: Player driven by video commands
            on_show_ingredients: Called with True to show ingredients, False for steps
            scheduler: Scheduler shut down with the orchestrator, if owned
        """
        self._session = session
        self._recognition = recognition
        self._playback = playback
        self._timer = timer
        self._assistant = assistant
        self._classifier = classifier or CommandClassifier()
        self._video_player = video_player
        self._on_show_ingredients = on_show_ingredients
        self._scheduler = scheduler
        self._running = False

        self._handlers: dict[IntentType, Callable[[Intent], InteractionResult]] = {
            IntentType.EXTERNAL: self._handle_silent,
            IntentType.NOOP: self._handle_silent,
            IntentType.TIMER_SETUP: self._handle_timer_setup,
            IntentType.TIMER_CONFIRM: self._handle_timer_confirm,
            IntentType.TIMER_CANCEL: self._handle_timer_cancel,
            IntentType.VIDEO_CONTROL: self._handle_video_control,
            IntentType.WAKE_ONLY: self._handle_wake_only,
            IntentType.NAVIGATE_NEXT: self._handle_next_step,
            IntentType.NAVIGATE_PREVIOUS: self._handle_previous_step,
            IntentType.SHOW_INGREDIENTS: self._handle_show_ingredients,
            IntentType.SHOW_STEPS: self._handle_show_steps,
            IntentType.FREE_FORM: self._handle_free_form,
        }

        self._recognition.set_dispatch(self.handle_utterance)

    @classmethod
    def from_config(
        cls,
        config: "AiryConfig",
        use_mocks: bool = False,
        recipe: "Recipe | None" = None,
        recognizer: "SpeechRecognizer | None" = None,
        scheduler: "Scheduler | None" = None,
    ) -> "Orchestrator":
        """Create orchestrator from configuration.

        Args:
            config: AIry configuration
            use_mocks: Use mock implementations for testing
            recipe: Recipe to start cooking
            recognizer: Speech recognizer (mock recognizer if None)
            scheduler: Scheduler (thread-backed if None)

        Returns:
            Configured Orchestrator instance
        """
        from ..commands.timer import TimerEngine
        from ..feedback import AlertLoop, create_alert_player
        from ..llm import create_assistant
        from ..scheduler import create_scheduler
        from ..session.state import CookingSession
        from ..stt import MockRecognizer
        from ..tts import create_synthesizer
        from ..video.player import VideoPlayerState

        use_mocks = use_mocks or config.testing.use_mocks
        if scheduler is None:
            scheduler = create_scheduler(use_mock=False)

        synthesizer = create_synthesizer(config.tts, use_mock=use_mocks)
        assistant = create_assistant(config.assistant, use_mock=use_mocks)

        session = CookingSession(recipe)
        if recognizer is None:
            recognizer = MockRecognizer()
        recognition = RecognitionController(recognizer, scheduler, session, config.voice)
        playback = SpeechPlayback(synthesizer, scheduler, session, config.tts)

        timer_config = config.timer
        alert = AlertLoop(
            lambda: create_alert_player(
                sound_path=timer_config.alert_sound,
                frequency=timer_config.alert_frequency,
                duration_ms=timer_config.alert_duration_ms,
                use_mock=use_mocks,
            ),
            repeat=timer_config.alert_repeat,
        )
        timer = TimerEngine(scheduler, announcer=playback, alert=alert, config=timer_config)

        return cls(
            session=session,
            recognition=recognition,
            playback=playback,
            timer=timer,
            assistant=assistant,
            classifier=CommandClassifier(config.wake_word),
            video_player=VideoPlayerState(),
            scheduler=scheduler,
        )

    @property
    def session(self) -> "CookingSession":
        """Shared cooking session."""
        return self._session

    @property
    def recognition(self) -> RecognitionController:
        """Recognition controller."""
        return self._recognition

    @property
    def playback(self) -> SpeechPlayback:
        """Speech playback."""
        return self._playback

    @property
    def timer(self) -> "TimerEngine":
        """Timer engine."""
        return self._timer

    @property
    def classifier(self) -> CommandClassifier:
        """Intent classifier."""
        return self._classifier

    @property
    def video_player(self) -> "VideoPlayerState | None":
        """Video player, if any."""
        return self._video_player

    @property
    def is_running(self) -> bool:
        """True between start() and shutdown()."""
        return self._running

    def start(self) -> bool:
        """Start listening.

        Returns:
            True if recognition started.
        """
        self._running = True
        logger.info("Voice loop started")
        return self._recognition.start()

    def shutdown(self) -> None:
        """Stop listening and speaking, cancel timers, release the scheduler."""
        self._running = False
        self._recognition.shutdown()
        self._playback.stop()
        self._timer.shutdown()
        if self._scheduler is not None:
            self._scheduler.shutdown()
        logger.info("Voice loop stopped")

    def select_recipe(self, recipe: "Recipe | None") -> None:
        """Switch the recipe being cooked."""
        self._session.set_current_recipe(recipe)
        if recipe is not None:
            logger.info(f"Cooking: {recipe.title}")

    def set_on_show_ingredients(self, callback: Callable[[bool], None] | None) -> None:
        """Set the listener for ingredient/step list display commands."""
        self._on_show_ingredients = callback

    def handle_utterance(self, text: str) -> InteractionResult:
        """Classify one finalized utterance and act on it.

        Args:
            text: Utterance text

        Returns:
            InteractionResult describing what was done
        """
        start_time = time.time()
        step = self._session.current_step
        context = ClassificationContext(
            current_step_text=step.description if step is not None else None,
            is_timer_dialog_open=self._timer.is_confirm_dialog_visible,
            is_video_modal_open=self._session.is_video_modal_visible,
        )
        intent = self._classifier.classify(text, context)
        logger.info(f"Intent: {intent.type.value} for '{intent.logged_text or text}'")

        handler = self._handlers.get(intent.type, self._handle_silent)
        try:
            result = handler(intent)
        except Exception as e:
            logger.exception(f"Handler for {intent.type.value} failed")
            self._resume_listening()
            result = InteractionResult(transcript=text, intent=intent.type, error=str(e))

        result.latency_ms = int((time.time() - start_time) * 1000)
        return result

    # Silent state changes

    def _handle_silent(self, intent: Intent) -> InteractionResult:
        self._resume_listening()
        return InteractionResult(transcript=intent.raw_text, intent=intent.type)

    def _handle_timer_setup(self, intent: Intent) -> InteractionResult:
        self._timer.show_timer_dialog(intent.seconds or 0, intent.description)
        return self._handle_silent(intent)

    def _handle_timer_confirm(self, intent: Intent) -> InteractionResult:
        self._timer.start_timer()
        return self._handle_silent(intent)

    def _handle_timer_cancel(self, intent: Intent) -> InteractionResult:
        self._timer.hide_timer_dialog()
        return self._handle_silent(intent)

    def _handle_video_control(self, intent: Intent) -> InteractionResult:
        action = intent.video_action
        player = self._video_player
        if action == VideoAction.CLOSE:
            if player is not None:
                player.close()
            self._session.set_video_modal_visible(False)
        elif player is None:
            logger.warning(f"No video player for {action}")
        elif action == VideoAction.PLAY:
            player.play()
        elif action == VideoAction.PAUSE:
            player.pause()
        elif action == VideoAction.TOGGLE_PLAY:
            player.toggle_play()
        elif action == VideoAction.TOGGLE_FULLSCREEN:
            player.toggle_fullscreen()
        return self._handle_silent(intent)

    # Local spoken responses

    def _handle_wake_only(self, intent: Intent) -> InteractionResult:
        return self._respond_locally(intent, WAKE_ONLY_RESPONSE)

    def _handle_next_step(self, intent: Intent) -> InteractionResult:
        index = self._session.next_step()
        logger.debug(f"Step index: {index}")
        return self._respond_locally(intent, NEXT_STEP_RESPONSE)

    def _handle_previous_step(self, intent: Intent) -> InteractionResult:
        index = self._session.previous_step()
        logger.debug(f"Step index: {index}")
        return self._respond_locally(intent, PREVIOUS_STEP_RESPONSE)

    def _handle_show_ingredients(self, intent: Intent) -> InteractionResult:
        self._notify_show_ingredients(True)
        return self._respond_locally(intent, SHOW_INGREDIENTS_RESPONSE)

    def _handle_show_steps(self, intent: Intent) -> InteractionResult:
        self._notify_show_ingredients(False)
        return self._respond_locally(intent, SHOW_STEPS_RESPONSE)

    def _respond_locally(self, intent: Intent, response: str) -> InteractionResult:
        self._session.add_conversation_message(intent.logged_text, is_user=True)
        self._session.add_conversation_message(response, is_user=False)
        self._session.set_last_ai_response(response)
        self._playback.speak(response, on_complete=self._on_playback_complete)
        return InteractionResult(
            transcript=intent.raw_text, intent=intent.type, response_text=response
        )

    # Recipe assistant

    def _handle_free_form(self, intent: Intent) -> InteractionResult:
        question = intent.query_text
        self._session.add_conversation_message(question, is_user=True)
        self._session.set_last_ai_response(PROCESSING_RESPONSE)
        self._session.set_dialog_visible(True)

        request = AssistantRequest(text=question, recipe_context=self._session.build_recipe_context())
        video_url: str | None = None
        error: str | None = None
        try:
            response = self._assistant.query(request)
        except AssistantError as e:
            logger.error(f"Assistant error: {e}")
            error = str(e)
            answer = ASSISTANT_ERROR_RESPONSE
        except Exception as e:
            logger.exception("Unexpected assistant failure")
            error = str(e)
            answer = ASSISTANT_ERROR_RESPONSE
        else:
            if response.success and response.response:
                answer = response.response
                video_url = response.video_url or None
            else:
                error = response.error or "empty response"
                logger.warning(f"Assistant failed: {error}")
                answer = ASSISTANT_FAILURE_RESPONSE

        self._session.set_dialog_visible(False)

        if video_url:
            self._session.set_current_video_url(video_url)
            if self._video_player is not None:
                self._video_player.load(video_url)

        self._session.set_last_ai_response(answer)
        self._session.add_conversation_message(answer, is_user=False)
        self._playback.speak(answer, on_complete=self._on_playback_complete, video_url=video_url)

        return InteractionResult(
            transcript=intent.raw_text,
            intent=intent.type,
            response_text=answer,
            video_url=video_url,
            error=error,
        )

    # Listening

    def _on_playback_complete(self, outcome: PlaybackOutcome) -> None:
        logger.debug(f"Playback {outcome.value}, resuming recognition")
        self._resume_listening()

    def _notify_show_ingredients(self, show: bool) -> None:
        if self._on_show_ingredients is None:
            return
        try:
            self._on_show_ingredients(show)
        except Exception as e:
            logger.warning(f"Ingredient display listener failed: {e}")

    def _resume_listening(self) -> None:
        if not self._running:
            return
        self._recognition.restart()


__all__ = [
    "ASSISTANT_ERROR_RESPONSE",
    "ASSISTANT_FAILURE_RESPONSE",
    "InteractionResult",
    "Orchestrator",
    "PROCESSING_RESPONSE",
    "WAKE_ONLY_RESPONSE",
]
