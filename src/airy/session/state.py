"""Cooking session state.

CookingSession is the single mutable store the voice loop reads and
writes: current recipe and step, what was heard, what was said back,
and which overlays are visible. It is injected into the components that
need it rather than held in a global.
"""

import logging
import secrets
import threading
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ..recipes.models import Recipe, RecipeContext, Step

logger = logging.getLogger(__name__)


def _generate_message_id() -> str:
    """Generate a message id of the form msg-<epoch ms>-<random suffix>."""
    return f"msg-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


@dataclass(frozen=True)
class ConversationMessage:
    """One entry in the conversation log."""

    text: str
    is_user: bool
    id: str = field(default_factory=_generate_message_id)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


class CookingSession:
    """Mutable state of one cooking session.

    All mutators are guarded by a re-entrant lock because recognition
    and timer callbacks may arrive on scheduler threads.
    """

    def __init__(self, recipe: Recipe | None = None) -> None:
        """Initialize session.

        Args:
            recipe: Recipe to start with, if any
        """
        self._lock = threading.RLock()
        self._recipe: Recipe | None = recipe
        self._step_index = 0
        self._recognized_text = ""
        self._last_ai_response = ""
        self._history: list[ConversationMessage] = []
        self._dialog_visible = False
        self._video_modal_visible = False
        self._video_url: str | None = None

    # Recipe and step navigation

    @property
    def current_recipe(self) -> Recipe | None:
        """Recipe being cooked."""
        with self._lock:
            return self._recipe

    @property
    def current_step_index(self) -> int:
        """Zero-based index of the current step."""
        with self._lock:
            return self._step_index

    @property
    def current_step(self) -> Step | None:
        """Current step, or None without a recipe or steps."""
        with self._lock:
            if self._recipe is None or not self._recipe.steps:
                return None
            return self._recipe.steps[self._step_index]

    def set_current_recipe(self, recipe: Recipe | None) -> None:
        """Switch recipe and go back to the first step."""
        with self._lock:
            self._recipe = recipe
            self._step_index = 0
        logger.debug(f"Current recipe: {recipe.title if recipe else None}")

    def next_step(self) -> int:
        """Advance one step, staying on the last step.

        Returns:
            The step index after the move.
        """
        return self.go_to_step(self.current_step_index + 1)

    def previous_step(self) -> int:
        """Go back one step, staying on the first step.

        Returns:
            The step index after the move.
        """
        return self.go_to_step(self.current_step_index - 1)

    def go_to_step(self, index: int) -> int:
        """Jump to a step, clamped to the recipe's step range.

        Without a recipe (or with an empty one) this is a no-op.

        Args:
            index: Desired zero-based step index

        Returns:
            The step index after the move.
        """
        with self._lock:
            if self._recipe is None or not self._recipe.steps:
                return self._step_index
            last = len(self._recipe.steps) - 1
            self._step_index = max(0, min(index, last))
            return self._step_index

    # Recognition and response text

    @property
    def recognized_text(self) -> str:
        """Latest recognized (possibly partial) user text."""
        with self._lock:
            return self._recognized_text

    def set_recognized_text(self, text: str) -> None:
        """Replace the recognized text."""
        with self._lock:
            self._recognized_text = text

    @property
    def last_ai_response(self) -> str:
        """Text most recently shown or spoken by the assistant."""
        with self._lock:
            return self._last_ai_response

    def set_last_ai_response(self, text: str) -> None:
        """Replace the last assistant response."""
        with self._lock:
            self._last_ai_response = text

    # Conversation log

    @property
    def conversation_history(self) -> list[ConversationMessage]:
        """Copy of the conversation log, oldest first."""
        with self._lock:
            return list(self._history)

    def add_conversation_message(self, text: str, is_user: bool) -> ConversationMessage:
        """Append a message to the conversation log.

        Args:
            text: Message text
            is_user: True for user utterances, False for assistant replies

        Returns:
            The appended message.
        """
        message = ConversationMessage(text=text, is_user=is_user)
        with self._lock:
            self._history.append(message)
        return message

    # Overlays

    @property
    def is_response_dialog_visible(self) -> bool:
        """Whether the response dialog is shown."""
        with self._lock:
            return self._dialog_visible

    def set_dialog_visible(self, visible: bool) -> None:
        """Show or hide the response dialog."""
        with self._lock:
            self._dialog_visible = visible

    @property
    def is_video_modal_visible(self) -> bool:
        """Whether the video modal is shown."""
        with self._lock:
            return self._video_modal_visible

    def set_video_modal_visible(self, visible: bool) -> None:
        """Show or hide the video modal."""
        with self._lock:
            self._video_modal_visible = visible

    @property
    def current_video_url(self) -> str | None:
        """URL of the video offered by the last response."""
        with self._lock:
            return self._video_url

    def set_current_video_url(self, url: str | None) -> None:
        """Set the video URL."""
        with self._lock:
            self._video_url = url

    # Assistant context

    def build_recipe_context(self) -> RecipeContext | None:
        """Snapshot the current recipe position for an assistant query.

        Returns:
            RecipeContext, or None when no recipe is selected.
        """
        with self._lock:
            recipe = self._recipe
            if recipe is None:
                return None
            step = recipe.steps[self._step_index] if recipe.steps else None
            return RecipeContext(
                title=recipe.title,
                current_step=step.description if step else "",
                step_number=self._step_index + 1,
                total_steps=len(recipe.steps),
                ingredients=list(recipe.ingredients),
            )

    def reset_cooking_session(self) -> None:
        """Clear everything transient. The recipe stays selected."""
        with self._lock:
            self._step_index = 0
            self._recognized_text = ""
            self._last_ai_response = ""
            self._history.clear()
            self._dialog_visible = False
            self._video_modal_visible = False
            self._video_url = None
        logger.debug("Cooking session reset")


__all__ = ["ConversationMessage", "CookingSession"]
