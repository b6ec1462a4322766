"""Recipe assistant protocol and data classes.

Defines the interface for answering free-form cooking questions.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..recipes.models import RecipeContext


@dataclass
class AssistantRequest:
    """A free-form question with the recipe position it was asked at.

    Attributes:
        text: The user's question (wake word removed)
        recipe_context: Current recipe snapshot, None without a recipe
    """

    text: str
    recipe_context: "RecipeContext | None" = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the callable-function backend."""
        return {
            "text": self.text,
            "recipeContext": self.recipe_context.to_dict() if self.recipe_context else None,
        }


@dataclass
class AssistantResponse:
    """Answer from the recipe assistant.

    Attributes:
        success: False if the backend reported a failure
        response: Answer text to speak
        video_url: Optional video to show after speaking
        error: Backend error message when success is False
    """

    success: bool
    response: str | None = None
    video_url: str | None = None
    error: str | None = None

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "AssistantResponse":
        """Parse a backend result object ({success, response, videoUrl, error})."""

        def text(key: str) -> str | None:
            value = data.get(key)
            return str(value) if value is not None else None

        return cls(
            success=bool(data.get("success", False)),
            response=text("response"),
            video_url=text("videoUrl"),
            error=text("error"),
        )


class RecipeAssistant(Protocol):
    """Interface for the cooking question backend."""

    def query(self, request: AssistantRequest) -> AssistantResponse:
        """Answer a question.

        Args:
            request: Question and recipe context

        Returns:
            AssistantResponse; success=False for failures the backend reports

        Raises:
            AssistantError: If the backend could not be reached or replied
                with something unusable
        """
        ...


__all__ = ["AssistantRequest", "AssistantResponse", "RecipeAssistant"]
