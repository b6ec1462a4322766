"""Mock recipe assistant for testing.

Provides a controllable mock implementation for unit and integration testing.
"""

from .errors import AssistantError
from .model import AssistantRequest, AssistantResponse


class MockRecipeAssistant:
    """Mock assistant returning preset responses."""

    def __init__(self) -> None:
        """Initialize mock assistant."""
        self._response = AssistantResponse(success=True, response="これはテスト用の回答です。")
        self._error: Exception | None = None
        self._requests: list[AssistantRequest] = []

    def set_response(self, text: str, video_url: str | None = None) -> None:
        """Set a successful response.

        Args:
            text: Answer text
            video_url: Optional video URL
        """
        self._response = AssistantResponse(success=True, response=text, video_url=video_url)
        self._error = None

    def set_failure(self, error: str = "backend failure") -> None:
        """Return success=False on the next queries."""
        self._response = AssistantResponse(success=False, error=error)
        self._error = None

    def set_error(self, error: Exception | str) -> None:
        """Raise on the next queries.

        Args:
            error: Exception to raise, or a message for an AssistantError
        """
        self._error = AssistantError(error) if isinstance(error, str) else error

    def query(self, request: AssistantRequest) -> AssistantResponse:
        """Record the request and return the preset response."""
        self._requests.append(request)
        if self._error is not None:
            raise self._error
        return self._response

    @property
    def requests(self) -> list[AssistantRequest]:
        """Requests received so far."""
        return self._requests.copy()

    @property
    def call_count(self) -> int:
        """Number of queries."""
        return len(self._requests)


__all__ = ["MockRecipeAssistant"]
