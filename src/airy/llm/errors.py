"""Error types for the recipe assistant clients."""


class AssistantError(Exception):
    """Base exception for recipe assistant errors."""

    pass


class AssistantTimeoutError(AssistantError):
    """Raised when the assistant request times out."""

    pass


class AssistantAPIError(AssistantError):
    """Raised when the assistant backend returns an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize API error.

        Args:
            message: Error message.
            status_code: HTTP status code if available.
        """
        super().__init__(message)
        self.status_code = status_code


class AssistantAuthError(AssistantError):
    """Raised when authentication fails."""

    pass


class AssistantResponseError(AssistantError):
    """Raised when the backend reply cannot be parsed."""

    pass


__all__ = [
    "AssistantAPIError",
    "AssistantAuthError",
    "AssistantError",
    "AssistantResponseError",
    "AssistantTimeoutError",
]
