"""Recipe assistant module for AIry Voice Core.

Answers free-form cooking questions through the callable-function
backend, Claude directly, or a mock implementation.
"""

import logging
from typing import TYPE_CHECKING

from .errors import (
    AssistantAPIError,
    AssistantAuthError,
    AssistantError,
    AssistantResponseError,
    AssistantTimeoutError,
)
from .mock import MockRecipeAssistant
from .model import AssistantRequest, AssistantResponse, RecipeAssistant

if TYPE_CHECKING:
    from ..config import AssistantConfig

logger = logging.getLogger(__name__)


def create_assistant(
    config: "AssistantConfig | None" = None,
    use_mock: bool = False,
) -> RecipeAssistant:
    """Create a recipe assistant.

    Args:
        config: Assistant configuration
        use_mock: If True, return mock implementation for testing

    Returns:
        RecipeAssistant implementation. Falls back to the mock when the
        configured backend cannot be set up.
    """
    provider = config.provider if config is not None else "callable"
    if use_mock or provider == "mock":
        logger.info("Assistant: Using MockRecipeAssistant")
        return MockRecipeAssistant()

    if provider == "claude":
        from .claude import ClaudeRecipeAssistant

        try:
            if config is None:
                return ClaudeRecipeAssistant()
            return ClaudeRecipeAssistant(
                model=config.model,
                max_tokens=config.max_tokens,
                temperature=config.temperature,
                timeout=config.timeout_seconds,
            )
        except ValueError as e:
            logger.warning(f"Claude assistant unavailable ({e}), using mock")
            return MockRecipeAssistant()

    if provider != "callable":
        logger.warning(f"Unknown assistant provider '{provider}', using callable")

    from .callable import CallableRecipeAssistant

    assistant = CallableRecipeAssistant(
        endpoint=config.endpoint if config is not None else None,
        timeout=config.timeout_seconds if config is not None else 30.0,
    )
    if not assistant.is_available:
        logger.warning("Callable assistant has no endpoint, using mock")
        return MockRecipeAssistant()
    return assistant


__all__ = [
    "AssistantAPIError",
    "AssistantAuthError",
    "AssistantError",
    "AssistantRequest",
    "AssistantResponse",
    "AssistantResponseError",
    "AssistantTimeoutError",
    "MockRecipeAssistant",
    "RecipeAssistant",
    "create_assistant",
]
