"""Recipe assistant that queries Claude directly.

Builds the same prompt the callable-function backend uses: a cooking
assistant system prompt, then the recipe context and the question.
"""

import json
import logging
import os
import time

import anthropic

from .errors import (
    AssistantAPIError,
    AssistantAuthError,
    AssistantError,
    AssistantTimeoutError,
)
from .model import AssistantRequest, AssistantResponse

logger = logging.getLogger(__name__)

RECIPE_ASSISTANT_PROMPT = """あなたは料理アシスタントのAIです。
ユーザーは料理中でレシピアプリ「Airy Recipe」を使用しています。
彼らは音声コマンドであなたに話しかけています。
以下のことを念頭に置いてください：

1. 料理に関する質問に丁寧かつ簡潔に答えてください
2. 材料の代替品、調理テクニック、タイミングなどの質問に答えられます
3. 現在表示されているレシピのコンテキストを考慮して回答してください
4. 必要な情報がない場合は、料理の一般的な知識に基づいて回答してください
5. 回答は明確で、調理中のユーザーにとって役立つものにしてください
6. 回答は100文字以内で簡潔にまとめてください

回答は読み上げられます。箇条書きや記号は使わないでください。"""

NO_CONTEXT = "特定のレシピのコンテキストはありません"


def build_user_message(request: AssistantRequest) -> str:
    """Combine recipe context and question into the user message."""
    if request.recipe_context is not None:
        context = json.dumps(request.recipe_context.to_dict(), ensure_ascii=False)
        context_info = f"現在表示中のレシピ情報: {context}"
    else:
        context_info = NO_CONTEXT
    return f"{context_info}\n\nユーザーの質問: {request.text}"


class ClaudeRecipeAssistant:
    """Answers cooking questions with the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-3-5-haiku-latest",
        max_tokens: int = 300,
        temperature: float = 0.2,
        timeout: float = 30.0,
    ) -> None:
        """Initialize Claude assistant.

        Args:
            api_key: Anthropic API key. Falls back to ANTHROPIC_API_KEY.
            model: Model identifier.
            max_tokens: Response token limit.
            temperature: Sampling temperature.
            timeout: Request timeout in seconds.

        Raises:
            ValueError: If no API key is available.
        """
        api_key = (api_key or os.environ.get("ANTHROPIC_API_KEY", "")).strip()
        if not api_key:
            raise ValueError(
                "ANTHROPIC_API_KEY environment variable is not set. "
                "Set it to use the Claude recipe assistant."
            )
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._timeout = timeout
        self._client = anthropic.Anthropic(api_key=api_key, timeout=timeout)

    def query(self, request: AssistantRequest) -> AssistantResponse:
        """Ask Claude a cooking question.

        Args:
            request: Question and recipe context

        Returns:
            AssistantResponse with the answer text

        Raises:
            AssistantTimeoutError: If the request times out.
            AssistantAuthError: If authentication fails.
            AssistantAPIError: If the API returns an error or is unreachable.
            AssistantError: If Claude returns no text.
        """
        start_time = time.time()
        try:
            response = self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                system=RECIPE_ASSISTANT_PROMPT,
                messages=[{"role": "user", "content": build_user_message(request)}],
            )
        except anthropic.AuthenticationError as e:
            raise AssistantAuthError(
                "Invalid API key. Please check your ANTHROPIC_API_KEY."
            ) from e
        except anthropic.APITimeoutError as e:
            # Timeout is a subclass of connection error, so it goes first
            raise AssistantTimeoutError(
                f"Request timed out after {self._timeout} seconds."
            ) from e
        except anthropic.APIConnectionError as e:
            raise AssistantAPIError(f"Failed to connect to Claude API: {e}") from e
        except anthropic.APIStatusError as e:
            raise AssistantAPIError(f"API error: {e.message}", status_code=e.status_code) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        ).strip()
        if not text:
            raise AssistantError("Claude returned an empty response")

        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Claude answered in {latency_ms}ms")
        return AssistantResponse(success=True, response=text)


__all__ = ["ClaudeRecipeAssistant", "RECIPE_ASSISTANT_PROMPT", "build_user_message"]
