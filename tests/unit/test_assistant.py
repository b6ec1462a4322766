"""Unit tests for the recipe assistant clients."""

import json
import os
from unittest.mock import MagicMock, patch

import httpx
import pytest

from airy.config import AssistantConfig
from airy.llm import (
    AssistantAPIError,
    AssistantAuthError,
    AssistantError,
    AssistantRequest,
    AssistantResponse,
    AssistantResponseError,
    AssistantTimeoutError,
    MockRecipeAssistant,
    create_assistant,
)
from airy.llm.callable import CallableRecipeAssistant
from airy.recipes import Ingredient, RecipeContext

ENDPOINT = "https://example.test/processVoiceCommand"


@pytest.fixture
def request_with_context() -> AssistantRequest:
    """Question asked on step 2 of 4."""
    return AssistantRequest(
        text="砂糖の代わりは？",
        recipe_context=RecipeContext(
            title="肉じゃが",
            current_step="鍋に油を熱し、牛肉を炒める",
            step_number=2,
            total_steps=4,
            ingredients=[Ingredient("砂糖", "大さじ2")],
        ),
    )


class TestAssistantModel:
    """Tests for request and response payloads."""

    def test_request_payload(self, request_with_context: AssistantRequest) -> None:
        """Test the request serializes text and camelCase context."""
        payload = request_with_context.to_payload()
        assert payload["text"] == "砂糖の代わりは？"
        assert payload["recipeContext"]["stepNumber"] == 2

    def test_request_without_context(self) -> None:
        """Test a request without a recipe sends a null context."""
        assert AssistantRequest(text="質問").to_payload() == {"text": "質問", "recipeContext": None}

    def test_response_from_payload(self) -> None:
        """Test parsing a backend result."""
        response = AssistantResponse.from_payload(
            {"success": True, "response": "はちみつが使えます", "videoUrl": "https://youtu.be/x"}
        )
        assert response.success is True
        assert response.response == "はちみつが使えます"
        assert response.video_url == "https://youtu.be/x"

    def test_response_from_payload_coerces_text(self) -> None:
        """Test non-string fields become strings and missing ones stay None."""
        response = AssistantResponse.from_payload(
            {"success": True, "response": 42, "videoUrl": None, "error": {"code": 1}}
        )
        assert response.response == "42"
        assert response.video_url is None
        assert response.error == "{'code': 1}"


class TestCallableRecipeAssistant:
    """Tests for the callable-function client using httpx.MockTransport."""

    def _client(
        self, transport: httpx.MockTransport, id_token: str | None = None
    ) -> CallableRecipeAssistant:
        return CallableRecipeAssistant(endpoint=ENDPOINT, id_token=id_token, transport=transport)

    def test_wire_format(self, request_with_context: AssistantRequest) -> None:
        """Test the request body is wrapped in data and the result is unwrapped."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"result": {"success": True, "response": "はちみつで代用できます"}},
            )

        client = self._client(httpx.MockTransport(handler), id_token="token-123")
        response = client.query(request_with_context)

        assert response.success is True
        assert response.response == "はちみつで代用できます"
        body = json.loads(seen[0].content)
        assert body["data"]["text"] == "砂糖の代わりは？"
        assert body["data"]["recipeContext"]["title"] == "肉じゃが"
        assert seen[0].headers["Authorization"] == "Bearer token-123"

    def test_backend_failure_result(self, request_with_context: AssistantRequest) -> None:
        """Test success=False is returned, not raised."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"result": {"success": False, "error": "x"}})
        )
        response = self._client(transport).query(request_with_context)
        assert response.success is False
        assert response.error == "x"

    def test_auth_error(self, request_with_context: AssistantRequest) -> None:
        """Test 401 maps to AssistantAuthError."""
        transport = httpx.MockTransport(
            lambda request: httpx.Response(
                401, json={"error": {"message": "Unauthenticated", "status": "UNAUTHENTICATED"}}
            )
        )
        with pytest.raises(AssistantAuthError, match="Unauthenticated"):
            self._client(transport).query(request_with_context)

    def test_server_error(self, request_with_context: AssistantRequest) -> None:
        """Test other error statuses map to AssistantAPIError with the status."""
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="oops"))
        with pytest.raises(AssistantAPIError) as exc_info:
            self._client(transport).query(request_with_context)
        assert exc_info.value.status_code == 500

    def test_timeout(self, request_with_context: AssistantRequest) -> None:
        """Test timeouts map to AssistantTimeoutError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(AssistantTimeoutError):
            self._client(httpx.MockTransport(handler)).query(request_with_context)

    def test_connection_error(self, request_with_context: AssistantRequest) -> None:
        """Test transport failures map to AssistantAPIError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(AssistantAPIError):
            self._client(httpx.MockTransport(handler)).query(request_with_context)

    def test_missing_result(self, request_with_context: AssistantRequest) -> None:
        """Test a reply without a result object is rejected."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"data": {}}))
        with pytest.raises(AssistantResponseError):
            self._client(transport).query(request_with_context)

    def test_non_json_reply(self, request_with_context: AssistantRequest) -> None:
        """Test a non-JSON reply is rejected."""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(AssistantResponseError):
            self._client(transport).query(request_with_context)

    def test_no_endpoint(self) -> None:
        """Test querying without an endpoint raises."""
        with patch.dict(os.environ, {}, clear=True):
            client = CallableRecipeAssistant()
        assert client.is_available is False
        with pytest.raises(AssistantError):
            client.query(AssistantRequest(text="質問"))

    def test_endpoint_from_env(self) -> None:
        """Test the endpoint falls back to the environment."""
        with patch.dict(os.environ, {"AIRY_ASSISTANT_ENDPOINT": ENDPOINT}):
            assert CallableRecipeAssistant().is_available is True


class TestClaudeRecipeAssistant:
    """Tests for the direct Claude client."""

    @pytest.fixture
    def mock_anthropic(self) -> MagicMock:
        """Create mock Anthropic client."""
        mock = MagicMock()
        mock.messages.create.return_value = MagicMock(
            content=[MagicMock(type="text", text="はちみつで代用できます")]
        )
        return mock

    def test_requires_api_key(self) -> None:
        """Test a missing API key raises ValueError."""
        from airy.llm.claude import ClaudeRecipeAssistant

        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="ANTHROPIC_API_KEY"):
                ClaudeRecipeAssistant()

    def test_query(
        self, mock_anthropic: MagicMock, request_with_context: AssistantRequest
    ) -> None:
        """Test the prompt carries the recipe context and question."""
        from airy.llm.claude import RECIPE_ASSISTANT_PROMPT, ClaudeRecipeAssistant

        with patch("airy.llm.claude.anthropic.Anthropic", return_value=mock_anthropic):
            assistant = ClaudeRecipeAssistant(api_key="test-key", max_tokens=200)
            response = assistant.query(request_with_context)

        assert response.success is True
        assert response.response == "はちみつで代用できます"
        call_kwargs = mock_anthropic.messages.create.call_args[1]
        assert call_kwargs["system"] == RECIPE_ASSISTANT_PROMPT
        assert call_kwargs["max_tokens"] == 200
        content = call_kwargs["messages"][0]["content"]
        assert "肉じゃが" in content
        assert "砂糖の代わりは？" in content

    def test_query_without_context(self) -> None:
        """Test the no-context marker is used without a recipe."""
        from airy.llm.claude import NO_CONTEXT, build_user_message

        assert NO_CONTEXT in build_user_message(AssistantRequest(text="質問"))

    def test_timeout(self, mock_anthropic: MagicMock, request_with_context: AssistantRequest) -> None:
        """Test timeouts map to AssistantTimeoutError."""
        import anthropic

        from airy.llm.claude import ClaudeRecipeAssistant

        mock_anthropic.messages.create.side_effect = anthropic.APITimeoutError(request=MagicMock())
        with patch("airy.llm.claude.anthropic.Anthropic", return_value=mock_anthropic):
            assistant = ClaudeRecipeAssistant(api_key="test-key")
            with pytest.raises(AssistantTimeoutError):
                assistant.query(request_with_context)

    def test_auth_error(self, mock_anthropic: MagicMock, request_with_context: AssistantRequest) -> None:
        """Test auth errors map to AssistantAuthError."""
        import anthropic

        from airy.llm.claude import ClaudeRecipeAssistant

        mock_anthropic.messages.create.side_effect = anthropic.AuthenticationError(
            message="Invalid API key",
            response=MagicMock(status_code=401),
            body=None,
        )
        with patch("airy.llm.claude.anthropic.Anthropic", return_value=mock_anthropic):
            assistant = ClaudeRecipeAssistant(api_key="test-key")
            with pytest.raises(AssistantAuthError):
                assistant.query(request_with_context)

    def test_empty_reply(self, mock_anthropic: MagicMock, request_with_context: AssistantRequest) -> None:
        """Test an empty reply raises AssistantError."""
        from airy.llm.claude import ClaudeRecipeAssistant

        mock_anthropic.messages.create.return_value = MagicMock(content=[])
        with patch("airy.llm.claude.anthropic.Anthropic", return_value=mock_anthropic):
            assistant = ClaudeRecipeAssistant(api_key="test-key")
            with pytest.raises(AssistantError):
                assistant.query(request_with_context)


class TestMockRecipeAssistant:
    """Tests for MockRecipeAssistant."""

    def test_records_requests(self) -> None:
        """Test requests are recorded and the preset answer returned."""
        assistant = MockRecipeAssistant()
        assistant.set_response("答え", video_url="https://youtu.be/abcdefghijk")

        response = assistant.query(AssistantRequest(text="質問"))

        assert response.response == "答え"
        assert response.video_url == "https://youtu.be/abcdefghijk"
        assert assistant.call_count == 1
        assert assistant.requests[0].text == "質問"

    def test_set_error(self) -> None:
        """Test a configured error is raised."""
        assistant = MockRecipeAssistant()
        assistant.set_error("down")
        with pytest.raises(AssistantError):
            assistant.query(AssistantRequest(text="質問"))


class TestCreateAssistant:
    """Tests for the assistant factory."""

    def test_mock_requested(self) -> None:
        """Test use_mock returns the mock."""
        assert isinstance(create_assistant(AssistantConfig(), use_mock=True), MockRecipeAssistant)

    def test_callable_without_endpoint_falls_back(self) -> None:
        """Test the callable provider without an endpoint falls back to the mock."""
        with patch.dict(os.environ, {}, clear=True):
            assistant = create_assistant(AssistantConfig(provider="callable"))
        assert isinstance(assistant, MockRecipeAssistant)

    def test_callable_with_endpoint(self) -> None:
        """Test the callable provider with an endpoint."""
        assistant = create_assistant(AssistantConfig(provider="callable", endpoint=ENDPOINT))
        assert isinstance(assistant, CallableRecipeAssistant)

    def test_claude_without_key_falls_back(self) -> None:
        """Test the claude provider without a key falls back to the mock."""
        with patch.dict(os.environ, {}, clear=True):
            assistant = create_assistant(AssistantConfig(provider="claude"))
        assert isinstance(assistant, MockRecipeAssistant)
