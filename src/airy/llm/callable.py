"""Recipe assistant backed by an HTTPS callable function.

The backend ("processVoiceCommand") speaks the callable-function wire
format: the request body is {"data": <payload>} and a successful reply is
{"result": <AssistantResponse payload>}. Failures the function raises come
back as {"error": {"message": ..., "status": ...}} with a non-2xx status.
"""

import logging
import os
import time

import httpx

from .errors import (
    AssistantAPIError,
    AssistantAuthError,
    AssistantError,
    AssistantResponseError,
    AssistantTimeoutError,
)
from .model import AssistantRequest, AssistantResponse

logger = logging.getLogger(__name__)

ENDPOINT_ENV = "AIRY_ASSISTANT_ENDPOINT"
TOKEN_ENV = "AIRY_ASSISTANT_TOKEN"
DEFAULT_TIMEOUT = 30.0  # seconds


class CallableRecipeAssistant:
    """Client for the processVoiceCommand callable function."""

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        id_token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            endpoint: Function URL. Falls back to AIRY_ASSISTANT_ENDPOINT.
            timeout: Request timeout in seconds.
            id_token: Optional bearer token. Falls back to AIRY_ASSISTANT_TOKEN.
            transport: Optional httpx transport (used by tests).
        """
        self._endpoint = endpoint or os.environ.get(ENDPOINT_ENV, "")
        self._timeout = timeout
        self._id_token = id_token or os.environ.get(TOKEN_ENV) or None
        self._transport = transport

        if self._endpoint:
            logger.info(f"Recipe assistant endpoint: {self._endpoint}")
        else:
            logger.warning(f"{ENDPOINT_ENV} not set - recipe assistant unavailable")

    @property
    def is_available(self) -> bool:
        """True if an endpoint is configured."""
        return bool(self._endpoint)

    def query(self, request: AssistantRequest) -> AssistantResponse:
        """Send a question to the callable function.

        Args:
            request: Question and recipe context

        Returns:
            The function's result

        Raises:
            AssistantError: If no endpoint is configured
            AssistantTimeoutError: If the request times out
            AssistantAuthError: If the function rejects our credentials
            AssistantAPIError: For other error statuses or transport failures
            AssistantResponseError: If the reply is not a callable result
        """
        if not self._endpoint:
            raise AssistantError("Recipe assistant endpoint not configured")

        headers = {"Content-Type": "application/json"}
        if self._id_token:
            headers["Authorization"] = f"Bearer {self._id_token}"

        start_time = time.time()
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(
                    self._endpoint,
                    headers=headers,
                    json={"data": request.to_payload()},
                )
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise AssistantTimeoutError(
                f"Request timed out after {self._timeout} seconds."
            ) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = _error_message(e.response)
            if status in (401, 403):
                raise AssistantAuthError(f"Assistant rejected credentials: {message}") from e
            raise AssistantAPIError(f"API error: {message}", status_code=status) from e
        except httpx.HTTPError as e:
            raise AssistantAPIError(f"Failed to reach assistant: {e}") from e

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Assistant replied in {elapsed_ms}ms")

        try:
            body = response.json()
        except ValueError as e:
            raise AssistantResponseError("Assistant reply is not JSON") from e

        result = body.get("result") if isinstance(body, dict) else None
        if not isinstance(result, dict):
            raise AssistantResponseError("Assistant reply has no result object")

        return AssistantResponse.from_payload(result)


def _error_message(response: httpx.Response) -> str:
    try:
        error = response.json().get("error", {})
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    except (ValueError, AttributeError):
        pass
    return f"HTTP {response.status_code}"


__all__ = ["CallableRecipeAssistant", "ENDPOINT_ENV", "TOKEN_ENV"]
