"""
HTTP client for the OpenAI chat-completion endpoint.
"""

import json
from typing import Any, Optional

import httpx
from loguru import logger

from shared.exceptions import ApiResponseError

UNKNOWN_ERROR_MESSAGE = (
    "Unable to retrieve error details, maybe the API changed and request handling "
    "needs to be updated."
)


class ChatCompletionClient:
    """Posts chat-completion requests and decodes the JSON content of the reply."""

    def __init__(
        self,
        api_key: str,
        api_url: str,
        timeout: float = 120.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def headers(self) -> dict[str, str]:
        """Get request headers with auth token."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(timeout=self.timeout)
            self._owns_client = True
        return self._client

    def close(self) -> None:
        """Close HTTP client if it was created here."""
        if self._owns_client and self._client and not self._client.is_closed:
            self._client.close()

    def complete(self, payload: dict) -> Any:
        """
        Send a chat-completion request.

        Args:
            payload: Request body (model, messages, response_format)

        Returns:
            The decoded JSON value of choices[0].message.content

        Raises:
            ApiResponseError: On transport failure, error status,
                empty content or content that is not JSON
        """
        logger.debug(f"POST {self.api_url} (model: {payload.get('model')})")

        try:
            response = self.client.post(self.api_url, headers=self.headers, json=payload)
        except httpx.HTTPError as e:
            raise ApiResponseError(f"Error during OpenAI API request: {e}") from e

        data = self._decode_body(response)

        if response.is_error:
            message = self._error_message(data)
            raise ApiResponseError(
                f"Error during OpenAI API request: {message}",
                status_code=response.status_code,
            )

        content = self._extract_content(data)
        if not content:
            raise ApiResponseError("Empty response from OpenAI API.", status_code=response.status_code)

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ApiResponseError(
                f"OpenAI API returned content that is not valid JSON: {e}",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _decode_body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _error_message(data: Any) -> str:
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return UNKNOWN_ERROR_MESSAGE

    @staticmethod
    def _extract_content(data: Any) -> Optional[str]:
        """Dig choices[0].message.content out of the response body."""
        if not isinstance(data, dict):
            return None

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            return None

        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None

        return content if isinstance(content, str) else None
