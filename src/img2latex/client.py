"""HTTP client for the Anthropic Messages API."""

import time
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from .config import ConverterConfig
from .constants import (
    MSG_CONVERSION_FAILED,
    MSG_FORBIDDEN,
    MSG_INVALID_API_KEY,
    MSG_INVALID_RESPONSE,
    MSG_NETWORK_ERROR,
    MSG_RATE_LIMITED,
)
from .exceptions import (
    APIError,
    APIRequestError,
    CredentialError,
    ProtocolError,
    RateLimitError,
    TransportError,
)
from .logging import get_logger
from .models import ConversionRequest, ErrorResponse, MessagesResponse
from .utils.retry_manager import RetryManager, create_retry_manager


class AnthropicVisionClient:
    """Sends one multimodal conversion request and parses the reply.

    Every failure is raised as an :class:`~img2latex.exceptions.APIError`
    subclass whose ``message`` is ready to show to the user.
    """

    def __init__(
        self,
        config: ConverterConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_manager: Optional[RetryManager] = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Effective configuration; must carry an API key
            transport: Optional httpx transport (tests use ``httpx.MockTransport``)
            retry_manager: Retry policy, defaults to ``config.max_retries``
        """
        if not config.has_credential:
            raise CredentialError(MSG_INVALID_API_KEY, "No API key configured")

        self.config = config
        self.logger = get_logger(__name__)
        self.retry_manager = retry_manager or create_retry_manager(config.max_retries)
        self._http = httpx.AsyncClient(timeout=config.timeout, transport=transport)

    async def __aenter__(self) -> "AnthropicVisionClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "content-type": "application/json",
            "x-api-key": self.config.api_key or "",
            "anthropic-version": self.config.api_version,
        }

    async def convert(self, request: ConversionRequest) -> str:
        """Convert an image to LaTeX.

        Args:
            request: Prepared conversion request

        Returns:
            The generated LaTeX, stripped of surrounding whitespace

        Raises:
            APIError: On any HTTP, transport or response-format failure
        """
        payload = request.to_payload(self.config.model, self.config.max_tokens)
        return await self.retry_manager.execute_with_retry_async(self._send_once, payload)

    async def _send_once(self, payload: Dict[str, Any]) -> str:
        start_time = time.time()
        self.logger.info(
            "Sending conversion request",
            model=self.config.model,
            api_key=self.config.api_key,
        )

        try:
            response = await self._http.post(
                self.config.api_url, json=payload, headers=self.headers
            )
        except httpx.TransportError as e:
            self.logger.error("Conversion request failed to reach API", error=str(e))
            raise TransportError(MSG_NETWORK_ERROR, str(e))

        duration = round(time.time() - start_time, 3)
        self.logger.info(
            "Received API response",
            status_code=response.status_code,
            duration_seconds=duration,
        )

        if not response.is_success:
            raise self._error_for_response(response)

        return self._extract_text(response)

    def _error_for_response(self, response: httpx.Response) -> APIError:
        """Map a non-success response to the matching exception."""
        status = response.status_code
        try:
            error_body = ErrorResponse.model_validate(response.json())
        except ValueError:
            error_body = ErrorResponse()

        detail = "Unknown error"
        if error_body.error and error_body.error.message:
            detail = error_body.error.message

        self.logger.error("API request failed", status_code=status, detail=detail)

        if status == 401:
            return CredentialError(MSG_INVALID_API_KEY, detail, status_code=status)
        if status == 403:
            return CredentialError(MSG_FORBIDDEN, detail, status_code=status)
        if status == 429:
            return RateLimitError(
                MSG_RATE_LIMITED,
                detail,
                retry_after=_parse_retry_after(response.headers.get("retry-after")),
            )
        return APIRequestError(
            f"{MSG_CONVERSION_FAILED}: API request failed: {status} - {detail}",
            status_code=status,
        )

    def _extract_text(self, response: httpx.Response) -> str:
        """Return the text of the first content block."""
        try:
            body = MessagesResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            self.logger.error("Response body could not be parsed", error=str(e))
            raise ProtocolError(f"{MSG_CONVERSION_FAILED}: {MSG_INVALID_RESPONSE}", str(e))

        if not body.content or not body.content[0].text:
            self.logger.error("Response carried no text content")
            raise ProtocolError(f"{MSG_CONVERSION_FAILED}: {MSG_INVALID_RESPONSE}")

        return body.content[0].text.strip()


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        # Retry-After might be an HTTP date instead of seconds
        return None
