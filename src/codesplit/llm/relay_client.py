"""
Relayed transport: JSON over HTTP to a local messages relay.

Communicates with a relay that speaks the Messages API request/response
shape, using one persistent httpx AsyncClient. Supports:
- Single-attempt POST (retries belong to ResilientCaller)
- Failure classification from HTTP status and transport errors
- Response shape validation via pydantic
"""

import json
from typing import Optional

import httpx
import structlog
from pydantic import ValidationError

from codesplit.llm.base_client import BaseTransport
from codesplit.models.enums import FailureKind, TransportMode
from codesplit.models.llm_models import CallResult, Prompt, RelayRequest, RelayResponse
from codesplit.retry.classifier import kind_for_status


logger = structlog.get_logger(__name__)


class RelayTransport(BaseTransport):
    """
    Relay-specific transport using httpx for async HTTP communication.

    Request (POST <endpoint>, Content-Type: application/json):
    {
        "model": "claude-sonnet-4-5-20250929",
        "max_tokens": 500,
        "messages": [{"role": "user", "content": "..."}]
    }

    Response (200):
    {
        "content": [{"type": "text", "text": "..."}],
        "error": {"message": "..."}          # optional
    }
    """

    mode = TransportMode.RELAYED

    def __init__(
        self,
        endpoint: str = "http://localhost:8000/v1/messages",
        model: str = "claude-sonnet-4-5-20250929",
        timeout: float = 120.0,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize relay transport.

        Args:
            endpoint: Full URL of the relay messages endpoint
            model: Model identifier sent with every request
            timeout: Per-request timeout in seconds
            connection_limits: httpx connection pool limits (default: 10 max connections)
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        super().__init__(model, timeout)
        self.endpoint = endpoint

        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0
            )

        self._client: Optional[httpx.AsyncClient] = None
        self._connection_limits = connection_limits
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                transport=self._transport,
                follow_redirects=True,
            )
            logger.debug("Created new httpx AsyncClient", endpoint=self.endpoint)
        return self._client

    async def _attempt(self, prompt: Prompt) -> CallResult:
        payload = RelayRequest.from_prompt(self.model, prompt).model_dump()

        logger.debug(
            "Sending request to relay",
            endpoint=self.endpoint,
            model=self.model,
            prompt_length=len(prompt.text),
            max_tokens=prompt.max_tokens,
        )

        try:
            client = self._get_client()
            response = await client.post(
                self.endpoint,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException as e:
            return CallResult.fail(
                FailureKind.NETWORK,
                f"Request timeout after {self.timeout}s: {e}",
                cause=e,
            )
        except httpx.TransportError as e:
            return CallResult.fail(
                FailureKind.NETWORK,
                f"Network error: {type(e).__name__}: {e}",
                cause=e,
            )
        except (httpx.TooManyRedirects, httpx.DecodingError) as e:
            return self.protocol_failure(
                f"Unusable response: {type(e).__name__}: {e}", cause=e
            )
        except httpx.HTTPError as e:
            return CallResult.fail(
                FailureKind.NETWORK,
                f"HTTP error: {type(e).__name__}: {e}",
                cause=e,
            )

        if response.status_code != 200:
            return CallResult.fail(
                kind_for_status(response.status_code),
                f"API returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        return self._parse_body(response.content)

    def _parse_body(self, body: bytes) -> CallResult:
        """Validate a 200 body and take the first content unit's text."""
        try:
            parsed = RelayResponse.model_validate(json.loads(body))
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
            return self.protocol_failure(f"Invalid JSON response: {e}", cause=e)
        except ValidationError as e:
            return self.protocol_failure(
                f"Unexpected response shape: {e.error_count()} validation error(s)", cause=e
            )

        if parsed.error is not None:
            return self.protocol_failure(f"API error: {parsed.error.message}")
        if not parsed.content:
            return self.protocol_failure("Empty response from API: no content blocks")

        first = parsed.content[0]
        if first.type != "text":
            return self.protocol_failure(
                f"Unexpected response format: not a text block (type={first.type!r})"
            )
        return CallResult.success(first.text)

    async def close(self) -> None:
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed relay client connection")
