"""
Direct transport: the vendor SDK against the Anthropic Messages API.

Uses anthropic.AsyncAnthropic with the SDK's own retries switched off, so
that every network round-trip is one attempt of ResilientCaller.
"""

from typing import Any, Optional

import anthropic
import structlog

from codesplit.llm.base_client import BaseTransport
from codesplit.models.enums import FailureKind, TransportMode
from codesplit.models.llm_models import CallResult, Prompt
from codesplit.retry.classifier import kind_for_status


logger = structlog.get_logger(__name__)


class AnthropicTransport(BaseTransport):
    """
    Direct transport through the official anthropic SDK.

    Error mapping:
    - APITimeoutError, APIConnectionError -> NETWORK
    - APIStatusError -> by status (429 rate limited, 5xx server, else client)
    - APIResponseValidationError, non-text content -> PROTOCOL
    """

    mode = TransportMode.DIRECT

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-5-20250929",
        timeout: float = 120.0,
        client: Optional[Any] = None,
    ):
        """
        Initialize direct transport.

        Args:
            api_key: Anthropic API key
            model: Model identifier; validated server-side
            timeout: Per-request timeout in seconds
            client: Pre-built AsyncAnthropic-compatible client (tests)
        """
        if not api_key and client is None:
            raise ValueError("direct mode requires an API key")
        super().__init__(model, timeout)
        self._client = client or anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout,
            max_retries=0,
        )

    async def _attempt(self, prompt: Prompt) -> CallResult:
        logger.debug(
            "Sending request to Anthropic API",
            model=self.model,
            prompt_length=len(prompt.text),
            max_tokens=prompt.max_tokens,
        )

        try:
            message = await self._client.messages.create(
                model=self.model,
                max_tokens=prompt.max_tokens,
                messages=[{"role": "user", "content": prompt.text}],
            )
        except anthropic.APIResponseValidationError as e:
            return self.protocol_failure(f"Unexpected response shape: {e}", cause=e)
        except anthropic.APIStatusError as e:
            return CallResult.fail(
                kind_for_status(e.status_code),
                f"API returned {e.status_code}: {e.message}",
                status_code=e.status_code,
                cause=e,
            )
        except anthropic.APIConnectionError as e:
            # APITimeoutError is a subclass
            return CallResult.fail(
                FailureKind.NETWORK,
                f"Network error: {type(e).__name__}: {e}",
                cause=e,
            )

        content = getattr(message, "content", None) or []
        if not content:
            return self.protocol_failure("Unexpected response format: no content blocks")

        first = content[0]
        if getattr(first, "type", None) != "text":
            return self.protocol_failure(
                f"Unexpected response format: not a text block (type={getattr(first, 'type', None)!r})"
            )
        return CallResult.success(first.text)

    async def close(self) -> None:
        """Close the SDK's HTTP client."""
        close = getattr(self._client, "close", None)
        if close is not None:
            await close()
            logger.debug("Closed Anthropic client connection")
