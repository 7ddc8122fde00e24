"""
Abstract base transport for model calls.

Defines the interface shared by the relayed (HTTP) and direct (vendor SDK)
strategies. The resilient caller only talks to this interface, so it does
not know which strategy it drives.
"""

import time
from abc import ABC, abstractmethod

import structlog

from codesplit.models.enums import FailureKind, TransportMode
from codesplit.models.llm_models import CallResult, Prompt
from codesplit.monitoring.metrics import llm_attempts_total, llm_failures_total, llm_latency_seconds


logger = structlog.get_logger(__name__)


class BaseTransport(ABC):
    """
    Abstract base class for transport strategies.

    Responsibilities:
    - Perform exactly one attempt against the model service
    - Classify any failure into a FailureKind
    - Validate the shape of a successful response

    Does NOT handle:
    - Retries, backoff or the overall deadline (that's ResilientCaller's job)
    - Capturing exchanges (that's ExchangeRecorder's job)
    - Interpreting the returned text (that's the extraction layer's job)

    Implementations hold one long-lived client (connection pool) that is
    shared read-only across attempts and logical calls.
    """

    mode: TransportMode

    def __init__(self, model: str, timeout: float = 120.0):
        """
        Initialize base transport.

        Args:
            model: Model identifier sent with every request
            timeout: Per-request timeout in seconds
        """
        self.model = model
        self.timeout = timeout

        logger.info(
            "Initialized transport",
            transport=self.__class__.__name__,
            mode=self.mode.value,
            model=self.model,
            timeout=timeout,
        )

    async def attempt(self, prompt: Prompt) -> CallResult:
        """
        Perform one attempt and record attempt metrics.

        Args:
            prompt: Prompt text and output budget

        Returns:
            CallResult with the response text or a classified failure.
            Never raises for service or network failures.
        """
        start_time = time.monotonic()
        result = await self._attempt(prompt)
        elapsed = time.monotonic() - start_time

        llm_latency_seconds.labels(
            transport=self.mode.value, success=str(result.ok).lower()
        ).observe(elapsed)
        llm_attempts_total.labels(
            transport=self.mode.value, outcome="success" if result.ok else "failure"
        ).inc()
        if result.failure is not None:
            llm_failures_total.labels(
                transport=self.mode.value, kind=result.failure.kind.value
            ).inc()
            logger.warning(
                "Attempt failed",
                transport=self.mode.value,
                kind=result.failure.kind.value,
                status_code=result.failure.status_code,
                error=result.failure.message,
                latency_ms=int(elapsed * 1000),
            )
        else:
            logger.debug(
                "Attempt succeeded",
                transport=self.mode.value,
                response_length=len(result.text or ""),
                latency_ms=int(elapsed * 1000),
            )
        return result

    @abstractmethod
    async def _attempt(self, prompt: Prompt) -> CallResult:
        """
        Send one request and classify the outcome.

        Implementations should:

        1. Format the request according to the service's API
        2. Send it once (no internal retries)
        3. Return CallResult.success with the first text content unit
        4. Return CallResult.fail with the matching FailureKind otherwise
        """
        pass

    async def close(self) -> None:
        """
        Close client connections and cleanup resources.

        Default implementation does nothing. Subclasses should override if
        they hold persistent connections.
        """
        logger.debug("Closing transport", transport=self.__class__.__name__)

    @staticmethod
    def protocol_failure(message: str, cause: BaseException | None = None) -> CallResult:
        return CallResult.fail(FailureKind.PROTOCOL, message, cause=cause)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"model={self.model}, "
            f"timeout={self.timeout}s)"
        )
