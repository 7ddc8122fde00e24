"""
Resilient caller: retries with exponential backoff under one deadline.

This module implements ResilientCaller, the single entry point for sending
a prompt to the model service. It drives one transport strategy through an
explicit attempt loop:

    attempt 0 -> immediately
    failure   -> classify: terminal? return it
              -> transient: wait base * 2^(n-1), then attempt n
    budget    -> used up: return the last failure as "retries exhausted"

One deadline, derived from the configured timeout, bounds the whole logical
call (requests in flight and backoff waits alike). Crossing it ends the
call with a CANCELLED failure.

Usage:
    caller = ResilientCaller.from_config(settings.client_config())
    result = await caller.call(prompt_text, max_tokens=500)
    text = result.unwrap()
"""

import asyncio
from typing import Optional

import structlog

from codesplit.llm.base_client import BaseTransport
from codesplit.models.enums import FailureKind, RetryDecision, TransportMode
from codesplit.models.llm_models import CallResult, ClientConfig, Failure, Prompt, RetryPolicy
from codesplit.monitoring.metrics import llm_failures_total, retries_exhausted_total, retries_total
from codesplit.persistence.exchange_recorder import ExchangeRecorder
from codesplit.retry.backoff import BackoffScheduler
from codesplit.retry.classifier import classify
from codesplit.retry.exceptions import RetryExhausted
from codesplit.retry.metadata import CallMetadata

logger = structlog.get_logger(__name__)


class ResilientCaller:
    """
    Executes logical calls over one transport strategy.

    The transport is chosen at construction and never changes. The caller
    keeps no per-call state between calls; its transport's connection pool
    is the only shared resource.

    Attributes:
        transport: Strategy performing single attempts
        policy: Retry constants (attempts, backoff unit, multiplier)
        timeout: Deadline of one logical call, in seconds
        recorder: Optional exchange recorder invoked on success
    """

    def __init__(
        self,
        transport: BaseTransport,
        policy: Optional[RetryPolicy] = None,
        timeout: float = 120.0,
        recorder: Optional[ExchangeRecorder] = None,
    ):
        """
        Initialize resilient caller.

        Args:
            transport: Transport strategy (relayed or direct)
            policy: Retry policy (default: 4 attempts, 1s unit, doubling)
            timeout: Overall deadline per logical call in seconds
            recorder: Exchange recorder, when capture is enabled
        """
        if timeout <= 0:
            raise ValueError("timeout must be > 0")

        self.transport = transport
        self.policy = policy or RetryPolicy()
        self.timeout = timeout
        self.recorder = recorder
        self.backoff = BackoffScheduler(self.policy)

        logger.info(
            "ResilientCaller initialized",
            transport=self.transport_mode.value,
            max_attempts=self.policy.max_attempts,
            backoff_base=self.policy.base_delay,
            backoff_multiplier=self.policy.multiplier,
            timeout=timeout,
            capture=str(recorder.directory) if recorder else None,
        )

    @classmethod
    def from_config(cls, config: ClientConfig) -> "ResilientCaller":
        """
        Build a caller, its transport and its recorder from configuration.

        Args:
            config: Immutable client configuration

        Returns:
            ResilientCaller over the transport selected by config.transport_mode
        """
        from codesplit.llm.factory import create_transport

        recorder = ExchangeRecorder(config.capture_dir) if config.capture_dir else None
        return cls(
            transport=create_transport(config),
            policy=config.retry,
            timeout=config.timeout,
            recorder=recorder,
        )

    @property
    def transport_mode(self) -> TransportMode:
        return self.transport.mode

    async def call(self, prompt: Prompt | str, max_tokens: Optional[int] = None) -> CallResult:
        """
        Execute one logical call.

        Args:
            prompt: Prompt, or prompt text together with max_tokens
            max_tokens: Output budget when prompt is plain text

        Returns:
            CallResult with the response text, or the terminal failure with
            the number of attempts made
        """
        result, _ = await self.execute(prompt, max_tokens)
        return result

    async def complete(self, prompt: Prompt | str, max_tokens: Optional[int] = None) -> str:
        """
        Execute one logical call and return its text.

        Raises:
            RetryExhausted: Every attempt failed transiently
            LLMClientError: Subclass matching a terminal failure
        """
        result, metadata = await self.execute(prompt, max_tokens)
        if result.failure is None:
            return result.text  # type: ignore[return-value]

        error = result.failure.to_exception(result.attempts)
        if result.exhausted:
            raise RetryExhausted(
                last_error=error, attempts=result.attempts, call_metadata=metadata
            ) from result.failure.cause
        raise error

    async def execute(
        self, prompt: Prompt | str, max_tokens: Optional[int] = None
    ) -> tuple[CallResult, CallMetadata]:
        """
        Execute one logical call and report its history.

        Returns:
            Tuple of (call result, call metadata)
        """
        prompt = self._as_prompt(prompt, max_tokens)
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        deadline = start_time + self.timeout
        failures: list[Failure] = []

        log = logger.bind(
            transport=self.transport_mode.value,
            prompt_length=len(prompt.text),
            max_tokens=prompt.max_tokens,
        )
        log.info("Starting logical call", max_attempts=self.policy.max_attempts)

        def finish(result: CallResult) -> tuple[CallResult, CallMetadata]:
            metadata = CallMetadata(
                transport=self.transport_mode,
                total_attempts=result.attempts,
                total_latency_ms=max(0, int((loop.time() - start_time) * 1000)),
                failures=list(failures),
                succeeded=result.ok,
            )
            return result, metadata

        for attempt in range(self.policy.max_attempts):
            if attempt > 0:
                delay = self.backoff.delay_for(attempt)
                remaining = deadline - loop.time()
                if delay >= remaining:
                    log.warning(
                        "Deadline expires during backoff, giving up",
                        attempt=attempt,
                        backoff_seconds=delay,
                        remaining_seconds=round(max(remaining, 0.0), 3),
                    )
                    await asyncio.sleep(max(remaining, 0.0))
                    return finish(
                        CallResult(
                            failure=Failure(
                                kind=FailureKind.CANCELLED,
                                message=(
                                    f"deadline of {self.timeout}s expired before attempt "
                                    f"{attempt + 1}; last error: {failures[-1].message}"
                                ),
                                cause=failures[-1].cause,
                            ),
                            attempts=attempt,
                        )
                    )

                retries_total.labels(kind=failures[-1].kind.value).inc()
                log.info(
                    f"Retrying after {delay}s backoff",
                    attempt=attempt + 1,
                    max_attempts=self.policy.max_attempts,
                    previous_error=failures[-1].kind.value,
                )
                await asyncio.sleep(delay)

            result = await self._attempt_before(prompt, deadline)
            attempts_made = attempt + 1

            if result.failure is None:
                log.info("Logical call succeeded", attempts=attempts_made)
                self._capture(prompt, result.text or "")
                return finish(CallResult.success(result.text or "", attempts=attempts_made))

            failure = result.failure
            failures.append(failure)
            deadline_exceeded = loop.time() >= deadline

            if classify(failure, deadline_exceeded) is RetryDecision.TERMINAL:
                if deadline_exceeded and failure.kind is not FailureKind.CANCELLED:
                    failure = Failure(
                        kind=FailureKind.CANCELLED,
                        message=f"deadline of {self.timeout}s expired: {failure.message}",
                        status_code=failure.status_code,
                        cause=failure.cause,
                    )
                log.error(
                    "Logical call failed with terminal error",
                    attempts=attempts_made,
                    kind=failure.kind.value,
                    status_code=failure.status_code,
                )
                return finish(CallResult(failure=failure, attempts=attempts_made))

        retries_exhausted_total.labels(transport=self.transport_mode.value).inc()
        log.error(
            "All attempts exhausted",
            attempts=self.policy.max_attempts,
            failure_kinds=[f.kind.value for f in failures],
        )
        return finish(
            CallResult(failure=failures[-1], attempts=self.policy.max_attempts, exhausted=True)
        )

    async def _attempt_before(self, prompt: Prompt, deadline: float) -> CallResult:
        """Run one transport attempt, cut off at the deadline."""
        remaining = deadline - asyncio.get_running_loop().time()
        if remaining > 0:
            try:
                return await asyncio.wait_for(self.transport.attempt(prompt), timeout=remaining)
            except asyncio.TimeoutError:
                pass

        llm_failures_total.labels(
            transport=self.transport_mode.value, kind=FailureKind.CANCELLED.value
        ).inc()
        return CallResult.fail(
            FailureKind.CANCELLED,
            f"deadline of {self.timeout}s expired while waiting for the response",
        )

    def _capture(self, prompt: Prompt, text: str) -> None:
        if self.recorder is not None:
            self.recorder.record(prompt.text, text)

    @staticmethod
    def _as_prompt(prompt: Prompt | str, max_tokens: Optional[int]) -> Prompt:
        if isinstance(prompt, Prompt):
            return prompt
        if max_tokens is None:
            raise ValueError("max_tokens is required with a plain-text prompt")
        return Prompt(text=prompt, max_tokens=max_tokens)

    async def close(self) -> None:
        """Close the transport's connections."""
        await self.transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"ResilientCaller(transport={self.transport_mode.value}, "
            f"max_attempts={self.policy.max_attempts}, timeout={self.timeout}s)"
        )
