"""
Unit tests for ResilientCaller.

Tests the attempt loop: retry decisions, backoff waits, the overall
deadline, exchange capture and the raising edge (complete).
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from codesplit.llm.anthropic_client import AnthropicTransport
from codesplit.llm.exceptions import LLMProtocolError, LLMRequestError, LLMServerError
from codesplit.llm.relay_client import RelayTransport
from codesplit.models.enums import FailureKind, TransportMode
from codesplit.models.llm_models import CallResult, ClientConfig, Prompt, RetryPolicy
from codesplit.persistence.exchange_recorder import ExchangeRecorder
from codesplit.retry.engine import ResilientCaller
from codesplit.retry.exceptions import RetryExhausted


def server_error(status_code: int = 500) -> CallResult:
    return CallResult.fail(
        FailureKind.SERVER_ERROR,
        f"API returned {status_code}: upstream failure",
        status_code=status_code,
    )


def client_error(status_code: int = 400) -> CallResult:
    return CallResult.fail(
        FailureKind.CLIENT_ERROR,
        f"API returned {status_code}: invalid model",
        status_code=status_code,
    )


def network_error() -> CallResult:
    return CallResult.fail(FailureKind.NETWORK, "Network error: ConnectError: refused")


# ============================================================================
# Initialization
# ============================================================================


class TestInitialization:
    """Construction and configuration-driven wiring."""

    def test_defaults(self, scripted_transport):
        caller = ResilientCaller(scripted_transport([CallResult.success("ok")]))
        assert caller.policy == RetryPolicy()
        assert caller.timeout == 120.0
        assert caller.recorder is None
        assert caller.transport_mode is TransportMode.RELAYED

    def test_rejects_non_positive_timeout(self, scripted_transport):
        with pytest.raises(ValueError, match="timeout"):
            ResilientCaller(scripted_transport([]), timeout=0)

    def test_from_config_relayed(self, client_config):
        caller = ResilientCaller.from_config(client_config)
        assert isinstance(caller.transport, RelayTransport)
        assert caller.transport.endpoint == client_config.endpoint
        assert caller.policy == client_config.retry
        assert caller.timeout == client_config.timeout
        assert caller.recorder is None

    def test_from_config_direct_with_api_key(self, client_config):
        config = client_config.model_copy(update={"api_key": "sk-test"})
        caller = ResilientCaller.from_config(config)
        assert isinstance(caller.transport, AnthropicTransport)
        assert caller.transport_mode is TransportMode.DIRECT

    def test_from_config_builds_recorder(self, client_config, capture_dir):
        config = client_config.model_copy(update={"capture_dir": capture_dir})
        caller = ResilientCaller.from_config(config)
        assert isinstance(caller.recorder, ExchangeRecorder)
        assert caller.recorder.directory == capture_dir


# ============================================================================
# Retry behaviour
# ============================================================================


class TestRetryLoop:
    """Attempt counting and retry decisions."""

    @pytest.mark.asyncio
    async def test_success_on_first_attempt(self, scripted_transport, fast_policy, sample_prompt):
        transport = scripted_transport([CallResult.success("X")])
        caller = ResilientCaller(transport, policy=fast_policy)

        result = await caller.call(sample_prompt)

        assert result.ok
        assert result.text == "X"
        assert result.attempts == 1
        assert transport.calls == 1
        assert transport.prompts[0] == sample_prompt

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [500, 503])
    async def test_server_errors_use_every_attempt(
        self, scripted_transport, fast_policy, sample_prompt, status_code
    ):
        transport = scripted_transport([server_error(status_code)])
        caller = ResilientCaller(transport, policy=fast_policy)

        result = await caller.call(sample_prompt)

        assert not result.ok
        assert result.exhausted is True
        assert result.attempts == fast_policy.max_attempts
        assert transport.calls == fast_policy.max_attempts
        assert result.failure.kind is FailureKind.SERVER_ERROR
        assert result.failure.status_code == status_code

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self, scripted_transport, fast_policy, sample_prompt):
        transport = scripted_transport([client_error(400)])
        caller = ResilientCaller(transport, policy=fast_policy)

        result = await caller.call(sample_prompt)

        assert transport.calls == 1
        assert result.attempts == 1
        assert result.exhausted is False
        assert result.failure.kind is FailureKind.CLIENT_ERROR

    @pytest.mark.asyncio
    async def test_protocol_error_is_not_retried(self, scripted_transport, fast_policy, sample_prompt):
        transport = scripted_transport(
            [CallResult.fail(FailureKind.PROTOCOL, "Empty response from API: no content blocks")]
        )
        caller = ResilientCaller(transport, policy=fast_policy)

        result = await caller.call(sample_prompt)

        assert transport.calls == 1
        assert result.failure.kind is FailureKind.PROTOCOL

    @pytest.mark.asyncio
    async def test_transient_failures_then_success(
        self, scripted_transport, fast_policy, sample_prompt
    ):
        transport = scripted_transport(
            [
                server_error(503),
                network_error(),
                CallResult.fail(FailureKind.RATE_LIMITED, "API returned 429: slow down", 429),
                CallResult.success("finally"),
            ]
        )
        caller = ResilientCaller(transport, policy=fast_policy)

        result = await caller.call(sample_prompt)

        assert result.text == "finally"
        assert result.attempts == 4
        assert transport.calls == 4

    @pytest.mark.asyncio
    async def test_single_attempt_policy(self, scripted_transport, sample_prompt):
        transport = scripted_transport([server_error()])
        caller = ResilientCaller(transport, policy=RetryPolicy(max_attempts=1))

        result = await caller.call(sample_prompt)

        assert transport.calls == 1
        assert result.attempts == 1
        assert result.exhausted is True

    @pytest.mark.asyncio
    async def test_plain_text_prompt(self, scripted_transport, fast_policy):
        transport = scripted_transport([CallResult.success("ok")])
        caller = ResilientCaller(transport, policy=fast_policy)

        await caller.call("Analyze this file", max_tokens=500)

        assert transport.prompts[0] == Prompt(text="Analyze this file", max_tokens=500)

    @pytest.mark.asyncio
    async def test_plain_text_prompt_requires_max_tokens(self, scripted_transport):
        caller = ResilientCaller(scripted_transport([CallResult.success("ok")]))
        with pytest.raises(ValueError, match="max_tokens"):
            await caller.call("Analyze this file")


# ============================================================================
# Backoff and deadline
# ============================================================================


class TestBackoffAndDeadline:
    """Waits between attempts and the single per-call deadline."""

    @pytest.mark.asyncio
    async def test_backoff_doubles_between_attempts(self, scripted_transport, sample_prompt):
        transport = scripted_transport([server_error()])
        caller = ResilientCaller(transport, policy=RetryPolicy(), timeout=120.0)

        with patch("codesplit.retry.engine.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            result = await caller.call(sample_prompt)

        assert result.exhausted
        assert [c.args[0] for c in mock_sleep.await_args_list] == [1.0, 2.0, 4.0]

    @pytest.mark.asyncio
    async def test_no_wait_before_first_attempt(self, scripted_transport, sample_prompt):
        transport = scripted_transport([CallResult.success("ok")])
        caller = ResilientCaller(transport)

        with patch("codesplit.retry.engine.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            await caller.call(sample_prompt)

        mock_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deadline_shorter_than_backoff_cancels(self, scripted_transport, sample_prompt):
        transport = scripted_transport([server_error()])
        caller = ResilientCaller(
            transport, policy=RetryPolicy(base_delay=1.0), timeout=0.05
        )

        result = await caller.call(sample_prompt)

        assert transport.calls == 1
        assert result.attempts == 1
        assert result.exhausted is False
        assert result.failure.kind is FailureKind.CANCELLED
        assert "deadline" in result.failure.message
        assert "upstream failure" in result.failure.message

    @pytest.mark.asyncio
    async def test_deadline_during_request_cancels(self, scripted_transport, fast_policy, sample_prompt):
        async def hang() -> CallResult:
            await asyncio.sleep(10)
            return CallResult.success("too late")

        transport = scripted_transport([hang])
        caller = ResilientCaller(transport, policy=fast_policy, timeout=0.05)

        result = await caller.call(sample_prompt)

        assert transport.calls == 1
        assert result.attempts == 1
        assert result.failure.kind is FailureKind.CANCELLED


# ============================================================================
# Metadata, capture and the raising edge
# ============================================================================


class TestExecuteAndComplete:
    """Call history and exceptions raised by complete()."""

    @pytest.mark.asyncio
    async def test_execute_reports_history(self, scripted_transport, fast_policy, sample_prompt):
        transport = scripted_transport([server_error(), network_error(), CallResult.success("ok")])
        caller = ResilientCaller(transport, policy=fast_policy)

        result, metadata = await caller.execute(sample_prompt)

        assert result.text == "ok"
        assert metadata.succeeded is True
        assert metadata.total_attempts == 3
        assert metadata.failure_kinds == ["server_error", "network"]
        assert metadata.transport is TransportMode.RELAYED
        assert metadata.total_latency_ms >= 0

    @pytest.mark.asyncio
    async def test_complete_returns_text(self, scripted_transport, fast_policy, sample_prompt):
        caller = ResilientCaller(scripted_transport([CallResult.success("X")]), policy=fast_policy)
        assert await caller.complete(sample_prompt) == "X"

    @pytest.mark.asyncio
    async def test_complete_raises_retry_exhausted(self, scripted_transport, fast_policy, sample_prompt):
        caller = ResilientCaller(scripted_transport([server_error(503)]), policy=fast_policy)

        with pytest.raises(RetryExhausted) as exc_info:
            await caller.complete(sample_prompt)

        error = exc_info.value
        assert error.attempts == 4
        assert error.details["exhausted"] is True
        assert error.details["status_code"] == 503
        assert isinstance(error.last_error, LLMServerError)
        assert error.call_metadata.total_attempts == 4
        assert "failed after 4 attempts" in str(error)

    @pytest.mark.asyncio
    async def test_complete_raises_terminal_error(self, scripted_transport, fast_policy, sample_prompt):
        caller = ResilientCaller(scripted_transport([client_error(401)]), policy=fast_policy)

        with pytest.raises(LLMRequestError) as exc_info:
            await caller.complete(sample_prompt)

        assert exc_info.value.details["kind"] == "client_error"
        assert exc_info.value.details["status_code"] == 401
        assert exc_info.value.attempts == 1

    @pytest.mark.asyncio
    async def test_complete_raises_protocol_error(self, scripted_transport, sample_prompt):
        transport = scripted_transport([CallResult.fail(FailureKind.PROTOCOL, "API error: overloaded")])
        caller = ResilientCaller(transport)

        with pytest.raises(LLMProtocolError, match="overloaded"):
            await caller.complete(sample_prompt)

    @pytest.mark.asyncio
    async def test_success_is_captured(self, scripted_transport, fast_policy, sample_prompt, capture_dir):
        caller = ResilientCaller(
            scripted_transport([CallResult.success('["a.go"]')]),
            policy=fast_policy,
            recorder=ExchangeRecorder(capture_dir),
        )

        await caller.call(sample_prompt)

        records = list(caller.recorder.iter_records())
        assert len(records) == 1
        assert records[0].prompt == sample_prompt.text
        assert records[0].response == '["a.go"]'

    @pytest.mark.asyncio
    async def test_failure_is_not_captured(self, scripted_transport, sample_prompt, capture_dir):
        caller = ResilientCaller(
            scripted_transport([client_error()]),
            recorder=ExchangeRecorder(capture_dir),
        )

        await caller.call(sample_prompt)

        assert not capture_dir.exists()

    @pytest.mark.asyncio
    async def test_async_context_manager_closes_transport(self, scripted_transport):
        transport = scripted_transport([CallResult.success("ok")])
        async with ResilientCaller(transport) as caller:
            assert caller.transport is transport
        assert transport.closed is True
