"""Unit test fixtures (mocks and fakes for isolated testing).

Provides fake transports and canned relay responses so that unit tests
never touch the network.
"""

import json
from collections.abc import Callable, Iterable
from typing import Optional

import httpx
import pytest

from codesplit.llm.base_client import BaseTransport
from codesplit.models.enums import TransportMode
from codesplit.models.llm_models import CallResult, Prompt


class ScriptedTransport(BaseTransport):
    """Transport returning pre-programmed results, one per attempt.

    Entries are CallResult values, or coroutine functions returning one
    (for slow attempts). The last entry repeats once the script runs out.
    """

    mode = TransportMode.RELAYED

    def __init__(self, script: Iterable, model: str = "claude-test"):
        super().__init__(model=model, timeout=5.0)
        self.script = list(script)
        self.prompts: list[Prompt] = []
        self.closed = False

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def _attempt(self, prompt: Prompt) -> CallResult:
        self.prompts.append(prompt)
        index = min(len(self.prompts), len(self.script)) - 1
        step = self.script[index]
        if callable(step):
            return await step()
        return step

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def scripted_transport() -> Callable[..., ScriptedTransport]:
    """Factory fixture building a ScriptedTransport.

    Usage:
        def test_something(scripted_transport):
            transport = scripted_transport([failure, CallResult.success("ok")])
    """
    return ScriptedTransport


@pytest.fixture
def relay_handler():
    """Factory fixture building an httpx.MockTransport from canned responses.

    Each response is (status_code, body). Bodies that are dicts or lists are
    sent as JSON, strings and bytes as-is. Requests are appended to the
    returned list for inspection.

    Usage:
        transport, requests = relay_handler([(200, {"content": [{"type": "text", "text": "X"}]})])
    """

    def _build(
        responses: list[tuple[int, object]],
        error: Optional[Exception] = None,
    ) -> tuple[httpx.MockTransport, list[httpx.Request]]:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if error is not None:
                raise error
            status, body = responses[min(len(requests), len(responses)) - 1]
            if isinstance(body, (dict, list)):
                return httpx.Response(status, content=json.dumps(body).encode())
            if isinstance(body, str):
                body = body.encode()
            return httpx.Response(status, content=body)

        return httpx.MockTransport(handler), requests

    return _build
