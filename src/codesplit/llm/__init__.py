"""
Transport strategies and prompt construction.

Components:
- BaseTransport: Abstract base class for one-attempt transports
- RelayTransport: JSON over HTTP to a local messages relay
- AnthropicTransport: Direct calls through the anthropic SDK
- create_transport: Strategy selection from ClientConfig
- PromptBuilder: Renders planning and generation prompts
- exceptions: LLM-specific exceptions
"""

from codesplit.llm.base_client import BaseTransport
from codesplit.llm.relay_client import RelayTransport
from codesplit.llm.anthropic_client import AnthropicTransport
from codesplit.llm.factory import create_transport
from codesplit.llm.prompt_builder import PromptBuilder
from codesplit.llm.exceptions import (
    LLMCancelledError,
    LLMClientError,
    LLMConnectionError,
    LLMProtocolError,
    LLMRateLimitError,
    LLMRequestError,
    LLMServerError,
    LLMTimeoutError,
)

__all__ = [
    "BaseTransport",
    "RelayTransport",
    "AnthropicTransport",
    "create_transport",
    "PromptBuilder",
    "LLMClientError",
    "LLMConnectionError",
    "LLMTimeoutError",
    "LLMCancelledError",
    "LLMRateLimitError",
    "LLMServerError",
    "LLMRequestError",
    "LLMProtocolError",
]
