"""
Data models for codesplit.

Includes:
- Enums (FailureKind, RetryDecision, TransportMode)
- LLM models (Prompt, RetryPolicy, ClientConfig, relay wire format)
- Call outcomes (Failure, CallResult)
- Extraction results and captured exchanges (SplitPair, FilenamePlan, ExchangeRecord)
"""

from codesplit.models.enums import FailureKind, RetryDecision, TransportMode
from codesplit.models.llm_models import (
    CallResult,
    ClientConfig,
    ContentBlock,
    Failure,
    Prompt,
    RelayError,
    RelayMessage,
    RelayRequest,
    RelayResponse,
    RetryPolicy,
)
from codesplit.models.split_models import ExchangeRecord, FilenamePlan, SplitPair

__all__ = [
    # Enums
    "FailureKind",
    "RetryDecision",
    "TransportMode",
    # LLM models
    "Prompt",
    "RetryPolicy",
    "ClientConfig",
    "RelayMessage",
    "RelayRequest",
    "RelayResponse",
    "ContentBlock",
    "RelayError",
    # Call outcomes
    "Failure",
    "CallResult",
    # Extraction and capture
    "FilenamePlan",
    "SplitPair",
    "ExchangeRecord",
]
