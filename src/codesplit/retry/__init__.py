"""
Resilient call layer: classification, backoff and the retry loop.

A logical call is executed as up to RetryPolicy.max_attempts attempts:

1. **Attempt 0**: immediately
2. **Transient failure** (network, rate limited, server error): wait
   base * 2^(n-1) and try again
3. **Terminal failure** (client error, protocol, cancelled, deadline): stop
4. **Budget used up**: return the last failure as "retries exhausted"

Main Components:
    - ResilientCaller: Attempt loop under one deadline
    - classify: Pure failure -> RetryDecision function
    - BackoffScheduler: Wait durations between attempts
    - CallMetadata: Immutable history of one logical call
    - RetryExhausted: Exception raised when every attempt failed transiently

Usage:
    >>> from codesplit.retry import ResilientCaller
    >>> caller = ResilientCaller.from_config(config)
    >>> result = await caller.call("Analyze this file...", max_tokens=500)
"""

from codesplit.retry.classifier import classify, is_retryable, kind_for_status
from codesplit.retry.backoff import BackoffScheduler
from codesplit.retry.exceptions import RetryExhausted
from codesplit.retry.metadata import CallMetadata
from codesplit.retry.engine import ResilientCaller

__all__ = [
    "ResilientCaller",
    "RetryExhausted",
    "CallMetadata",
    "BackoffScheduler",
    "classify",
    "is_retryable",
    "kind_for_status",
]
