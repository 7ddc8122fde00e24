"""Monitoring and metrics instrumentation for codesplit.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from codesplit.monitoring.metrics import (
    capture_failures_total,
    llm_attempts_total,
    llm_failures_total,
    llm_latency_seconds,
    retries_exhausted_total,
    retries_total,
)

__all__ = [
    "llm_attempts_total",
    "llm_failures_total",
    "llm_latency_seconds",
    "retries_total",
    "retries_exhausted_total",
    "capture_failures_total",
]
