"""Custom Prometheus metrics for codesplit.

Registered on the default prometheus_client registry; a long-running host
process can expose them with prometheus_client.start_http_server.
Useful alerts:
- retries_exhausted_total (model service persistently failing)
- llm_failures_total with kind=client_error (bad key or model id)
- capture_failures_total (capture directory unwritable)
"""

from prometheus_client import Counter, Histogram

# === Attempt Metrics ===

llm_attempts_total = Counter(
    "llm_attempts_total",
    "Total call attempts by transport and outcome",
    ["transport", "outcome"],
)
"""
Attempt counter.

Labels:
- transport: direct (vendor SDK), relayed (local relay)
- outcome: success, failure
"""

llm_failures_total = Counter(
    "llm_failures_total",
    "Total failed attempts by transport and failure kind",
    ["transport", "kind"],
)
"""
Failed attempt counter.

Labels:
- transport: direct, relayed
- kind: network, rate_limited, server_error, client_error, cancelled, protocol
"""

llm_latency_seconds = Histogram(
    "llm_latency_seconds",
    "Latency of a single call attempt in seconds",
    ["transport", "success"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)
"""
Attempt latency histogram.

Labels:
- transport: direct, relayed
- success: true, false

Buckets sized for generation of whole source files (0.5s to 120s).
"""

# === Retry Metrics ===

retries_total = Counter(
    "retries_total",
    "Total retries scheduled by the failure kind that caused them",
    ["kind"],
)
"""
Retry counter.

Labels:
- kind: network, rate_limited, server_error
"""

retries_exhausted_total = Counter(
    "retries_exhausted_total",
    "Logical calls that used every attempt without success",
    ["transport"],
)

# === Capture Metrics ===

capture_failures_total = Counter(
    "capture_failures_total",
    "Exchange captures that could not be written",
)
