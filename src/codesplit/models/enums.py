"""
Enumerations for codesplit data models.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class FailureKind(str, Enum):
    """
    Classified outcome of a failed call attempt.

    The first three kinds are transient and may succeed on a later attempt;
    the last three are terminal for the logical call.
    """

    NETWORK = "network"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    CANCELLED = "cancelled"
    PROTOCOL = "protocol"

    @property
    def is_transient(self) -> bool:
        """True for kinds that a retry can plausibly fix."""
        return self in (FailureKind.NETWORK, FailureKind.RATE_LIMITED, FailureKind.SERVER_ERROR)


class RetryDecision(str, Enum):
    """Decision taken by the error classifier for one failed attempt."""

    RETRY = "retry"
    TERMINAL = "terminal"


class TransportMode(str, Enum):
    """Transport strategy used by a caller; fixed at construction."""

    DIRECT = "direct"  # vendor SDK with API key
    RELAYED = "relayed"  # JSON over HTTP to a local relay
