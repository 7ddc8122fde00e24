"""
Custom exceptions for the LLM call layer.

Transports and the resilient caller report failures as classified
CallResult values; these exceptions are raised only at the edge, when a
caller asks for the text of a failed call (CallResult.unwrap or
ResilientCaller.complete). Each class matches one FailureKind so callers
can still tell transient service trouble from a bad request.
"""

from codesplit.models.enums import FailureKind


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def attempts(self) -> int:
        return self.details.get("attempts", 1)


class LLMConnectionError(LLMClientError):
    """
    Raised when unable to reach the model service.

    Includes connect errors, read timeouts, DNS failures, etc.
    """
    pass


class LLMTimeoutError(LLMConnectionError):
    """
    Raised when the deadline of the logical call expired.

    Separate from generic connection errors: no further attempt is made
    once the deadline has passed, whatever the remaining retry budget.
    """
    pass


class LLMCancelledError(LLMTimeoutError):
    """Raised when the call was cancelled, by deadline or by the caller."""
    pass


class LLMRateLimitError(LLMClientError):
    """Raised when the service rate-limits the request (HTTP 429)."""
    pass


class LLMServerError(LLMClientError):
    """Raised when the service fails with a 5xx status."""
    pass


class LLMRequestError(LLMClientError):
    """
    Raised when the service rejects the request (4xx other than 429).

    Examples:
    - Invalid API key
    - Unknown model
    - Malformed request body
    """
    pass


class LLMProtocolError(LLMClientError):
    """
    Raised when a successful-looking response has an unexpected shape.

    Examples:
    - Body is not JSON
    - Empty content list
    - First content unit is not text
    - Populated error field in a 200 response
    """
    pass


_EXCEPTION_BY_KIND: dict[FailureKind, type[LLMClientError]] = {
    FailureKind.NETWORK: LLMConnectionError,
    FailureKind.RATE_LIMITED: LLMRateLimitError,
    FailureKind.SERVER_ERROR: LLMServerError,
    FailureKind.CLIENT_ERROR: LLMRequestError,
    FailureKind.CANCELLED: LLMCancelledError,
    FailureKind.PROTOCOL: LLMProtocolError,
}


def exception_for_kind(kind: FailureKind) -> type[LLMClientError]:
    """Return the exception class raised for a failure kind."""
    return _EXCEPTION_BY_KIND[kind]
