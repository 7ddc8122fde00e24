"""
Failure classification for the retry loop.

Pure functions only: mapping an HTTP status to a FailureKind, and deciding
whether a classified failure is worth another attempt.
"""

from codesplit.models.enums import FailureKind, RetryDecision
from codesplit.models.llm_models import Failure


def kind_for_status(status_code: int) -> FailureKind:
    """
    Classify a non-success HTTP status.

    429 -> RATE_LIMITED, 5xx -> SERVER_ERROR, anything else -> CLIENT_ERROR.
    """
    if status_code == 429:
        return FailureKind.RATE_LIMITED
    if status_code >= 500:
        return FailureKind.SERVER_ERROR
    return FailureKind.CLIENT_ERROR


def classify(failure: Failure, deadline_exceeded: bool = False) -> RetryDecision:
    """
    Decide whether a failed attempt may be retried.

    Args:
        failure: Classified failure of the last attempt
        deadline_exceeded: True when the overall deadline has already passed

    Returns:
        RetryDecision.RETRY for network, rate-limit and server failures while
        the deadline holds; RetryDecision.TERMINAL otherwise.

    Protocol failures are terminal: the service answers identical requests
    with the same malformed shape.
    """
    if deadline_exceeded:
        return RetryDecision.TERMINAL
    if failure.kind.is_transient:
        return RetryDecision.RETRY
    return RetryDecision.TERMINAL


def is_retryable(failure: Failure, deadline_exceeded: bool = False) -> bool:
    return classify(failure, deadline_exceeded) is RetryDecision.RETRY
