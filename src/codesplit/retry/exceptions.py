"""
Retry engine exceptions.

This module defines the exception raised when a logical call used every
attempt of its retry policy on transient failures.
"""

from typing import TYPE_CHECKING, Optional

from codesplit.llm.exceptions import LLMClientError

if TYPE_CHECKING:
    from codesplit.retry.metadata import CallMetadata


class RetryExhausted(LLMClientError):
    """
    Raised when all attempts of a logical call failed transiently.

    Attributes:
        last_error: Error built from the last observed failure
        attempts: Number of attempts made
        call_metadata: Call history, when available
    """

    def __init__(
        self,
        last_error: LLMClientError,
        attempts: int,
        call_metadata: Optional["CallMetadata"] = None,
    ) -> None:
        """
        Initialize RetryExhausted exception.

        Args:
            last_error: Error for the final failed attempt
            attempts: Attempts made
            call_metadata: Call history
        """
        self.last_error = last_error
        self.call_metadata = call_metadata

        super().__init__(
            f"failed after {attempts} attempts: {last_error.message}",
            details={**last_error.details, "attempts": attempts, "exhausted": True},
        )
