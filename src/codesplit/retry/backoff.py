"""
Backoff schedule for retries.

Wait before retry ``n`` (1-indexed) is ``base_delay * multiplier ** (n - 1)``:
with the default policy 1s, 2s, 4s.
"""

from collections.abc import Iterator

from codesplit.models.llm_models import RetryPolicy


class BackoffScheduler:
    """Computes wait durations for successive retry attempts."""

    def __init__(self, policy: RetryPolicy):
        self.policy = policy

    def delay_for(self, attempt: int) -> float:
        """
        Wait before the given attempt.

        Args:
            attempt: 0-indexed attempt number; attempt 0 runs immediately

        Returns:
            Delay in seconds
        """
        if attempt < 0:
            raise ValueError("attempt must be >= 0")
        if attempt == 0:
            return 0.0
        return self.policy.base_delay * self.policy.multiplier ** (attempt - 1)

    def delays(self) -> Iterator[float]:
        """Yield the waits before each retry allowed by the policy."""
        for attempt in range(1, self.policy.max_attempts):
            yield self.delay_for(attempt)

    def total_delay(self) -> float:
        """Sum of all retry waits, the minimum time a fully exhausted call takes."""
        return sum(self.delays())
