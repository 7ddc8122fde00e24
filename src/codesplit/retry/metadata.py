"""
Call metadata tracking.

This module defines the CallMetadata dataclass that captures the history of
one logical call for logging and debugging.
"""

from dataclasses import dataclass, field

from codesplit.models.enums import TransportMode
from codesplit.models.llm_models import Failure


@dataclass(frozen=True)
class CallMetadata:
    """
    History of one logical call.

    Attributes:
        transport: Transport mode the call went through
        total_attempts: Number of attempts made
        total_latency_ms: Time from first attempt to final result (ms)
        failures: Failures observed, in attempt order
        succeeded: Whether the call returned text
    """

    transport: TransportMode
    total_attempts: int
    total_latency_ms: int
    failures: list[Failure] = field(default_factory=list)
    succeeded: bool = False

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.total_attempts < 1:
            raise ValueError("total_attempts must be >= 1")

        if self.total_latency_ms < 0:
            raise ValueError("total_latency_ms must be >= 0")

        expected_failures = self.total_attempts - (1 if self.succeeded else 0)
        if len(self.failures) > expected_failures:
            raise ValueError(
                f"{len(self.failures)} failures recorded for {self.total_attempts} attempts"
            )

    @property
    def failure_kinds(self) -> list[str]:
        return [f.kind.value for f in self.failures]
