"""
LLM-specific data models for the request/response cycle.

Pydantic models cover values that are validated on construction (prompt,
retry policy, client configuration, relay wire format). Call outcomes are
frozen dataclasses because they carry the underlying exception object.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, ConfigDict, Field

from codesplit.models.enums import FailureKind, TransportMode

if TYPE_CHECKING:
    from codesplit.llm.exceptions import LLMClientError


class Prompt(BaseModel):
    """
    One prompt for one logical call.

    Immutable; built per call by the orchestration or by PromptBuilder.
    """
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Complete prompt text sent as a single user message")
    max_tokens: int = Field(..., ge=1, description="Maximum output size hint (token budget)")


class RetryPolicy(BaseModel):
    """Retry constants for the resilient caller."""
    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=4, ge=1, description="Total attempts (1 initial + retries)")
    base_delay: float = Field(default=1.0, ge=0.0, description="Backoff unit in seconds")
    multiplier: float = Field(default=2.0, ge=1.0, description="Backoff growth per retry")


class ClientConfig(BaseModel):
    """
    Read-only configuration consumed by the call layer.

    Passed explicitly into constructors; never mutated after creation.
    """
    model_config = ConfigDict(frozen=True)

    endpoint: str = Field(
        default="http://localhost:8000/v1/messages",
        description="Relay endpoint URL (relayed mode)",
    )
    model: str = Field(default="claude-sonnet-4-5-20250929", description="Model identifier")
    timeout: float = Field(default=120.0, gt=0.0, description="Deadline of one logical call (s)")
    api_key: Optional[str] = Field(default=None, repr=False, description="Selects direct mode")
    capture_dir: Optional[Path] = Field(default=None, description="Enables exchange capture")
    retry: RetryPolicy = Field(default_factory=RetryPolicy)

    @property
    def transport_mode(self) -> TransportMode:
        return TransportMode.DIRECT if self.api_key else TransportMode.RELAYED


# === Relay wire format ===

class RelayMessage(BaseModel):
    role: str = "user"
    content: str


class RelayRequest(BaseModel):
    """Body POSTed to the relay endpoint."""

    model: str
    max_tokens: int
    messages: list[RelayMessage]

    @classmethod
    def from_prompt(cls, model: str, prompt: Prompt) -> "RelayRequest":
        return cls(
            model=model,
            max_tokens=prompt.max_tokens,
            messages=[RelayMessage(role="user", content=prompt.text)],
        )


class ContentBlock(BaseModel):
    type: str = ""
    text: str = ""


class RelayError(BaseModel):
    message: str = ""


class RelayResponse(BaseModel):
    """Body returned by the relay endpoint on HTTP 200."""
    model_config = ConfigDict(extra="ignore")

    content: list[ContentBlock] = Field(default_factory=list)
    error: Optional[RelayError] = None


# === Call outcomes ===

@dataclass(frozen=True)
class Failure:
    """
    Classified failure of a call attempt.

    Attributes:
        kind: Failure taxonomy tag
        message: Human-readable diagnostic (includes response body when known)
        status_code: HTTP status code, when the failure came from a response
        cause: Underlying exception, kept for logging
    """

    kind: FailureKind
    message: str
    status_code: Optional[int] = None
    cause: Optional[BaseException] = None

    def to_exception(self, attempts: int = 1) -> "LLMClientError":
        """Build the matching LLMClientError with attempt-count context."""
        from codesplit.llm.exceptions import exception_for_kind

        details: dict = {"kind": self.kind.value, "attempts": attempts}
        if self.status_code is not None:
            details["status_code"] = self.status_code
        if self.cause is not None:
            details["cause"] = type(self.cause).__name__
        error = exception_for_kind(self.kind)(self.message, details=details)
        error.__cause__ = self.cause
        return error

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class CallResult:
    """
    Outcome of one attempt or one logical call.

    Exactly one of ``text`` and ``failure`` is set.

    Attributes:
        text: Response text on success
        failure: Classified failure otherwise
        attempts: Number of attempts made (1 for a single transport attempt)
        exhausted: True when the retry budget ran out on transient failures
    """

    text: Optional[str] = None
    failure: Optional[Failure] = None
    attempts: int = 1
    exhausted: bool = False

    def __post_init__(self) -> None:
        if (self.text is None) == (self.failure is None):
            raise ValueError("CallResult needs exactly one of text or failure")
        if self.attempts < 1:
            raise ValueError("attempts must be >= 1")
        if self.exhausted and self.failure is None:
            raise ValueError("only a failed result can be exhausted")

    @classmethod
    def success(cls, text: str, attempts: int = 1) -> "CallResult":
        return cls(text=text, attempts=attempts)

    @classmethod
    def fail(
        cls,
        kind: FailureKind,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ) -> "CallResult":
        return cls(failure=Failure(kind=kind, message=message, status_code=status_code, cause=cause))

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> str:
        """
        Return the response text or raise the matching error.

        Raises:
            RetryExhausted: Transient failures used up every attempt
            LLMClientError: Subclass matching the failure kind
        """
        if self.failure is None:
            return self.text  # type: ignore[return-value]

        error = self.failure.to_exception(self.attempts)
        if self.exhausted:
            from codesplit.retry.exceptions import RetryExhausted

            raise RetryExhausted(last_error=error, attempts=self.attempts) from self.failure.cause
        raise error
