"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import pytest
from pathlib import Path

from codesplit.config import Settings
from codesplit.models.llm_models import ClientConfig, Prompt, RetryPolicy


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Built with _env_file=None so a developer's .env never leaks into tests.
    """
    return Settings(
        _env_file=None,
        # === Application ===
        APP_NAME="codesplit (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Model endpoint ===
        LLM_ENDPOINT="http://relay.test/v1/messages",
        LLM_MODEL="claude-test",
        LLM_TIMEOUT=5.0,
        ANTHROPIC_API_KEY=None,
        CAPTURE_DIR=None,

        # === Retry ===
        MAX_ATTEMPTS=4,
        RETRY_BACKOFF_BASE=0.01,  # Keep unit tests fast
        RETRY_BACKOFF_MULTIPLIER=2.0,
    )


@pytest.fixture
def fast_policy() -> RetryPolicy:
    """Default attempt budget with a 10ms backoff unit."""
    return RetryPolicy(max_attempts=4, base_delay=0.01, multiplier=2.0)


@pytest.fixture
def client_config(fast_policy: RetryPolicy) -> ClientConfig:
    """Relayed-mode client configuration."""
    return ClientConfig(
        endpoint="http://relay.test/v1/messages",
        model="claude-test",
        timeout=5.0,
        retry=fast_policy,
    )


@pytest.fixture
def sample_prompt() -> Prompt:
    """Small planning-sized prompt."""
    return Prompt(text="Split this file into smaller files.", max_tokens=500)


@pytest.fixture
def capture_dir(tmp_path: Path) -> Path:
    """Capture directory that does not exist yet."""
    return tmp_path / "captures"
