"""Integration test fixtures (service checks and prerequisites).

Provides fixtures for checking if the model relay is available.
Integration tests are skipped if it is not running.
"""

import httpx
import pytest

from codesplit.config import Settings


@pytest.fixture(scope="session")
def relay_endpoint() -> str:
    """Relay endpoint from LLM_ENDPOINT (or the default local relay)."""
    return Settings().LLM_ENDPOINT


@pytest.fixture(scope="session")
def check_relay(relay_endpoint):
    """Check if the relay accepts connections.

    Any HTTP answer counts as available: an empty GET is not a valid
    messages request. Skips tests on connection failure.
    """
    try:
        httpx.get(relay_endpoint, timeout=5)
    except httpx.HTTPError as e:
        pytest.skip(f"Relay not available at {relay_endpoint}: {e}")


@pytest.fixture
def integration_config(check_relay, relay_endpoint, tmp_path):
    """Relayed client configuration with exchange capture enabled."""
    settings = Settings(LLM_ENDPOINT=relay_endpoint, ANTHROPIC_API_KEY=None, CAPTURE_DIR=tmp_path)
    return settings.client_config()
