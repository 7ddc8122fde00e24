"""
Transport selection from configuration.

The strategy is picked once, from ClientConfig.transport_mode, when a
caller is built.
"""

import structlog

from codesplit.llm.anthropic_client import AnthropicTransport
from codesplit.llm.base_client import BaseTransport
from codesplit.llm.relay_client import RelayTransport
from codesplit.models.enums import TransportMode
from codesplit.models.llm_models import ClientConfig


logger = structlog.get_logger(__name__)


def create_transport(config: ClientConfig) -> BaseTransport:
    """
    Build the transport strategy selected by the configuration.

    Args:
        config: Client configuration; an API key selects direct mode

    Returns:
        AnthropicTransport in direct mode, RelayTransport otherwise
    """
    mode = config.transport_mode
    logger.info("Selecting transport", mode=mode.value, model=config.model)

    if mode is TransportMode.DIRECT:
        return AnthropicTransport(
            api_key=config.api_key,  # type: ignore[arg-type]
            model=config.model,
            timeout=config.timeout,
        )
    return RelayTransport(
        endpoint=config.endpoint,
        model=config.model,
        timeout=config.timeout,
    )
