"""
Configuration settings for codesplit.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.

The core never reads settings directly: callers convert them once into an
immutable ClientConfig (see Settings.client_config) and pass that value to
constructors.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from codesplit.models.llm_models import ClientConfig, RetryPolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "codesplit"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Model endpoint ===
    LLM_ENDPOINT: str = "http://localhost:8000/v1/messages"
    LLM_MODEL: str = "claude-sonnet-4-5-20250929"
    LLM_TIMEOUT: float = 120.0  # seconds, deadline for one logical call
    ANTHROPIC_API_KEY: Optional[str] = None  # Set to call the vendor API directly

    # === Exchange capture ===
    CAPTURE_DIR: Optional[Path] = None  # Enables exchange capture when set

    # === Retry ===
    MAX_ATTEMPTS: int = 4  # 1 initial + 3 retries
    RETRY_BACKOFF_BASE: float = 1.0  # seconds
    RETRY_BACKOFF_MULTIPLIER: float = 2.0

    # === Target language conventions ===
    TARGET_LANGUAGE: str = "Go"
    SOURCE_SUFFIX: str = ".go"
    TEST_FILE_MARKER: str = "_test"
    TEST_DECL_PREFIX: str = "func Test"

    # === Output budgets (max tokens) ===
    PLAN_MAX_TOKENS: int = 500
    PAIR_MAX_TOKENS: int = 6000
    SOURCE_MAX_TOKENS: int = 3000
    STUB_MAX_TOKENS: int = 2000

    def retry_policy(self) -> RetryPolicy:
        """Build the retry policy from the RETRY_* settings."""
        return RetryPolicy(
            max_attempts=self.MAX_ATTEMPTS,
            base_delay=self.RETRY_BACKOFF_BASE,
            multiplier=self.RETRY_BACKOFF_MULTIPLIER,
        )

    def client_config(self, api_key: Optional[str] = None) -> ClientConfig:
        """
        Freeze the call-related settings into a ClientConfig.

        Args:
            api_key: Explicit API key; overrides ANTHROPIC_API_KEY when given

        Returns:
            Immutable configuration for ResilientCaller.from_config
        """
        return ClientConfig(
            endpoint=self.LLM_ENDPOINT,
            model=self.LLM_MODEL,
            timeout=self.LLM_TIMEOUT,
            api_key=api_key or self.ANTHROPIC_API_KEY or None,
            capture_dir=self.CAPTURE_DIR,
            retry=self.retry_policy(),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return Settings()
