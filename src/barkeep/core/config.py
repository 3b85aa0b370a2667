"""Configuration management for Barkeep.

This module provides centralized configuration management using pydantic-settings,
supporting environment variables, .env files, and runtime configuration overrides.
The endpoint API key is handled as a SecretStr.

Example:
    >>> from barkeep.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.ai.model)
    'gpt-4o-mini'

Environment Variables:
    BARKEEP_API_URL: OpenAI-compatible chat-completions URL
    BARKEEP_API_KEY: Bearer token for the endpoint
    BARKEEP_MODEL: Model name sent with each request
    BARKEEP_CONTEXT_MAX_PREVIOUS_MESSAGES: Literal turns sent per request
    BARKEEP_STATE_PATH: Local state file standing in for browser storage
    BARKEEP_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from barkeep.core.constants import (
    DEFAULT_API_URL,
    DEFAULT_MAX_PREVIOUS_MESSAGES,
    DEFAULT_MODEL,
    DEFAULT_SUMMARY_WINDOW,
    MAX_PREVIOUS_MESSAGES_LIMIT,
    MIN_PREVIOUS_MESSAGES,
)
from barkeep.core.exceptions import ConfigurationError


COMPLETIONS_SUFFIX = "/chat/completions"


class AIProviderSettings(BaseSettings):
    """Configuration for the chat-completions endpoint.

    Attributes:
        api_url: Full chat-completions URL (OpenAI, OpenRouter, a local server...).
        api_key: Bearer token; some local servers need none.
        model: Model identifier sent with each request.
        temperature: Sampling temperature for narrative turns.
        max_tokens: Token cap for narrative turns.
        summary_max_tokens: Token cap for summarization turns.
        max_retries: Retries on rate limiting and connection errors.
        timeout_seconds: Transport timeout handed to the SDK.
    """

    model_config = SettingsConfigDict(
        env_prefix="BARKEEP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str = Field(
        default=DEFAULT_API_URL,
        description="OpenAI-compatible chat-completions URL",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Bearer token for the endpoint",
    )
    model: str = Field(
        default=DEFAULT_MODEL,
        description="Model name",
    )
    temperature: float = Field(
        default=0.8,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for narrative turns",
    )
    max_tokens: int | None = Field(
        default=None,
        ge=1,
        description="Token cap for narrative turns",
    )
    summary_max_tokens: int = Field(
        default=800,
        ge=50,
        le=8000,
        description="Token cap for summarization turns",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Retries on rate limiting and connection errors",
    )
    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        le=600,
        description="Transport timeout",
    )

    @field_validator("api_url", mode="after")
    @classmethod
    def validate_api_url(cls, value: str) -> str:
        """Ensure the endpoint is an http(s) URL.

        Args:
            value: The configured URL.

        Returns:
            The URL without trailing slashes.

        Raises:
            ConfigurationError: If the URL is not http or https.
        """
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"api_url must be an http(s) URL, got {value!r}",
                config_key="api_url",
            )
        return value

    @property
    def base_url(self) -> str:
        """SDK base URL derived from the full completions URL."""
        return derive_base_url(self.api_url)


class ContextSettings(BaseSettings):
    """Configuration for context-window management.

    Attributes:
        max_previous_messages: Literal prior turns included per request.
        summary_window: Turns handed to the summarization request.
        auto_summarize: Refresh the campaign summary after every exchange.
        enable_character_tool: Declare the character-sheet tool to the model.
    """

    model_config = SettingsConfigDict(
        env_prefix="BARKEEP_CONTEXT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_previous_messages: int = Field(
        default=DEFAULT_MAX_PREVIOUS_MESSAGES,
        ge=MIN_PREVIOUS_MESSAGES,
        le=MAX_PREVIOUS_MESSAGES_LIMIT,
        description="Literal prior turns per request",
    )
    summary_window: int = Field(
        default=DEFAULT_SUMMARY_WINDOW,
        ge=1,
        le=50,
        description="Turns handed to summarization",
    )
    auto_summarize: bool = Field(
        default=True,
        description="Refresh the campaign summary after every exchange",
    )
    enable_character_tool: bool = Field(
        default=True,
        description="Declare the character-sheet tool",
    )


class StorageSettings(BaseSettings):
    """Configuration for file storage paths.

    Attributes:
        state_path: Local JSON state file (the browser-storage equivalent).
        export_dir: Directory for exported character files.
    """

    model_config = SettingsConfigDict(
        env_prefix="BARKEEP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    state_path: Path = Field(
        default=Path("data/barkeep-state.json"),
        description="Local state file",
    )
    export_dir: Path = Field(
        default=Path("data/exports"),
        description="Directory for exported character files",
    )

    @field_validator("export_dir", mode="after")
    @classmethod
    def ensure_directory_exists(cls, value: Path) -> Path:
        """Ensure the export directory exists, creating it if necessary."""
        value.mkdir(parents=True, exist_ok=True)
        return value

    @field_validator("state_path", mode="after")
    @classmethod
    def ensure_parent_exists(cls, value: Path) -> Path:
        """Ensure the state file's directory exists."""
        value.parent.mkdir(parents=True, exist_ok=True)
        return value


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        ai: Completion endpoint settings.
        context: Context-window settings.
        storage: File storage settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="BARKEEP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Barkeep",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    ai: AIProviderSettings = Field(default_factory=AIProviderSettings)
    context: ContextSettings = Field(default_factory=ContextSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.debug


def derive_base_url(api_url: str) -> str:
    """Strip the chat-completions suffix so the URL can seed an SDK client.

    Args:
        api_url: Full completions URL, e.g. ``http://localhost:1234/v1/chat/completions``.

    Returns:
        The base URL, e.g. ``http://localhost:1234/v1``.
    """
    url = api_url.strip().rstrip("/")
    if url.endswith(COMPLETIONS_SUFFIX):
        url = url[: -len(COMPLETIONS_SUFFIX)]
    return url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If required configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "AIProviderSettings",
    "ContextSettings",
    "StorageSettings",
    "Settings",
    "derive_base_url",
    "get_settings",
    "clear_settings_cache",
]
