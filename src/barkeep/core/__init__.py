"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        BarkeepError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        AIControlError: Completion-endpoint errors.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
"""

from __future__ import annotations

from barkeep.core.config import (
    AIProviderSettings,
    ContextSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    derive_base_url,
    get_settings,
)
from barkeep.core.exceptions import (
    AIConnectionError,
    AIControlError,
    AIRateLimitError,
    AIResponseError,
    BarkeepError,
    ChatBusyError,
    ChatError,
    ConfigurationError,
    MessageNotFoundError,
    PersistenceError,
    RegenerationInProgressError,
    ValidationError,
)
from barkeep.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    turn_context,
)


__all__ = [
    # Exceptions
    "BarkeepError",
    "ConfigurationError",
    "ValidationError",
    "AIControlError",
    "AIConnectionError",
    "AIResponseError",
    "AIRateLimitError",
    "ChatError",
    "ChatBusyError",
    "RegenerationInProgressError",
    "MessageNotFoundError",
    "PersistenceError",
    # Configuration
    "Settings",
    "AIProviderSettings",
    "ContextSettings",
    "StorageSettings",
    "derive_base_url",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "turn_context",
]
