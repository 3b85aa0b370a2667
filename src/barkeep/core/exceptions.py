"""Custom exception hierarchy for Barkeep.

All exceptions inherit from BarkeepError, enabling unified error handling
at the application boundary while preserving domain-specific context.

Example:
    >>> from barkeep.core.exceptions import AIResponseError
    >>> raise AIResponseError("Reply had no choices", model="gpt-4o-mini")
"""

from __future__ import annotations

from typing import Any


class BarkeepError(Exception):
    """Base exception for all Barkeep errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(BarkeepError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(BarkeepError):
    """Raised when data validation fails outside of Pydantic models."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


# =============================================================================
# AI Control Domain Exceptions
# =============================================================================


class AIControlError(BarkeepError):
    """Base exception for all completion-endpoint errors.

    Raised for transport failures, non-2xx statuses and unusable replies.
    """

    def __init__(
        self,
        message: str,
        *,
        model: str | None = None,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize AI control error with model context.

        Args:
            message: Human-readable error description.
            model: Name of the model involved.
            provider: Endpoint URL or provider label.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if model:
            combined_details["model"] = model
        if provider:
            combined_details["provider"] = provider
        super().__init__(message, details=combined_details)


class AIConnectionError(AIControlError):
    """Raised when the completion endpoint cannot be reached."""


class AIResponseError(AIControlError):
    """Raised when a completion reply cannot be used.

    Covers non-2xx statuses and bodies without a usable first choice.
    """


class AIRateLimitError(AIControlError):
    """Raised when the endpoint keeps rate limiting after all retries."""

    def __init__(
        self,
        message: str,
        *,
        retry_after_seconds: float | None = None,
        model: str | None = None,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize rate limit error with retry context.

        Args:
            message: Human-readable error description.
            retry_after_seconds: Seconds to wait before retrying.
            model: Name of the model involved.
            provider: Endpoint URL or provider label.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if retry_after_seconds is not None:
            combined_details["retry_after_seconds"] = retry_after_seconds
        super().__init__(message, model=model, provider=provider, details=combined_details)


# =============================================================================
# Chat Domain Exceptions
# =============================================================================


class ChatError(BarkeepError):
    """Base exception for chat-session misuse."""


class ChatBusyError(ChatError):
    """Raised when a message is submitted while another is in flight."""


class RegenerationInProgressError(ChatError):
    """Raised when a second message is regenerated before the first finishes."""

    def __init__(
        self,
        message: str,
        *,
        message_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the id of the message already regenerating.

        Args:
            message: Human-readable error description.
            message_id: Id of the message currently regenerating.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if message_id:
            combined_details["message_id"] = message_id
        super().__init__(message, details=combined_details)


class MessageNotFoundError(ChatError):
    """Raised when a chat message id is not present in the history."""

    def __init__(
        self,
        message: str,
        *,
        message_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if message_id:
            combined_details["message_id"] = message_id
        super().__init__(message, details=combined_details)


# =============================================================================
# Persistence Exceptions
# =============================================================================


class PersistenceError(BarkeepError):
    """Raised when a state file cannot be read or written."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize persistence error with file context.

        Args:
            message: Human-readable error description.
            path: The file involved.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if path:
            combined_details["path"] = path
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "BarkeepError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # AI control exceptions
    "AIControlError",
    "AIConnectionError",
    "AIResponseError",
    "AIRateLimitError",
    # Chat exceptions
    "ChatError",
    "ChatBusyError",
    "RegenerationInProgressError",
    "MessageNotFoundError",
    # Persistence exceptions
    "PersistenceError",
]
