"""Structured logging configuration for Barkeep.

Logging goes through structlog. Development runs get the coloured console
renderer; with debug off the output is one JSON object per line. Chat turns
bind the character name and model so every line emitted while a turn is in
flight carries them.

Example:
    >>> from barkeep.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Chat turn sent", history=6, tool_enabled=True)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger

    from barkeep.core.config import Settings


APP_NAME = "barkeep"

# Loggers that report every HTTP exchange the openai SDK makes
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "asyncio")

STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Stamp the application name on a log entry."""
    event_dict["app"] = APP_NAME
    return event_dict


def _renderer(json_format: bool) -> list[Processor]:
    if json_format:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(
    settings: Settings | None = None,
    *,
    level: str | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Explicit keyword arguments win over the settings. Without settings the
    level defaults to INFO and the console renderer is used.

    Args:
        settings: Application settings supplying ``log_level`` and ``debug``.
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Emit JSON lines instead of console output.
        log_file: Optional file that also receives standard library records.

    Example:
        >>> configure_logging(get_settings())
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    if level is None:
        level = settings.log_level if settings is not None else "INFO"
    if json_format is None:
        json_format = settings.is_production if settings is not None else False
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        *_renderer(json_format),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format=STDLIB_FORMAT, level=numeric_level, stream=sys.stdout, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(STDLIB_FORMAT))
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind values included in every subsequent log line of this context.

    Example:
        >>> bind_context(character="Thorin")
        >>> logger.info("Summary refreshed")  # carries character="Thorin"
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def turn_context(character: str, model: str, **extra: Any) -> Iterator[None]:
    """Bind the character and model for the duration of one chat turn.

    Values bound before entering are restored on exit, so nested turns and
    background summary tasks do not leak into each other's lines.

    Args:
        character: Character name ("" is logged as "unnamed").
        model: Model identifier sent to the endpoint.
        **extra: Additional per-turn values, e.g. ``message_id``.
    """
    with structlog.contextvars.bound_contextvars(
        character=character or "unnamed",
        model=model,
        **extra,
    ):
        yield


__all__ = [
    "add_app_context",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "turn_context",
]
