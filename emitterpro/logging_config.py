"""Structured logging configuration for emitterpro.

Uses structlog for structured, context-rich logging with
support for both console and JSON output formats.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog

from emitterpro.config import Settings, load_settings


def _build_handler(log_file: Path | None) -> logging.Handler:
    if log_file is None:
        return logging.StreamHandler(sys.stderr)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(log_file, mode="a", encoding="utf-8")


def _build_processors(json_output: bool, colors: bool) -> list[structlog.types.Processor]:
    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)

    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Path | None = None,
    colors: bool = True,
) -> None:
    """Configure structured logging for the emitter and its host application.

    Replaces any root handlers installed by an earlier call; the old
    handlers (and the files they hold) are closed.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render records as JSON lines
        log_file: Append to this file instead of stderr
        colors: Colorize console output
    """
    logging.basicConfig(
        format="%(message)s",
        handlers=[_build_handler(log_file)],
        level=getattr(logging, level.upper()),
        force=True,
    )

    structlog.configure(
        processors=_build_processors(json_output, colors),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Records go through the stdlib logger of the same name, so nothing is
    printed until the application configures logging.

    Returns:
        Structured logger instance
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_from_env(settings: Settings | None = None) -> Settings:
    """Configure logging from ``EMITTERPRO_*`` environment settings.

    Args:
        settings: Pre-loaded settings; read from the environment when omitted

    Returns:
        The settings that were applied
    """
    settings = settings or load_settings()
    configure_logging(
        level=settings.log_level,
        json_output=settings.log_json,
        log_file=settings.log_file,
        colors=not settings.log_json,
    )
    return settings


# Usage example:
# from emitterpro.logging_config import get_logger
#
# logger = get_logger(__name__)
#
# logger.debug("listener_added",
#              event_name="'ready'",
#              listener="on_ready",
#              position="back")
