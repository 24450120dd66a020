"""
Module: logger.py
Description: Structured logging configuration for the SQS poller.

Configures structlog for JSON output optimized for CloudWatch Logs, with a
console renderer for local use. Provides consistent logging across all
modules with proper context and structured data.

Key Components:
- JSON output for CloudWatch compatibility
- Timestamp and log level processors
- Level filtering driven by settings
- configure_logging() and get_logger() helpers

Dependencies: structlog, logging, datetime
"""

import logging
import sys
from datetime import datetime, timezone

import structlog

from ..config.settings import settings


def _add_timestamp(logger, method_name, event_dict):
    """
    Add ISO 8601 UTC timestamp to log entries.

    Args:
        logger: Logger instance
        method_name: Log method name (info, error, etc.)
        event_dict: Current log event dictionary

    Returns:
        Updated event dictionary with timestamp
    """
    event_dict["timestamp"] = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return event_dict


def _add_log_level(logger, method_name, event_dict):
    """
    Add log level to event dictionary.

    Args:
        logger: Logger instance
        method_name: Log method name (info, error, etc.)
        event_dict: Current log event dictionary

    Returns:
        Updated event dictionary with level
    """
    event_dict["level"] = method_name.upper()
    return event_dict


def configure_logging(level: str = "INFO", fmt: str = "json", stream=None) -> None:
    """
    Configure structlog processors, renderer and minimum level.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: "json" for CloudWatch style lines, "console" for humans
        stream: File object receiving log lines (default: stdout)
    """
    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer(default=str)

    structlog.configure(
        processors=[
            _add_timestamp,
            _add_log_level,
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.WriteLoggerFactory(file=stream or sys.stdout),
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        cache_logger_on_first_use=True,
    )


configure_logging(settings.log_level, settings.log_format)


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Message sent to SQS", queue_name="orders", message_id="6e1f...")
        {"event": "Message sent to SQS", "queue_name": "orders", "message_id": "6e1f...", "timestamp": "2024-01-15T10:30:00.000000Z", "level": "INFO"}
    """
    return structlog.get_logger(name)
