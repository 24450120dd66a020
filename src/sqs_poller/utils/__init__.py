"""
Module: utils
Description: Package initialization for utility functions.

Current utilities:
- logger: Structured logging configuration and helpers
- notifier: Diagnostic publish/subscribe channel
"""

from .logger import configure_logging, get_logger
from .notifier import EventNotifier

__all__ = ["configure_logging", "get_logger", "EventNotifier"]
