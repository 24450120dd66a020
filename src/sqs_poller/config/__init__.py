"""
Package: config
Description: Configuration for the SQS poller.

Settings are read from SQS_POLLER_* environment variables.
"""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
