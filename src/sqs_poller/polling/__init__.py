"""
Package: polling
Description: Long-running poll loop dispatching SQS batches to handlers.
"""

from .poller import Poller, is_stop_signal

__all__ = ["Poller", "is_stop_signal"]
