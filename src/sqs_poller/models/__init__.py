"""
Module: models
Description: Package initialization for Pydantic data models.

This package contains the data models used by the SQS poller:
- Message: Decoded SQS message
- PollOptions: Receive and poll options
- HandlerResult: Continue/stop signal returned by poll handlers
- PollStats: Summary of a finished poll loop
"""

from .message import HandlerResult, Message, PollOptions, PollStats

__all__ = [
    "HandlerResult",
    "Message",
    "PollOptions",
    "PollStats",
]
