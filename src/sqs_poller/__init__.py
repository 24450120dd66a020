"""
Package: sqs_poller
Description: Async Amazon SQS client with a long-running poll loop.

Queue URL discovery and caching, JSON message send/receive/delete and a
poll loop that dispatches batches to a handler and acknowledges them once
the handler returns.
"""

from .config.settings import Settings
from .models.message import HandlerResult, Message, PollOptions, PollStats
from .polling.poller import Poller
from .sqs_queue.exceptions import (
    DecodeError,
    NotInitializedError,
    QueueNotFoundError,
    RemoteServiceError,
    SQSPollerError,
)
from .sqs_queue.sqs import SQSClient
from .utils.notifier import EventNotifier

__version__ = "0.1.0"

__all__ = [
    "DecodeError",
    "EventNotifier",
    "HandlerResult",
    "Message",
    "NotInitializedError",
    "PollOptions",
    "PollStats",
    "Poller",
    "QueueNotFoundError",
    "RemoteServiceError",
    "SQSClient",
    "SQSPollerError",
    "Settings",
]
