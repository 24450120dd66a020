"""
Package: sqs_queue
Description: SQS queue operations.

Provides the async SQS client, queue URL resolution, JSON message codec
and the error taxonomy shared by the poll loop.
"""

from .exceptions import (
    DecodeError,
    NotInitializedError,
    QueueNotFoundError,
    RemoteServiceError,
    SQSPollerError,
)
from .sqs import SQSClient

__all__ = [
    "DecodeError",
    "NotInitializedError",
    "QueueNotFoundError",
    "RemoteServiceError",
    "SQSClient",
    "SQSPollerError",
]
