"""
Module: exceptions.py
Description: Error taxonomy for SQS queue operations.
"""

from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

# Error codes SQS uses for a queue that does not exist (query and JSON protocols)
QUEUE_DOES_NOT_EXIST_CODES = frozenset({
    "AWS.SimpleQueueService.NonExistentQueue",
    "QueueDoesNotExist",
})


class SQSPollerError(Exception):
    """Base class for all SQS poller errors."""


class NotInitializedError(SQSPollerError):
    """Raised when an operation runs before init() or after reset()."""

    def __init__(self, message: str = "Must call init(...) first"):
        super().__init__(message)


class QueueNotFoundError(SQSPollerError):
    """Raised when a queue name does not resolve to a queue URL."""

    def __init__(self, queue_name: Optional[str]):
        self.queue_name = queue_name
        super().__init__(f"Unable to find SQS queue '{queue_name}'")


class RemoteServiceError(SQSPollerError):
    """Wraps a failure reported by the SQS service."""

    def __init__(self, operation: str, error_code: str, message: str):
        self.operation = operation
        self.error_code = error_code
        super().__init__(f"{operation} failed ({error_code}): {message}")

    @classmethod
    def from_botocore_error(cls, operation: str, error: BotoCoreError) -> "RemoteServiceError":
        wrapped = cls(operation, type(error).__name__, str(error))
        wrapped.__cause__ = error
        return wrapped

    @classmethod
    def from_client_error(cls, operation: str, error: ClientError) -> "RemoteServiceError":
        details = error.response.get('Error', {})
        wrapped = cls(
            operation,
            details.get('Code', 'Unknown'),
            details.get('Message', str(error))
        )
        wrapped.__cause__ = error
        return wrapped


class DecodeError(SQSPollerError):
    """Describes a message body that is not valid JSON."""

    def __init__(self, message_id: Optional[str], body: Any, reason: str):
        self.message_id = message_id
        self.body = body
        super().__init__(f"Message {message_id} is not valid JSON: {reason}")


def error_code(error: ClientError) -> str:
    """Return the AWS error code of a botocore ClientError."""
    return error.response.get('Error', {}).get('Code', 'Unknown')


def is_queue_missing(error: ClientError) -> bool:
    """True when a ClientError means the queue does not exist."""
    return error_code(error) in QUEUE_DOES_NOT_EXIST_CODES
