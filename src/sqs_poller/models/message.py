"""
Module: message.py
Description: Message and polling data models for the SQS poller.

Key Components:
- Message: Decoded SQS delivery (receipt handle + JSON body)
- PollOptions: Receive/poll options with bounds validation
- HandlerResult: Explicit continue/stop signal for poll handlers
- PollStats: Summary returned when a poll loop stops

Dependencies: pydantic, enum, typing
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

MAX_MESSAGES_LIMIT = 10
WAIT_TIME_SECONDS_LIMIT = 20


class HandlerResult(str, Enum):
    """
    Signal a poll handler may return.

    Returning STOP (or the literal False) stops polling after the batch is
    deleted. Any other return value continues polling.
    """

    CONTINUE = "continue"
    STOP = "stop"


class Message(BaseModel):
    """
    Message received from an SQS queue.

    Attributes:
        receipt_handle: Token identifying this delivery, required to delete it
        body: JSON-decoded message body
        message_id: SQS message id, kept for diagnostics
    """

    model_config = ConfigDict(frozen=True)

    receipt_handle: str = Field(
        ...,
        min_length=1,
        description="Receipt handle of this delivery attempt"
    )
    body: Any = Field(
        default=None,
        description="Decoded JSON message body"
    )
    message_id: Optional[str] = Field(
        default=None,
        description="SQS message identifier"
    )


class PollOptions(BaseModel):
    """
    Options for receive and poll calls.

    Values outside the SQS limits are rejected rather than clamped.

    Attributes:
        max_messages: Messages requested per receive call (1-10)
        wait_time_seconds: Long polling wait per receive call (0-20, 0 = short poll)
        stop_when_depleted: Stop polling once a receive returns no messages
    """

    model_config = ConfigDict(extra="forbid")

    max_messages: int = Field(
        default=1,
        ge=1,
        le=MAX_MESSAGES_LIMIT,
        description="Maximum number of messages per receive call"
    )
    wait_time_seconds: int = Field(
        default=0,
        ge=0,
        le=WAIT_TIME_SECONDS_LIMIT,
        description="Seconds a receive call waits for messages"
    )
    stop_when_depleted: bool = Field(
        default=False,
        description="Stop polling when a receive call returns no messages"
    )

    @classmethod
    def parse(cls, options: Any = None) -> "PollOptions":
        """Build options from None, a dict or an existing PollOptions."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, dict):
            return cls(**options)
        raise ValueError("options must be a PollOptions instance or a dictionary")


class PollStats(BaseModel):
    """Counters describing a finished poll loop."""

    batches: int = Field(default=0, ge=0, description="Non-empty batches dispatched")
    messages: int = Field(default=0, ge=0, description="Messages handed to the handler")
    handler_failures: int = Field(default=0, ge=0, description="Batches whose handler raised")
    deleted: int = Field(default=0, ge=0, description="Messages acknowledged")
    delete_failures: int = Field(default=0, ge=0, description="Deletes that failed")
    stopped_by_handler: bool = Field(default=False, description="Handler returned the stop signal")
