"""
Module: codec.py
Description: JSON encoding and decoding of SQS message bodies.

Invalid bodies are reported and dropped from the decoded batch. They are not
deleted, so SQS redelivers them after the visibility timeout and eventually
routes them to a dead-letter queue if one is configured.
"""

import json
from typing import Any, Dict, Iterable, List

from ..models.message import Message
from ..utils.notifier import LOG_EVENT, EventNotifier
from .exceptions import DecodeError


def encode_body(body: Any) -> str:
    """
    Serialize a message body to JSON text.

    Raises:
        ValueError: If the body is not JSON serializable
    """
    try:
        return json.dumps(body)
    except TypeError as e:
        raise ValueError(f"message body must be JSON serializable: {e}") from e


def decode_messages(
    raw_messages: Iterable[Dict[str, Any]],
    notifier: EventNotifier
) -> List[Message]:
    """
    Decode raw SQS messages into Message models, preserving order.

    Args:
        raw_messages: Messages as returned by ReceiveMessage
        notifier: Channel receiving an error diagnostic per invalid body

    Returns:
        Decoded messages; may be shorter than the input
    """
    decoded = []
    for raw in raw_messages:
        message_id = raw.get('MessageId')
        raw_body = raw.get('Body')
        try:
            body = json.loads(raw_body)
        except (TypeError, ValueError) as e:
            notifier.emit(
                LOG_EVENT,
                'error',
                'Not a valid JSON SQS message, ignore it',
                {
                    'error': DecodeError(message_id, raw_body, str(e)),
                    'messageId': message_id,
                    'message': raw_body,
                }
            )
            continue

        decoded.append(Message(
            receipt_handle=raw['ReceiptHandle'],
            body=body,
            message_id=message_id
        ))
    return decoded
