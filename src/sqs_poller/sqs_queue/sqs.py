"""
Module: sqs.py
Description: Async SQS client for queue and message operations.

Owns the aioboto3 session, the queue URL cache and the diagnostic notifier.
Provides queue discovery, queue creation, message send/receive/delete and
the long-running poll loop.

Key Components:
- SQSClient: init/reset lifecycle plus every queue operation
- Queue URL cache through QueueDirectory
- botocore error wrapping into RemoteServiceError / QueueNotFoundError
"""

from typing import Any, Callable, Dict, List, Optional

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config.settings import Settings, settings as default_settings
from ..models.message import Message, PollOptions, PollStats
from ..utils.logger import get_logger
from ..utils.notifier import LOG_EVENT, EventNotifier
from .codec import decode_messages, encode_body
from .directory import QueueDirectory
from .exceptions import (
    NotInitializedError,
    QueueNotFoundError,
    RemoteServiceError,
    error_code,
    is_queue_missing,
)
from .retry import receive_retrying

logger = get_logger(__name__)

SESSION_OPTIONS = ('region_name', 'aws_access_key_id', 'aws_secret_access_key', 'aws_session_token')


class SQSClient:
    """
    SQS client for queue and message operations.

    Every operation requires init() first. Queue URLs are resolved once per
    queue name and cached until reset().

    Example:
        >>> client = SQSClient()
        >>> client.init(region_name="eu-west-1")
        >>> await client.create_queue("orders")
        >>> await client.send_message("orders", {"order_id": 1})
        >>> await client.poll("orders", handle_orders, {"max_messages": 10})
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        notifier: Optional[EventNotifier] = None
    ):
        self.settings = settings or default_settings
        self.notifier = notifier or EventNotifier()
        self.directory = QueueDirectory(self, self.notifier)
        self.session = None
        self._client_options: Dict[str, Any] = {}

    # Lifecycle

    def init(self, **options) -> "SQSClient":
        """
        Configure the SQS transport.

        Options override settings: region_name, endpoint_url,
        aws_access_key_id, aws_secret_access_key, aws_session_token, or a
        ready-made `session` exposing client("sqs", ...).
        """
        merged = self.settings.client_options()
        merged.update({k: v for k, v in options.items() if v is not None})

        session = merged.pop('session', None)
        if session is None:
            session = aioboto3.Session(
                **{k: merged[k] for k in SESSION_OPTIONS if k in merged}
            )
        self.session = session
        self._client_options = {
            k: v for k, v in merged.items() if k not in SESSION_OPTIONS
        }

        logger.info(
            "SQS client initialized",
            region_name=merged.get('region_name'),
            endpoint_url=self._client_options.get('endpoint_url')
        )
        return self

    def reset(self) -> None:
        """Drop the transport and the queue URL cache."""
        self.session = None
        self._client_options = {}
        self.directory.clear()

    def ensure_initialized(self) -> None:
        if self.session is None:
            raise NotInitializedError()

    def connect(self):
        """Open an SQS client; use as `async with client.connect() as sqs`."""
        self.ensure_initialized()
        return self.session.client('sqs', **self._client_options)

    def on(self, event_name: str, listener: Callable[..., Any]) -> EventNotifier:
        """Register a diagnostic listener; returns the notifier for chaining."""
        return self.notifier.on(event_name, listener)

    # Queue discovery

    async def get_url(self, queue_name: Optional[str]) -> Optional[str]:
        """Return the queue URL, or None when the queue does not exist."""
        return await self.directory.resolve(queue_name)

    async def get_arn(self, queue_name: Optional[str]) -> Optional[str]:
        """Return the queue ARN, or None when the queue does not exist."""
        return await self.directory.lookup_arn(queue_name)

    async def require_url(self, queue_name: Optional[str]) -> str:
        queue_url = await self.directory.resolve(queue_name)
        if not queue_url:
            raise QueueNotFoundError(queue_name)
        return queue_url

    # Queue and message operations

    async def create_queue(
        self,
        queue_name: str,
        attributes: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Create a queue unless it already exists.

        SQS rejects CreateQueue calls that change attributes of an existing
        queue, so an existing queue is returned untouched.

        Returns:
            The existing queue URL, or the CreateQueue response
        """
        if not queue_name or not isinstance(queue_name, str):
            raise ValueError("queue_name must be a non-empty string")

        self.notifier.emit(LOG_EVENT, 'info', f"Creating SQS queue '{queue_name}'")

        queue_url = await self.directory.resolve(queue_name)
        if queue_url:
            self.notifier.emit(LOG_EVENT, 'info', f"SQS queue '{queue_name}' already exists")
            return queue_url

        params = {
            'QueueName': queue_name,
            'Attributes': {k: str(v) for k, v in (attributes or {}).items()},
        }
        result = await self._call('CreateQueue', queue_name, 'create_queue', **params)
        self.notifier.emit(LOG_EVENT, 'info', f"Created SQS queue '{queue_name}'")
        return result

    async def send_message(self, queue_name: str, body: Any) -> Dict[str, Any]:
        """
        Send a JSON-encoded message body to a queue.

        Raises:
            QueueNotFoundError: If the queue does not exist
            ValueError: If the body is not JSON serializable
            RemoteServiceError: If SQS rejects the call
        """
        queue_url = await self.require_url(queue_name)
        message_body = encode_body(body)

        self.notifier.emit(LOG_EVENT, 'debug', f"Sending message to queue '{queue_name}'", body)
        response = await self._call(
            'SendMessage',
            queue_name,
            'send_message',
            QueueUrl=queue_url,
            MessageBody=message_body
        )

        logger.info(
            "Message sent to SQS",
            queue_name=queue_name,
            message_id=response.get('MessageId')
        )
        return response

    async def receive_messages(
        self,
        queue_name: str,
        options: Any = None
    ) -> List[Message]:
        """
        Receive a batch of messages and decode their JSON bodies.

        Messages with invalid bodies are dropped from the result and left in
        the queue.

        Raises:
            QueueNotFoundError: If the queue does not exist
            RemoteServiceError: If SQS keeps failing after retries
        """
        options = self.poll_options(options)
        queue_url = await self.require_url(queue_name)

        async for attempt in receive_retrying(self.settings):
            with attempt:
                response = await self._call(
                    'ReceiveMessage',
                    queue_name,
                    'receive_message',
                    QueueUrl=queue_url,
                    MaxNumberOfMessages=options.max_messages,
                    WaitTimeSeconds=options.wait_time_seconds
                )

        raw_messages = response.get('Messages') or []
        if not raw_messages:
            return []

        self.notifier.emit(
            LOG_EVENT,
            'debug',
            f"Received {len(raw_messages)} messages from queue '{queue_name}'"
        )
        return decode_messages(raw_messages, self.notifier)

    async def delete_message(self, queue_name: str, receipt_handle: str) -> Dict[str, Any]:
        """
        Delete (acknowledge) a received message by its receipt handle.

        Raises:
            QueueNotFoundError: If the queue does not exist
            RemoteServiceError: If SQS rejects the call
        """
        if not receipt_handle or not isinstance(receipt_handle, str):
            raise ValueError("receipt_handle must be a non-empty string")

        queue_url = await self.require_url(queue_name)
        return await self._call(
            'DeleteMessage',
            queue_name,
            'delete_message',
            QueueUrl=queue_url,
            ReceiptHandle=receipt_handle
        )

    async def poll(
        self,
        queue_name: str,
        handler: Callable[[List[Message]], Any],
        options: Any = None
    ) -> PollStats:
        """Poll `queue_name` and dispatch batches to `handler`; see Poller.poll."""
        from ..polling.poller import Poller

        return await Poller(self).poll(queue_name, handler, options)

    # Helpers

    def poll_options(self, options: Any) -> PollOptions:
        """Build PollOptions; keys missing from a dict fall back to settings."""
        if options is None or isinstance(options, dict):
            return PollOptions.parse({
                'max_messages': self.settings.default_max_messages,
                'wait_time_seconds': self.settings.default_wait_time_seconds,
                **(options or {}),
            })
        return PollOptions.parse(options)

    async def _call(self, operation: str, queue_name: str, method: str, **params) -> Dict[str, Any]:
        """Invoke one SQS API method, translating botocore errors."""
        try:
            async with self.connect() as sqs:
                return await getattr(sqs, method)(**params)

        except ClientError as e:
            if is_queue_missing(e):
                logger.warning(
                    "SQS queue no longer exists",
                    operation=operation,
                    queue_name=queue_name
                )
                raise QueueNotFoundError(queue_name) from e

            logger.error(
                "SQS operation failed",
                operation=operation,
                queue_name=queue_name,
                error_code=error_code(e),
                error_message=e.response.get('Error', {}).get('Message')
            )
            raise RemoteServiceError.from_client_error(operation, e) from e

        except BotoCoreError as e:
            logger.error(
                "SQS request failed",
                operation=operation,
                queue_name=queue_name,
                error=str(e),
                error_type=type(e).__name__
            )
            raise RemoteServiceError.from_botocore_error(operation, e) from e
