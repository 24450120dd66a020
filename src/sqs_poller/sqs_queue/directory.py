"""
Module: directory.py
Description: Queue name to queue URL resolution with caching.

Resolved URLs are cached for the lifetime of the owning client. Lookups for
queues that do not exist are never cached, so a queue created later is
picked up on the next call.
"""

from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..utils.logger import get_logger
from ..utils.notifier import LOG_EVENT, EventNotifier
from .exceptions import RemoteServiceError, error_code, is_queue_missing

logger = get_logger(__name__)


class QueueDirectory:
    """
    Resolves queue names to queue URLs and caches successful lookups.

    Attributes:
        transport: Object exposing ensure_initialized() and connect(), the
            latter returning an async context manager yielding an SQS client
        notifier: Diagnostic channel
    """

    def __init__(self, transport: Any, notifier: EventNotifier):
        self.transport = transport
        self.notifier = notifier
        self._urls: Dict[str, str] = {}

    def cached(self, queue_name: str) -> Optional[str]:
        return self._urls.get(queue_name)

    def clear(self) -> None:
        self._urls.clear()

    async def resolve(self, queue_name: Optional[str]) -> Optional[str]:
        """
        Return the URL of `queue_name`, or None when the queue does not exist.

        Raises:
            NotInitializedError: If the transport was never initialized
            RemoteServiceError: If SQS fails for any other reason
        """
        self.transport.ensure_initialized()

        if not queue_name:
            return None

        queue_url = self._urls.get(queue_name)
        if queue_url:
            return queue_url

        try:
            async with self.transport.connect() as sqs:
                response = await sqs.get_queue_url(QueueName=queue_name)
        except ClientError as e:
            if is_queue_missing(e):
                self.notifier.emit(
                    LOG_EVENT,
                    'debug',
                    f"Queue '{queue_name}' could not be found",
                    {'error': str(e)}
                )
                return None
            logger.error(
                "Failed to resolve SQS queue url",
                queue_name=queue_name,
                error_code=error_code(e)
            )
            raise RemoteServiceError.from_client_error('GetQueueUrl', e)
        except BotoCoreError as e:
            logger.error(
                "Failed to resolve SQS queue url",
                queue_name=queue_name,
                error=str(e),
                error_type=type(e).__name__
            )
            raise RemoteServiceError.from_botocore_error('GetQueueUrl', e)

        queue_url = response['QueueUrl']
        self._urls[queue_name] = queue_url
        return queue_url

    async def lookup_arn(self, queue_name: Optional[str]) -> Optional[str]:
        """Return the ARN of `queue_name`, or None when the queue does not exist."""
        queue_url = await self.resolve(queue_name)
        if not queue_url:
            return None

        try:
            async with self.transport.connect() as sqs:
                response = await sqs.get_queue_attributes(
                    QueueUrl=queue_url,
                    AttributeNames=['QueueArn']
                )
        except ClientError as e:
            logger.error(
                "Failed to fetch SQS queue attributes",
                queue_name=queue_name,
                error_code=error_code(e)
            )
            raise RemoteServiceError.from_client_error('GetQueueAttributes', e)
        except BotoCoreError as e:
            logger.error(
                "Failed to fetch SQS queue attributes",
                queue_name=queue_name,
                error=str(e),
                error_type=type(e).__name__
            )
            raise RemoteServiceError.from_botocore_error('GetQueueAttributes', e)

        return response['Attributes']['QueueArn']
