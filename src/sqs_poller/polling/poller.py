"""
Module: polling/poller.py
Description: Long-running SQS poll loop.

Receives batches, hands each batch to a user handler and acknowledges the
batch once the handler returns. Handler failures never stop the loop: the
batch is left in the queue and SQS redelivers it after the visibility
timeout (or moves it to a dead-letter queue). Only the handler's stop signal
or an empty receive with stop_when_depleted ends the loop.
"""

import inspect
from typing import Any, Awaitable, Callable, List, Union

from ..models.message import HandlerResult, Message, PollOptions, PollStats
from ..sqs_queue.exceptions import QueueNotFoundError
from ..utils.logger import get_logger
from ..utils.notifier import LOG_EVENT

logger = get_logger(__name__)

Handler = Callable[[List[Message]], Union[Awaitable[Any], Any]]


def is_stop_signal(result: Any) -> bool:
    """Only the literal False or HandlerResult.STOP stop polling."""
    return result is False or result is HandlerResult.STOP


class Poller:
    """
    Poll loop bound to an SQSClient.

    Attributes:
        client: SQSClient used for resolve, receive and delete calls
        notifier: Diagnostic channel of the client
    """

    def __init__(self, client: Any):
        self.client = client
        self.notifier = client.notifier

    async def poll(
        self,
        queue_name: str,
        handler: Handler,
        options: Union[PollOptions, dict, None] = None
    ) -> PollStats:
        """
        Keep receiving batches from `queue_name` and dispatch them to `handler`.

        The handler receives the whole batch and may be a coroutine function.
        When it returns, every message of the batch is deleted. When it
        returns False (or HandlerResult.STOP) polling stops after the deletes.
        When it raises, the error is reported and the batch is left in the
        queue.

        Args:
            queue_name: Queue to poll
            handler: Callable receiving a list of Message
            options: PollOptions or dict (max_messages, wait_time_seconds,
                stop_when_depleted)

        Returns:
            PollStats for the finished loop

        Raises:
            QueueNotFoundError: If the queue does not exist, at start or later
            NotInitializedError: If the client was never initialized
            RemoteServiceError: If receiving keeps failing after retries
        """
        if not callable(handler):
            raise ValueError("handler must be callable")
        options = self.client.poll_options(options)

        queue_url = await self.client.get_url(queue_name)
        if not queue_url:
            raise QueueNotFoundError(queue_name)

        stats = PollStats()
        logger.info(
            "Started polling SQS queue",
            queue_name=queue_name,
            max_messages=options.max_messages,
            wait_time_seconds=options.wait_time_seconds,
            stop_when_depleted=options.stop_when_depleted
        )

        while True:
            messages = await self.client.receive_messages(queue_name, options)
            self.notifier.emit(
                LOG_EVENT,
                'debug',
                f"Received {len(messages)} messages on SQS queue '{queue_name}'"
            )

            if not messages:
                if options.stop_when_depleted:
                    logger.info("SQS queue depleted, stopped polling", queue_name=queue_name)
                    return stats
                continue

            stats.batches += 1
            stats.messages += len(messages)

            handled, result = await self._dispatch(queue_name, handler, messages)
            if not handled:
                stats.handler_failures += 1
                continue

            await self._acknowledge(queue_name, messages, stats)

            if is_stop_signal(result):
                stats.stopped_by_handler = True
                self.notifier.emit(LOG_EVENT, 'debug', f"Stopped polling SQS queue '{queue_name}'")
                return stats

    async def _dispatch(self, queue_name: str, handler: Handler, messages: List[Message]):
        """Run the handler; returns (handled, result)."""
        try:
            result = handler(messages)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            self.notifier.emit(
                LOG_EVENT,
                'error',
                e,
                {
                    'queue_name': queue_name,
                    'messages': [m.model_dump() for m in messages],
                }
            )
            return False, None
        return True, result

    async def _acknowledge(self, queue_name: str, messages: List[Message], stats: PollStats) -> None:
        """Delete every message of a handled batch, in order."""
        for message in messages:
            try:
                await self.client.delete_message(queue_name, message.receipt_handle)
            except QueueNotFoundError:
                raise
            except Exception as e:
                stats.delete_failures += 1
                self.notifier.emit(
                    LOG_EVENT,
                    'error',
                    e,
                    {
                        'queue_name': queue_name,
                        'message_id': message.message_id,
                    }
                )
                continue
            stats.deleted += 1
