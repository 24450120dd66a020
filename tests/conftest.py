"""
Module: conftest.py
Description: Shared pytest fixtures for SQS poller tests.

Provides test settings, an in-memory SQS double exposing the aioboto3
client surface, and initialized clients wired to it. The double models
SQS redelivery explicitly: messages received but not deleted become
visible again on the next receive, and are moved to a dead-letter list
once they reach the queue's max receive count.
"""

import asyncio
import itertools
import uuid
from collections import deque
from typing import Any, Dict, List, Optional

import pytest
from botocore.exceptions import ClientError
from pydantic_settings import SettingsConfigDict

from sqs_poller.config.settings import Settings
from sqs_poller.sqs_queue.sqs import SQSClient
from sqs_poller.utils.notifier import EventNotifier

FAKE_ENDPOINT = "https://sqs.us-east-1.amazonaws.com/123456789012"


class TestSettings(Settings):
    """Test settings that don't read .env files and never sleep between retries."""

    __test__ = False

    model_config = SettingsConfigDict(
        env_prefix="SQS_POLLER_TEST_",
        env_file=None,
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = "DEBUG"
    receive_retry_attempts: int = 3
    receive_retry_multiplier: float = 0.0
    receive_retry_max_wait: float = 0.0


def client_error(code: str, operation: str, message: str = "Test error") -> ClientError:
    return ClientError(
        error_response={'Error': {'Code': code, 'Message': message}},
        operation_name=operation
    )


class FakeQueue:
    def __init__(self, name: str, attributes: Dict[str, str]):
        self.name = name
        self.url = f"{FAKE_ENDPOINT}/{name}"
        self.arn = f"arn:aws:sqs:us-east-1:123456789012:{name}"
        self.attributes = dict(attributes)
        self.max_receive_count = int(attributes.get('MaxReceiveCount', 0)) or None
        self.available = deque()
        self.in_flight: Dict[str, Dict[str, Any]] = {}
        self.dead_letters: List[Dict[str, Any]] = []


class FakeSQS:
    """
    In-memory stand-in for an aioboto3 SQS client.

    Records every call in `calls` so tests can count remote operations.
    """

    def __init__(self):
        self.queues: Dict[str, FakeQueue] = {}
        self.calls: List[str] = []
        self._ids = itertools.count(1)

    def count(self, method: str) -> int:
        return self.calls.count(method)

    def add_queue(self, name: str, attributes: Optional[Dict[str, str]] = None) -> FakeQueue:
        queue = FakeQueue(name, attributes or {})
        self.queues[name] = queue
        return queue

    def queue_by_url(self, queue_url: str, operation: str) -> FakeQueue:
        for queue in self.queues.values():
            if queue.url == queue_url:
                return queue
        raise client_error(
            'AWS.SimpleQueueService.NonExistentQueue',
            operation,
            'The specified queue does not exist.'
        )

    def put_raw(self, name: str, body: str) -> str:
        """Enqueue a raw body without JSON encoding."""
        message_id = f"msg-{next(self._ids)}"
        self.queues[name].available.append({
            'MessageId': message_id,
            'Body': body,
            'ReceiveCount': 0,
        })
        return message_id

    def depth(self, name: str) -> int:
        queue = self.queues[name]
        return len(queue.available) + len(queue.in_flight)

    # aioboto3 client surface

    async def get_queue_url(self, QueueName: str) -> Dict[str, Any]:
        self.calls.append('get_queue_url')
        queue = self.queues.get(QueueName)
        if queue is None:
            raise client_error(
                'AWS.SimpleQueueService.NonExistentQueue',
                'GetQueueUrl',
                'The specified queue does not exist.'
            )
        return {'QueueUrl': queue.url}

    async def get_queue_attributes(self, QueueUrl: str, AttributeNames: List[str]) -> Dict[str, Any]:
        self.calls.append('get_queue_attributes')
        queue = self.queue_by_url(QueueUrl, 'GetQueueAttributes')
        return {'Attributes': {'QueueArn': queue.arn}}

    async def create_queue(self, QueueName: str, Attributes: Dict[str, str]) -> Dict[str, Any]:
        self.calls.append('create_queue')
        queue = self.queues.get(QueueName) or self.add_queue(QueueName, Attributes)
        return {'QueueUrl': queue.url}

    async def send_message(self, QueueUrl: str, MessageBody: str) -> Dict[str, Any]:
        self.calls.append('send_message')
        queue = self.queue_by_url(QueueUrl, 'SendMessage')
        message_id = self.put_raw(queue.name, MessageBody)
        return {'MessageId': message_id}

    async def receive_message(
        self,
        QueueUrl: str,
        MaxNumberOfMessages: int = 1,
        WaitTimeSeconds: int = 0
    ) -> Dict[str, Any]:
        self.calls.append('receive_message')
        queue = self.queue_by_url(QueueUrl, 'ReceiveMessage')

        # Undeleted deliveries become visible again
        for message in list(queue.in_flight.values()):
            if queue.max_receive_count and message['ReceiveCount'] >= queue.max_receive_count:
                queue.dead_letters.append(message)
            else:
                queue.available.append(message)
        queue.in_flight.clear()

        messages = []
        while queue.available and len(messages) < MaxNumberOfMessages:
            message = queue.available.popleft()
            message['ReceiveCount'] += 1
            receipt_handle = f"rh-{uuid.uuid4().hex}"
            queue.in_flight[receipt_handle] = message
            messages.append({
                'MessageId': message['MessageId'],
                'ReceiptHandle': receipt_handle,
                'Body': message['Body'],
            })

        if not messages:
            return {}
        return {'Messages': messages}

    async def delete_message(self, QueueUrl: str, ReceiptHandle: str) -> Dict[str, Any]:
        self.calls.append('delete_message')
        queue = self.queue_by_url(QueueUrl, 'DeleteMessage')
        if ReceiptHandle not in queue.in_flight:
            raise client_error('ReceiptHandleIsInvalid', 'DeleteMessage', 'The receipt handle is invalid.')
        del queue.in_flight[ReceiptHandle]
        return {}


class FakeClientContext:
    def __init__(self, sqs: FakeSQS):
        self.sqs = sqs

    async def __aenter__(self) -> FakeSQS:
        # Yield to the event loop like a real network call
        await asyncio.sleep(0)
        return self.sqs

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class FakeSession:
    """Mimics aioboto3.Session.client(...) returning an async context manager."""

    def __init__(self, sqs: FakeSQS):
        self.sqs = sqs
        self.client_calls: List[Dict[str, Any]] = []

    def client(self, service_name: str, **kwargs) -> FakeClientContext:
        self.client_calls.append({'service_name': service_name, **kwargs})
        return FakeClientContext(self.sqs)


@pytest.fixture
def test_settings():
    """
    Provide test configuration settings.

    Disables environment variable and .env loading for predictable tests.
    """
    return TestSettings()


@pytest.fixture
def fake_sqs():
    """Provide an empty in-memory SQS double."""
    return FakeSQS()


@pytest.fixture
def fake_session(fake_sqs):
    return FakeSession(fake_sqs)


@pytest.fixture
def notifier():
    return EventNotifier()


@pytest.fixture
def diagnostics(notifier):
    """Collect every "log" diagnostic as (level, message, detail)."""
    collected = []
    notifier.on("log", lambda level, message, detail: collected.append((level, message, detail)))
    return collected


@pytest.fixture
def sqs_client(test_settings, notifier, fake_session):
    """Provide an SQSClient initialized against the SQS double."""
    return SQSClient(settings=test_settings, notifier=notifier).init(session=fake_session)


@pytest.fixture
def orders_queue(fake_sqs):
    """Provide an existing, empty 'orders' queue."""
    return fake_sqs.add_queue("orders")
