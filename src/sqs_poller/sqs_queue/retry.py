"""
Module: sqs_queue/retry.py
Description: Retry policy for SQS receive calls.

Retries transient service and network failures with exponential backoff.
Missing queues and an uninitialized client are not transient and fail
immediately.
"""

import logging

from tenacity import (
    AsyncRetrying,
    after_log,
    before_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..config.settings import Settings
from ..utils.logger import get_logger
from .exceptions import RemoteServiceError

logger = get_logger(__name__)

# SQS error codes that will not succeed on retry
NON_RETRYABLE_CODES = frozenset({
    "AccessDenied",
    "AccessDeniedException",
    "InvalidParameterValue",
    "InvalidParameterValueException",
    "ReceiptHandleIsInvalid",
    "InvalidClientTokenId",
    "UnrecognizedClientException",
    # botocore failures raised before a request is sent
    "NoCredentialsError",
    "ParamValidationError",
})


def is_transient(error: BaseException) -> bool:
    """True for remote failures worth another attempt."""
    return (
        isinstance(error, RemoteServiceError)
        and error.error_code not in NON_RETRYABLE_CODES
    )


def receive_retrying(settings: Settings) -> AsyncRetrying:
    """
    Build the async retry controller for receive calls.

    Usage:
        async for attempt in receive_retrying(settings):
            with attempt:
                response = await receive()
    """
    return AsyncRetrying(
        stop=stop_after_attempt(settings.receive_retry_attempts),
        wait=wait_exponential(
            multiplier=settings.receive_retry_multiplier,
            min=0,
            max=settings.receive_retry_max_wait
        ),
        retry=retry_if_exception(is_transient),
        before=before_log(logger, logging.DEBUG),
        after=after_log(logger, logging.WARNING),
        reraise=True
    )
