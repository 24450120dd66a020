#!/usr/bin/env python3
"""
Script: cli.py
Description: Command-line access to SQS queue operations.

Usage:
    sqs-poller url orders
    sqs-poller create orders --attribute VisibilityTimeout=60
    sqs-poller send orders '{"order_id": 1}'
    sqs-poller receive orders --max-messages 10
    sqs-poller drain orders --max-messages 10 [--keep-polling]

Results are printed as JSON. Connection settings fall back to the
SQS_POLLER_* environment variables.
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from .config.settings import settings
from .models.message import Message, PollOptions
from .sqs_queue.exceptions import SQSPollerError
from .sqs_queue.sqs import SQSClient
from .utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def parse_attributes(pairs: Optional[List[str]]) -> Dict[str, str]:
    """
    Parse KEY=VALUE pairs into a queue attribute mapping.

    Raises:
        ValueError: If a pair has no '='
    """
    attributes = {}
    for pair in pairs or []:
        key, sep, value = pair.partition('=')
        if not sep or not key:
            raise ValueError(f"attribute must be KEY=VALUE, got '{pair}'")
        attributes[key] = value
    return attributes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqs-poller",
        description="Send, receive and poll JSON messages on Amazon SQS queues"
    )
    parser.add_argument('--region', type=str, default=None, help='AWS region')
    parser.add_argument(
        '--endpoint-url',
        type=str,
        default=None,
        help='Custom SQS endpoint (LocalStack, moto server, ElasticMQ)'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Log level (default: SQS_POLLER_LOG_LEVEL or INFO)'
    )

    commands = parser.add_subparsers(dest='command', required=True)

    url_cmd = commands.add_parser('url', help='Print the queue URL')
    url_cmd.add_argument('queue_name')

    arn_cmd = commands.add_parser('arn', help='Print the queue ARN')
    arn_cmd.add_argument('queue_name')

    create_cmd = commands.add_parser('create', help='Create a queue unless it exists')
    create_cmd.add_argument('queue_name')
    create_cmd.add_argument(
        '--attribute',
        action='append',
        metavar='KEY=VALUE',
        help='Queue attribute, may be repeated'
    )

    send_cmd = commands.add_parser('send', help='Send a JSON message body')
    send_cmd.add_argument('queue_name')
    send_cmd.add_argument('body', help='Message body as JSON text')

    for name, help_text in (
        ('receive', 'Receive one batch without deleting it'),
        ('drain', 'Poll, print and delete messages'),
    ):
        cmd = commands.add_parser(name, help=help_text)
        cmd.add_argument('queue_name')
        cmd.add_argument('--max-messages', type=int, default=settings.default_max_messages)
        cmd.add_argument('--wait-time-seconds', type=int, default=settings.default_wait_time_seconds)
        if name == 'drain':
            cmd.add_argument(
                '--keep-polling',
                action='store_true',
                help='Keep polling after the queue is empty'
            )

    return parser


def _print_json(value: Any) -> None:
    print(json.dumps(value, default=str))


async def run_command(client: SQSClient, args: argparse.Namespace) -> Any:
    """Execute one parsed command against an initialized client."""
    if args.command == 'url':
        return await client.get_url(args.queue_name)

    if args.command == 'arn':
        return await client.get_arn(args.queue_name)

    if args.command == 'create':
        return await client.create_queue(args.queue_name, parse_attributes(args.attribute))

    if args.command == 'send':
        response = await client.send_message(args.queue_name, json.loads(args.body))
        return {'MessageId': response.get('MessageId')}

    options = PollOptions(
        max_messages=args.max_messages,
        wait_time_seconds=args.wait_time_seconds,
        stop_when_depleted=not getattr(args, 'keep_polling', False)
    )

    if args.command == 'receive':
        messages = await client.receive_messages(args.queue_name, options)
        return [m.model_dump() for m in messages]

    def print_batch(messages: List[Message]) -> None:
        for message in messages:
            _print_json(message.body)

    stats = await client.poll(args.queue_name, print_batch, options)
    logger.info("Drain finished", queue_name=args.queue_name, **stats.model_dump())
    return None


def main(argv: Optional[List[str]] = None, client: Optional[SQSClient] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level or settings.log_level, settings.log_format, stream=sys.stderr)

    try:
        if client is None:
            client = SQSClient().init(region_name=args.region, endpoint_url=args.endpoint_url)
        result = asyncio.run(run_command(client, args))
        if args.command != 'drain':
            _print_json(result)
        return 0

    except KeyboardInterrupt:
        print("Cancelled by user.", file=sys.stderr)
        return 1

    except (SQSPollerError, ValueError) as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        logger.error("Command failed", command=args.command, error=str(e))
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == '__main__':
    run()
