"""SQS check catalog."""

import asyncio
from dataclasses import dataclass
from typing import Any

from awschecker.checks.types import CheckChain, CheckGroup, OperationStep

SERVICE = "SQS"

RECEIVE_MESSAGE = "ReceiveMessage"

METHODS = (RECEIVE_MESSAGE,)


@dataclass(frozen=True)
class SQSTarget:
    """Queue polled by the checker."""

    client: Any
    queue_url: str


async def receive_message(target: SQSTarget) -> None:
    # Short poll so the check latency reflects the service, not the queue's wait time.
    await asyncio.to_thread(
        target.client.receive_message,
        QueueUrl=target.queue_url,
        MaxNumberOfMessages=1,
        WaitTimeSeconds=0,
    )


def sqs_check_group(target: SQSTarget) -> CheckGroup:
    return CheckGroup(
        service=SERVICE,
        chains=(CheckChain.single(OperationStep(RECEIVE_MESSAGE, target, receive_message)),),
    )
