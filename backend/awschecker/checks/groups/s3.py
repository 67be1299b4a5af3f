"""S3 check catalog."""

import asyncio
from contextlib import closing
from dataclasses import dataclass
from typing import Any

from awschecker.checks.types import CheckChain, CheckGroup, OperationStep

SERVICE = "S3"

GET_OBJECT = "GetObject"

METHODS = (GET_OBJECT,)


@dataclass(frozen=True)
class S3Target:
    """Probe object location."""

    client: Any
    bucket: str
    key: str


def _get_object(target: S3Target) -> None:
    response = target.client.get_object(Bucket=target.bucket, Key=target.key)
    with closing(response["Body"]) as body:
        body.read()


async def get_object(target: S3Target) -> None:
    await asyncio.to_thread(_get_object, target)


def s3_check_group(target: S3Target) -> CheckGroup:
    return CheckGroup(
        service=SERVICE,
        chains=(CheckChain.single(OperationStep(GET_OBJECT, target, get_object)),),
    )
