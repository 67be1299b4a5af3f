"""boto3 clients for the monitored services.

All three clients come from one ``boto3.Session`` so they share the same
credential and region resolution.  Clients are thread-safe and are used
from worker threads (``asyncio.to_thread``) by the check actions.
"""

from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from awschecker.core.config import Settings, StartupError


@dataclass(frozen=True)
class AwsClients:
    """Ready-to-use service clients."""

    s3: Any
    dynamodb: Any
    sqs: Any


def _client_config(settings: Settings, **extra: Any) -> Config:
    # One attempt per check: a failed call is recorded, never retried.
    return Config(
        connect_timeout=settings.AWS_CONNECT_TIMEOUT,
        read_timeout=settings.AWS_READ_TIMEOUT,
        retries={"mode": "standard", "total_max_attempts": 1},
        **extra,
    )


def build_clients(settings: Settings) -> AwsClients:
    """Create the S3, DynamoDB and SQS clients.

    When ``AWS_ENDPOINT_URL`` is set every client targets it, and S3 uses
    path-style addressing so bucket names need no DNS (LocalStack).

    Raises:
        StartupError: If the SDK cannot build a client (e.g. no region).
    """
    kwargs: dict[str, Any] = {}
    s3_extra: dict[str, Any] = {}
    if settings.AWS_ENDPOINT_URL:
        kwargs["endpoint_url"] = settings.AWS_ENDPOINT_URL
        s3_extra["s3"] = {"addressing_style": "path"}

    try:
        session = boto3.Session(region_name=settings.AWS_REGION)
        return AwsClients(
            s3=session.client("s3", config=_client_config(settings, **s3_extra), **kwargs),
            dynamodb=session.client("dynamodb", config=_client_config(settings), **kwargs),
            sqs=session.client("sqs", config=_client_config(settings), **kwargs),
        )
    except BotoCoreError as e:
        raise StartupError(f"unable to load SDK config, {e}") from e
