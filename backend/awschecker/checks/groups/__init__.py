"""Static check catalogs, one per monitored service.

The (service, method) pairs below are the complete label set of the
latency histogram.
"""

from awschecker.aws.clients import AwsClients
from awschecker.checks.groups import dynamodb, s3, sqs
from awschecker.checks.groups.dynamodb import DynamoDBTarget, dynamodb_check_group
from awschecker.checks.groups.s3 import S3Target, s3_check_group
from awschecker.checks.groups.sqs import SQSTarget, sqs_check_group
from awschecker.checks.types import CheckGroup
from awschecker.core.config import Settings

CATALOG: dict[str, tuple[str, ...]] = {
    s3.SERVICE: s3.METHODS,
    dynamodb.SERVICE: dynamodb.METHODS,
    sqs.SERVICE: sqs.METHODS,
}


def build_check_groups(settings: Settings, clients: AwsClients) -> tuple[CheckGroup, ...]:
    """Bind every catalog to its configured target."""
    return (
        s3_check_group(S3Target(clients.s3, settings.S3_BUCKET, settings.S3_KEY)),
        dynamodb_check_group(
            DynamoDBTarget(clients.dynamodb, settings.DYNAMODB_TABLE, settings.DYNAMODB_ITEM_ID)
        ),
        sqs_check_group(SQSTarget(clients.sqs, settings.SQS_QUEUE_URL)),
    )


__all__ = [
    "CATALOG",
    "DynamoDBTarget",
    "S3Target",
    "SQSTarget",
    "build_check_groups",
    "dynamodb_check_group",
    "s3_check_group",
    "sqs_check_group",
]
