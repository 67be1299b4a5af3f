"""boto3 client construction."""

from awschecker.aws.clients import AwsClients, build_clients

__all__ = ["AwsClients", "build_clients"]
