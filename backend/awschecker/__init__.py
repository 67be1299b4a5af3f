"""aws-checker: availability prober for S3, DynamoDB and SQS."""

__version__ = "0.1.0"
