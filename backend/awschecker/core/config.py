"""Process configuration.

Targets and tuning knobs are read once from the environment at startup.
Settings are immutable afterwards; the checker receives them already
resolved.
"""

from functools import cache
from typing import Any, Literal, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StartupError(Exception):
    """Hard error raised when the prober cannot be configured."""


class Settings(BaseSettings):
    """Environment-backed settings for aws-checker.

    Attributes:
        S3_BUCKET: Bucket holding the probe object.
        S3_KEY: Key of the probe object.
        DYNAMODB_TABLE: Table with a string hash key named ``id``.
        DYNAMODB_ITEM_ID: Hash key of the item the checker writes and reads.
        SQS_QUEUE_URL: Queue polled by the checker.
        AWS_REGION: Region override; the SDK default chain applies when unset.
        AWS_ENDPOINT_URL: Endpoint override for every client (e.g. LocalStack).
        CHECK_INTERVAL: Seconds between the end of a cycle and the next one.
        AWS_API_CALL_INTERVAL: Seconds between consecutive steps of one chain.
        AWS_CONNECT_TIMEOUT: SDK connect timeout in seconds.
        AWS_READ_TIMEOUT: SDK read timeout in seconds.
        METRICS_HOST: Bind address of the /metrics server.
        METRICS_PORT: Bind port of the /metrics server.
        SHUTDOWN_TIMEOUT: Grace period for stopping the /metrics server.
        LOG_LEVEL: Level of the application logger (case-insensitive).
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    S3_BUCKET: str
    S3_KEY: str
    DYNAMODB_TABLE: str
    DYNAMODB_ITEM_ID: str = "aws-checker"
    SQS_QUEUE_URL: str

    AWS_REGION: Optional[str] = None
    AWS_ENDPOINT_URL: Optional[str] = None

    CHECK_INTERVAL: float = Field(default=1.0, gt=0)
    AWS_API_CALL_INTERVAL: float = Field(default=1.0, ge=0)
    AWS_CONNECT_TIMEOUT: float = Field(default=5.0, gt=0)
    AWS_READ_TIMEOUT: float = Field(default=5.0, gt=0)

    METRICS_HOST: str = "0.0.0.0"
    METRICS_PORT: int = Field(default=8080, ge=0, le=65535)
    SHUTDOWN_TIMEOUT: float = Field(default=5.0, gt=0)

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


@cache
def get_settings() -> Settings:
    """Load settings from the environment.

    Raises:
        StartupError: If a required variable is missing or a value is invalid.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise StartupError(f"invalid configuration: {e}") from e
