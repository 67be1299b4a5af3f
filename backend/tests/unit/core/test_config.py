"""Unit tests for settings loading."""

import pytest
from pydantic import ValidationError

from awschecker.core.config import Settings, StartupError, get_settings

_REQUIRED = {
    "S3_BUCKET": "bucket",
    "S3_KEY": "key",
    "DYNAMODB_TABLE": "table",
    "SQS_QUEUE_URL": "http://localhost:4566/000000000000/queue",
}


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Run from an empty directory (no .env) with no checker variables set."""
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestGetSettings:
    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch):
        for name, value in _REQUIRED.items():
            monkeypatch.setenv(name, value)
        monkeypatch.setenv("AWS_API_CALL_INTERVAL", "0.25")

        settings = get_settings()

        assert settings.S3_BUCKET == "bucket"
        assert settings.SQS_QUEUE_URL.endswith("/queue")
        assert settings.AWS_API_CALL_INTERVAL == 0.25

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch):
        for name, value in _REQUIRED.items():
            monkeypatch.setenv(name, value)

        settings = get_settings()

        assert settings.CHECK_INTERVAL == 1.0
        assert settings.METRICS_PORT == 8080
        assert settings.SHUTDOWN_TIMEOUT == 5.0
        assert settings.DYNAMODB_ITEM_ID == "aws-checker"
        assert settings.AWS_ENDPOINT_URL is None

    def test_reads_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text(
            "\n".join(f"{name}={value}" for name, value in _REQUIRED.items())
        )

        assert get_settings().DYNAMODB_TABLE == "table"

    def test_missing_required_is_startup_error(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("S3_BUCKET", "bucket")

        with pytest.raises(StartupError):
            get_settings()

    def test_result_is_cached(self, monkeypatch: pytest.MonkeyPatch):
        for name, value in _REQUIRED.items():
            monkeypatch.setenv(name, value)

        assert get_settings() is get_settings()


class TestSettingsValidation:
    @pytest.mark.parametrize(
        "field,value",
        [
            ("CHECK_INTERVAL", 0),
            ("AWS_API_CALL_INTERVAL", -1),
            ("SHUTDOWN_TIMEOUT", 0),
            ("METRICS_PORT", 70000),
        ],
    )
    def test_rejects_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**_REQUIRED, **{field: value})

    def test_zero_api_call_interval_allowed(self):
        assert Settings(**_REQUIRED, AWS_API_CALL_INTERVAL=0).AWS_API_CALL_INTERVAL == 0

    def test_log_level_is_case_insensitive(self):
        assert Settings(**_REQUIRED, LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            Settings(**_REQUIRED, LOG_LEVEL="verbose")

    def test_unknown_log_level_is_startup_error(self, monkeypatch: pytest.MonkeyPatch):
        for name, value in _REQUIRED.items():
            monkeypatch.setenv(name, value)
        monkeypatch.setenv("LOG_LEVEL", "verbose")

        with pytest.raises(StartupError):
            get_settings()
