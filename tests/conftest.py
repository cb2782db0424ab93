from unittest.mock import MagicMock

import pytest

from droneyard.config import Settings, get_settings

_ENV_VARS = (
    "JOB_DEFINITION",
    "JOB_QUEUE",
    "JOB_TIMEOUT_HOURS",
    "SNS_ARN",
    "BUCKET_NAME",
    "TRIGGER_SUFFIX",
    "AWS_REGION",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer machine configuration out of the tests.

    Tests that need a setting pass it explicitly or set it via monkeypatch.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        JOB_DEFINITION="DroneYardJobDefinition:3",
        JOB_QUEUE="DroneYardJobQueue",
        SNS_ARN="arn:aws:sns:ap-southeast-2:123456789012:droneyard-jobs",
        BUCKET_NAME="drone-photos",
    )


@pytest.fixture
def batch() -> MagicMock:
    client = MagicMock()
    client.submit_job.side_effect = lambda **kwargs: {
        "jobName": kwargs["jobName"],
        "jobId": f"job-{client.submit_job.call_count}",
    }
    return client


@pytest.fixture
def sns() -> MagicMock:
    client = MagicMock()
    client.publish.return_value = {"MessageId": "msg-1"}
    return client
