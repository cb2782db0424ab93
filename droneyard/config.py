# droneyard/config.py
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised when a handler needs a setting that was not provided."""


class Settings(BaseSettings):
    """
    Process-wide configuration, read once from the environment.
    Each Lambda only needs its own identifiers; the rest stay optional.
    """

    # ------------------------------------------------------------
    # Dispatch (AWS Batch)
    # ------------------------------------------------------------
    JOB_DEFINITION: Optional[str] = None
    JOB_QUEUE: Optional[str] = None
    JOB_TIMEOUT_HOURS: int = Field(
        default=24,
        ge=1,
        description="Ceiling on a single job attempt, sent as attemptDurationSeconds",
    )

    # ------------------------------------------------------------
    # Notifications (SNS)
    # ------------------------------------------------------------
    SNS_ARN: Optional[str] = None

    # ------------------------------------------------------------
    # Storage (S3)
    # ------------------------------------------------------------
    BUCKET_NAME: Optional[str] = None
    TRIGGER_SUFFIX: str = Field(
        default="dispatch",
        min_length=1,
        description="Objects whose key ends with this suffix start a job",
    )

    # ------------------------------------------------------------
    # AWS Core
    # ------------------------------------------------------------
    AWS_REGION: Optional[str] = None
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_SESSION_TOKEN: Optional[str] = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    @property
    def JOB_TIMEOUT_SECONDS(self) -> int:
        return self.JOB_TIMEOUT_HOURS * 3600

    def require(self, name: str) -> str:
        value = getattr(self, name)
        if not value:
            raise ConfigurationError(f"{name} is not configured")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
