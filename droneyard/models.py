# droneyard/models.py
import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Positional command baked into the Batch job definition. ``Ref::`` placeholders
# are filled from the submission parameters; the worker's /entry.sh reads them
# in this order.
COMMAND_TEMPLATE = ("sh", "-c", "/entry.sh", "Ref::bucket", "Ref::key", "output")

JOB_NAME_PREFIX = "droneyard-"
JOB_NAME_MAX_LENGTH = 128
_JOB_NAME_INVALID = re.compile(r"[^A-Za-z0-9_-]")


class JobStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    PENDING = "PENDING"
    RUNNABLE = "RUNNABLE"
    STARTING = "STARTING"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


# States forwarded by the job state change rule
NOTIFIED_STATUSES = (
    JobStatus.FAILED,
    JobStatus.STARTING,
    JobStatus.SUBMITTED,
    JobStatus.SUCCEEDED,
)


class UploadEvent(BaseModel):
    """One ``ObjectCreated`` record from an S3 bucket notification."""

    model_config = ConfigDict(frozen=True)

    bucket: str
    key: str

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "UploadEvent":
        s3 = record["s3"]
        return cls(bucket=s3["bucket"]["name"], key=s3["object"]["key"])

    @classmethod
    def from_notification(cls, event: Dict[str, Any]) -> List["UploadEvent"]:
        return [cls.from_record(record) for record in event["Records"]]


def job_name_for(key: str) -> str:
    name = JOB_NAME_PREFIX + _JOB_NAME_INVALID.sub("-", key)
    return name[:JOB_NAME_MAX_LENGTH]


def render_command(bucket: str, key: str) -> List[str]:
    """The command line the worker receives for a (bucket, key) submission."""
    values = {"Ref::bucket": bucket, "Ref::key": key}
    return [values.get(part, part) for part in COMMAND_TEMPLATE]


class JobSubmission(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_name: str
    job_definition: str
    job_queue: str
    bucket: str
    key: str
    timeout_seconds: Optional[int] = None

    @classmethod
    def for_upload(
        cls,
        upload: UploadEvent,
        *,
        job_definition: str,
        job_queue: str,
        timeout_seconds: Optional[int] = None,
    ) -> "JobSubmission":
        return cls(
            job_name=job_name_for(upload.key),
            job_definition=job_definition,
            job_queue=job_queue,
            bucket=upload.bucket,
            key=upload.key,
            timeout_seconds=timeout_seconds,
        )

    @property
    def parameters(self) -> Dict[str, str]:
        return {"bucket": self.bucket, "key": self.key}

    def to_request(self) -> Dict[str, Any]:
        """Keyword arguments for ``batch.submit_job``."""
        request: Dict[str, Any] = {
            "jobName": self.job_name,
            "jobQueue": self.job_queue,
            "jobDefinition": self.job_definition,
            "parameters": self.parameters,
        }
        if self.timeout_seconds:
            request["timeout"] = {"attemptDurationSeconds": self.timeout_seconds}
        return request


class LifecycleEvent(BaseModel):
    """A ``Batch Job State Change`` event as forwarded by EventBridge."""

    model_config = ConfigDict(frozen=True)

    status: Optional[str] = None
    bucket: str
    key: str
    job_id: Optional[str] = None
    job_name: Optional[str] = None

    @classmethod
    def from_event(cls, event: Dict[str, Any]) -> "LifecycleEvent":
        detail = event["detail"]
        parameters = detail["parameters"]
        return cls(
            status=detail.get("status"),
            bucket=parameters["bucket"],
            key=parameters["key"],
            job_id=detail.get("jobId"),
            job_name=detail.get("jobName"),
        )


class Notification(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: Optional[str] = Field(default=None, description="None when the job status was absent")
    message: str
    topic: str

    def to_request(self) -> Dict[str, Any]:
        """Keyword arguments for ``sns.publish``; SNS rejects a null Subject so it is left out."""
        request = {"TopicArn": self.topic, "Message": self.message}
        if self.subject is not None:
            request["Subject"] = self.subject
        return request
