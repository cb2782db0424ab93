import pytest
from pydantic import ValidationError

from droneyard.models import (
    COMMAND_TEMPLATE,
    JOB_NAME_MAX_LENGTH,
    JobSubmission,
    LifecycleEvent,
    Notification,
    UploadEvent,
    job_name_for,
    render_command,
)
from tests.events import make_s3_record, make_state_change


def test_upload_event_from_record() -> None:
    upload = UploadEvent.from_record(make_s3_record("drone-photos", "site42/dispatch"))

    assert upload == UploadEvent(bucket="drone-photos", key="site42/dispatch")


def test_models_are_immutable() -> None:
    upload = UploadEvent(bucket="b", key="k")

    with pytest.raises(ValidationError):
        upload.key = "other"


def test_render_command_substitutes_positionally() -> None:
    assert render_command("drone-photos", "site42/dispatch") == [
        "sh", "-c", "/entry.sh", "drone-photos", "site42/dispatch", "output",
    ]
    assert len(render_command("b", "k")) == len(COMMAND_TEMPLATE)


def test_job_name_is_batch_safe() -> None:
    assert job_name_for("site 42/photos.dispatch") == "droneyard-site-42-photos-dispatch"
    assert len(job_name_for("x" * 500)) == JOB_NAME_MAX_LENGTH


def test_submission_without_timeout_omits_override() -> None:
    submission = JobSubmission.for_upload(
        UploadEvent(bucket="b", key="k"), job_definition="def", job_queue="q"
    )

    assert "timeout" not in submission.to_request()
    assert submission.parameters == {"bucket": "b", "key": "k"}


def test_lifecycle_event_reads_echoed_parameters() -> None:
    lifecycle = LifecycleEvent.from_event(make_state_change("STARTING", bucket="drone-photos", key="a/dispatch"))

    assert lifecycle.status == "STARTING"
    assert (lifecycle.bucket, lifecycle.key) == ("drone-photos", "a/dispatch")
    assert lifecycle.job_id == "4f1b0c1e"


def test_notification_request_keeps_subject_when_present() -> None:
    notification = Notification(subject="Job Failed", message="Job Source: b/k", topic="arn")

    assert notification.to_request() == {"TopicArn": "arn", "Message": "Job Source: b/k", "Subject": "Job Failed"}
