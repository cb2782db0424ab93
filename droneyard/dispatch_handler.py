# droneyard/dispatch_handler.py
import json
import logging
from typing import Any, Dict, List

import botocore.exceptions

from droneyard.aws_clients import get_batch_client
from droneyard.config import Settings, get_settings
from droneyard.models import JobSubmission, UploadEvent

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_submission(upload: UploadEvent, settings: Settings) -> JobSubmission:
    return JobSubmission.for_upload(
        upload,
        job_definition=settings.require("JOB_DEFINITION"),
        job_queue=settings.require("JOB_QUEUE"),
        timeout_seconds=settings.JOB_TIMEOUT_SECONDS,
    )


def submit_job(batch, submission: JobSubmission) -> str:
    """Submit one job and return its Batch job id. Failures propagate to the caller."""
    logger.info(
        f"📤 Submitting {submission.job_name} to {submission.job_queue} "
        f"for s3://{submission.bucket}/{submission.key}"
    )
    try:
        response = batch.submit_job(**submission.to_request())
    except botocore.exceptions.ClientError as e:
        logger.error(f"❌ Batch rejected {submission.job_name}: {e.response['Error']['Code']}")
        raise
    logger.info(f"✅ Submitted {response['jobName']} as {response['jobId']}")
    return response["jobId"]


def dispatch(event: Dict[str, Any], settings: Settings, batch) -> List[str]:
    """Submit exactly one job per upload record in the S3 notification.

    Redelivered notifications are submitted again; there is no deduplication.
    """
    uploads = UploadEvent.from_notification(event)
    return [submit_job(batch, build_submission(upload, settings)) for upload in uploads]


def lambda_handler(event, context):
    settings = get_settings()
    logger.setLevel(settings.LOG_LEVEL)
    logger.info(f"📥 Event received: {json.dumps(event, default=str)}")

    job_ids = dispatch(event, settings, get_batch_client())

    return {
        'statusCode': 200,
        'body': json.dumps({
            'message': '✅ Batch job submitted',
            'jobIds': job_ids,
        })
    }
