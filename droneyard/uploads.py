# droneyard/uploads.py
"""
Operator-side S3 and Batch helpers.

A project is a key prefix holding the drone photos. Writing the trigger marker
(``<prefix>/<suffix>``) last is what starts processing.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Sequence, Tuple

import botocore.exceptions
import pandas as pd

from droneyard.models import JobStatus

logger = logging.getLogger(__name__)

JOB_COLUMNS = ["jobName", "jobId", "status", "createdAt", "statusReason"]


def check_file_exists(s3, bucket, key):
    try:
        s3.head_object(Bucket=bucket, Key=key)
        return True
    except botocore.exceptions.ClientError as e:
        if e.response['Error']['Code'] in ("404", "NoSuchKey", "NotFound"):
            return False
        else:
            raise


def project_prefix(name: str) -> str:
    prefix = name.strip().strip("/")
    if not prefix:
        raise ValueError("Project name must not be empty")
    return prefix


def upload_photos(s3, bucket: str, prefix: str, files: Iterable) -> Tuple[List[str], List[str]]:
    """Upload file-like objects (with a ``name``) under ``prefix``.

    Returns ``(uploaded, skipped)`` keys; objects already present are skipped.
    """
    uploaded, skipped = [], []
    for f in files:
        key = f"{prefix}/{f.name}"
        if check_file_exists(s3, bucket, key):
            logger.warning(f"⚠️ {key} already exists in {bucket}, skipping")
            skipped.append(key)
            continue
        s3.upload_fileobj(f, bucket, key)
        logger.info(f"✅ Uploaded {f.name} to s3://{bucket}/{key}")
        uploaded.append(key)
    return uploaded, skipped


def upload_messages(bucket: str, prefix: str, uploaded: List[str], skipped: List[str]) -> List[Tuple[str, str]]:
    """``(streamlit level, text)`` pairs summarising one upload batch."""
    messages = []
    if skipped:
        messages.append(("warning", f"⚠️ {len(skipped)} photo(s) already existed in `{bucket}`."))
    messages.append(("success", f"✅ {len(uploaded)} photo(s) uploaded to `{bucket}/{prefix}`"))
    return messages


def write_dispatch_marker(s3, bucket: str, prefix: str, suffix: str = "dispatch") -> str:
    """Write the empty marker object whose creation triggers the job."""
    if not suffix:
        raise ValueError("Trigger suffix must not be empty")
    key = f"{prefix}/{suffix}"
    stamp = datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')
    s3.put_object(Bucket=bucket, Key=key, Body=b"", Metadata={"dispatched-at": stamp})
    logger.info(f"🚀 Dispatch marker written to s3://{bucket}/{key}")
    return key


def list_jobs(batch, job_queue: str, statuses: Sequence[JobStatus] = tuple(JobStatus)) -> List[dict]:
    jobs = []
    paginator = batch.get_paginator("list_jobs")
    for status in statuses:
        for page in paginator.paginate(jobQueue=job_queue, jobStatus=JobStatus(status).value):
            jobs.extend(page.get("jobSummaryList", []))
    return jobs


def jobs_frame(jobs: List[dict]) -> pd.DataFrame:
    df = pd.DataFrame(jobs, columns=JOB_COLUMNS)
    if not df.empty:
        # Batch reports epoch milliseconds
        df["createdAt"] = pd.to_datetime(df["createdAt"], unit="ms", utc=True)
        df = df.sort_values("createdAt", ascending=False).reset_index(drop=True)
    return df
