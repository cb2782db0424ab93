# droneyard/sns_handler.py
import json
import logging
import re
from typing import Any, Dict, Optional

import botocore.exceptions

from droneyard.aws_clients import get_sns_client
from droneyard.config import Settings, get_settings
from droneyard.models import LifecycleEvent, Notification

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# ASCII word starts only; non-ASCII letters are left as they are
_WORD = re.compile(r"\w\S*", re.ASCII)


def to_title_case(text: Optional[str]) -> Optional[str]:
    """Upper-case the first character of each word and lower-case the rest.

    ``None`` passes through unchanged.
    """
    if text is None:
        return None
    return _WORD.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), text)


def format_subject(status: Optional[str]) -> Optional[str]:
    title = to_title_case(status)
    if title is None:
        return None
    return f"Job {title}"


def format_message(bucket: str, key: str) -> str:
    return f"Job Source: {bucket}/{key}"


def build_notification(lifecycle: LifecycleEvent, settings: Settings) -> Notification:
    return Notification(
        subject=format_subject(lifecycle.status),
        message=format_message(lifecycle.bucket, lifecycle.key),
        topic=settings.require("SNS_ARN"),
    )


def publish(sns, notification: Notification) -> str:
    """Publish one notification and return the SNS message id. Failures propagate."""
    try:
        response = sns.publish(**notification.to_request())
    except botocore.exceptions.ClientError as e:
        logger.error(f"❌ SNS publish to {notification.topic} failed: {e.response['Error']['Code']}")
        raise
    logger.info(f"✅ Published '{notification.subject}' as {response['MessageId']}")
    return response["MessageId"]


def notify(event: Dict[str, Any], settings: Settings, sns) -> str:
    lifecycle = LifecycleEvent.from_event(event)
    if lifecycle.status is None:
        logger.warning(f"Job state change for {lifecycle.job_id} carries no status")
    return publish(sns, build_notification(lifecycle, settings))


def lambda_handler(event, context):
    settings = get_settings()
    logger.setLevel(settings.LOG_LEVEL)
    logger.info(f"📥 Event received: {json.dumps(event, default=str)}")

    message_id = notify(event, settings, get_sns_client())

    return {
        'statusCode': 200,
        'body': json.dumps({
            'message': '✅ Notification published',
            'messageId': message_id,
        })
    }
