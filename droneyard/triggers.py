# droneyard/triggers.py
"""
Trigger definitions for the two event channels.

* the S3 bucket notification that invokes the dispatch Lambda for keys ending
  in the trigger suffix
* the EventBridge rule that forwards Batch job state changes for one bucket to
  the notification Lambda

Both filters run upstream of the handlers. The matchers here evaluate the same
definitions locally so the routing contract can be checked without AWS.
"""
from typing import Any, Dict, Iterable

from droneyard.models import NOTIFIED_STATUSES

BATCH_EVENT_SOURCE = "aws.batch"
BATCH_STATE_CHANGE = "Batch Job State Change"


def bucket_notification_configuration(function_arn: str, suffix: str = "dispatch") -> Dict[str, Any]:
    """Body for ``s3.put_bucket_notification_configuration``."""
    return {
        "LambdaFunctionConfigurations": [
            {
                "LambdaFunctionArn": function_arn,
                "Events": ["s3:ObjectCreated:*"],
                "Filter": {
                    "Key": {
                        "FilterRules": [{"Name": "suffix", "Value": suffix}]
                    }
                },
            }
        ]
    }


def job_state_change_pattern(bucket: str, source: str = BATCH_EVENT_SOURCE) -> Dict[str, Any]:
    """EventBridge pattern for job state changes of jobs submitted for ``bucket``."""
    return {
        "source": [source],
        "detail-type": [BATCH_STATE_CHANGE],
        "detail": {
            "parameters": {"bucket": [bucket]},
            "status": [status.value for status in NOTIFIED_STATUSES],
        },
    }


def key_matches_suffix(key: str, suffix: str) -> bool:
    return key.endswith(suffix)


def notification_suffix(configuration: Dict[str, Any]) -> str:
    rules = configuration["LambdaFunctionConfigurations"][0]["Filter"]["Key"]["FilterRules"]
    return next(rule["Value"] for rule in rules if rule["Name"] == "suffix")


def record_matches_configuration(record: Dict[str, Any], configuration: Dict[str, Any]) -> bool:
    """Whether S3 would deliver ``record`` to the configured function."""
    if not record.get("eventName", "").startswith("ObjectCreated:"):
        return False
    return key_matches_suffix(record["s3"]["object"]["key"], notification_suffix(configuration))


def event_matches_pattern(event: Dict[str, Any], pattern: Dict[str, Any]) -> bool:
    """Exact-value subset of EventBridge matching: nested fields and value lists."""
    for field, expected in pattern.items():
        if field not in event:
            return False
        actual = event[field]
        if isinstance(expected, dict):
            if not isinstance(actual, dict) or not event_matches_pattern(actual, expected):
                return False
        elif not _value_matches(actual, expected):
            return False
    return True


def _value_matches(actual: Any, allowed: Iterable[Any]) -> bool:
    if isinstance(actual, list):
        return any(item in allowed for item in actual)
    return actual in allowed
