# droneyard/aws_clients.py
"""
boto3 client factories.

Explicit credentials are only passed when configured; otherwise boto3 falls back
to its default chain (the Lambda execution role in production).
"""
import logging
from functools import lru_cache

import boto3
from botocore.config import Config

from droneyard.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Retries belong to the invoking event source, not to the handlers.
_NO_RETRY = Config(retries={"max_attempts": 1, "mode": "standard"})


def create_client(service_name: str, settings: Settings):
    """Build a boto3 client for ``service_name`` from the given settings."""
    kwargs = {"config": _NO_RETRY}
    if settings.AWS_REGION:
        kwargs["region_name"] = settings.AWS_REGION
    if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
        kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
        kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY
        kwargs["aws_session_token"] = settings.AWS_SESSION_TOKEN

    try:
        client = boto3.client(service_name, **kwargs)
    except Exception as e:
        logger.error(f"Failed to initialize {service_name} client: {e}")
        raise
    logger.info(f"{service_name} client initialized")
    return client


@lru_cache(maxsize=1)
def get_batch_client():
    return create_client("batch", get_settings())


@lru_cache(maxsize=1)
def get_sns_client():
    return create_client("sns", get_settings())


@lru_cache(maxsize=1)
def get_s3_client():
    return create_client("s3", get_settings())
