"""AWS session and caller identity helpers."""

from __future__ import annotations

import logging
import os

import boto3
from botocore.exceptions import BotoCoreError, ClientError, ProfileNotFound

from ssm_document.core.errors import ConfigError
from ssm_document.core.logging import get_logger

logger = get_logger(__name__)

DEBUG_ENV = "AWS_DEBUG"


def create_session(profile: str | None = None, region: str | None = None) -> boto3.Session:
    """Create a boto3 session for the given profile and region.

    When ``AWS_DEBUG`` is set, botocore wire-level debug logs are streamed to
    stderr.
    """
    if os.environ.get(DEBUG_ENV):
        boto3.set_stream_logger("botocore", logging.DEBUG)

    try:
        return boto3.Session(
            profile_name=profile or None,
            region_name=region or None,
        )
    except ProfileNotFound as e:
        raise ConfigError(f"AWS profile {profile} not found", cause=e)


def get_caller_account_id(session: boto3.Session) -> str | None:
    """Return the caller's account id, or ``None`` without valid credentials."""
    try:
        identity = session.client("sts").get_caller_identity()
    except (BotoCoreError, ClientError) as e:
        logger.debug("session.identity_unavailable", error=str(e))
        return None
    return identity.get("Account")


def get_caller_region(session: boto3.Session) -> str | None:
    return session.region_name
