#!/usr/bin/env python3
"""
AWS Session Module
Resolves credentials, region and account for the Lambda cost report.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import load_dotenv

from .exceptions import SetupError


def _resolve_env_path(env_path: Optional[str] = None) -> str:
    """
    Determine which .env file should be used for AWS credentials.

    Priority order:
      1. Explicit parameter
      2. AWS_ENV_FILE environment variable
      3. ~/.env
    """
    if env_path:
        return env_path
    aws_env_file = os.environ.get("AWS_ENV_FILE")
    if aws_env_file:
        return aws_env_file
    return str(Path.home() / ".env")


def load_credentials_from_env(env_path: Optional[str] = None) -> bool:
    """
    Load AWS credentials from a .env file into the environment.

    Missing files are not an error: boto3's default credential chain
    (profiles, SSO, instance roles) is used instead.

    Returns:
        bool: True if the .env file supplied an access key pair
    """
    resolved_path = _resolve_env_path(env_path)
    load_dotenv(resolved_path)

    if os.getenv("AWS_ACCESS_KEY_ID") and os.getenv("AWS_SECRET_ACCESS_KEY"):
        logging.info("✅ AWS credentials loaded from %s", resolved_path)
        return True
    logging.info("No credentials in %s, using the default AWS credential chain", resolved_path)
    return False


def create_session(region: Optional[str] = None, env_path: Optional[str] = None):
    """
    Create a boto3 session for the report.

    Args:
        region: Region override from the command line (optional)
        env_path: Optional .env override path (used mainly for tests)

    Returns:
        boto3.Session: Session with credentials and a region

    Raises:
        SetupError: If no credentials or no region can be resolved
    """
    load_credentials_from_env(env_path)
    try:
        session = boto3.Session(region_name=region or None)
        credentials = session.get_credentials()
    except BotoCoreError as exc:
        raise SetupError(f"could not load AWS config: {exc}") from exc
    if credentials is None:
        raise SetupError("could not load AWS config: no credentials found")
    if not session.region_name:
        raise SetupError(
            "AWS region not set. Supply --region, set $AWS_REGION, "
            "or configure a default region in the AWS CLI."
        )
    return session


def get_account_id(session) -> str:
    """
    Look up the account the session's credentials belong to.

    Raises:
        SetupError: If the STS call fails
    """
    try:
        identity = session.client("sts").get_caller_identity()
    except (ClientError, BotoCoreError) as exc:
        raise SetupError(f"could not get current identity, are you logged in? {exc}") from exc
    return identity["Account"]


if __name__ == "__main__":  # pragma: no cover - script entry point
    pass
