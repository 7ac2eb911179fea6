"""Shared AWS helpers for service clients."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from emoji_rpg.config.settings import AwsConfig


def create_boto3_client(
    service_name: str,
    aws: AwsConfig,
    *,
    timeout_seconds: float | None = None,
) -> Any:
    """Instantiate a boto3 client with the configured credentials.

    Automatic retries are disabled: every upstream call is tried once and
    the pipeline decides how to degrade.
    """

    config_kwargs: dict[str, Any] = {"retries": {"total_max_attempts": 1}}
    if timeout_seconds is not None:
        config_kwargs["connect_timeout"] = timeout_seconds
        config_kwargs["read_timeout"] = timeout_seconds

    return boto3.client(
        service_name,
        region_name=aws.region,
        aws_access_key_id=aws.access_key_id.get_secret_value(),
        aws_secret_access_key=aws.secret_access_key.get_secret_value(),
        config=Config(**config_kwargs),
    )


__all__ = ["create_boto3_client"]
