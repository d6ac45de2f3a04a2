"""Common utilities for the ASG DNS handler."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

import boto3
from botocore.client import BaseClient


def get_ec2_client() -> BaseClient:
    """Get an EC2 client."""
    return boto3.client('ec2')


def get_route53_client() -> BaseClient:
    """Get a Route53 client."""
    return boto3.client('route53')


def get_autoscaling_client() -> BaseClient:
    """Get an Auto Scaling client."""
    return boto3.client('autoscaling')


def get_tag_value(tags: List[Dict[str, str]], key: str) -> str:
    """Extract a tag value from a list of tags.

    Args:
        tags: List of tag dictionaries with 'Key' and 'Value' keys
        key: Tag key to look up

    Returns:
        The tag value, or empty string if not found
    """
    if not tags:
        return ""
    return next((t.get('Value', '') for t in tags if t.get('Key') == key), "")


def get_utc_now() -> datetime:
    """Get the current UTC datetime.

    Returns:
        Current datetime in UTC timezone
    """
    return datetime.now(timezone.utc)


class AsgDnsError(Exception):
    """Base exception for ASG DNS handler operations."""
    pass


class MalformedPatternError(AsgDnsError):
    """Raised when the hostname pattern tag is missing or cannot be parsed."""
    pass


class MalformedEventError(AsgDnsError):
    """Raised when a lifecycle notification lacks a required field."""
    pass


class UnknownTransitionError(AsgDnsError):
    """Raised for a LifecycleTransition that is neither launching nor terminating."""
    pass


class AddressUnavailableError(AsgDnsError):
    """Raised when the instance has no usable IP address yet."""
    pass


class AWSClientError(AsgDnsError):
    """Raised when an AWS API call fails."""
    def __init__(self, message: str, error_code: Optional[str] = None,
                 original_exception: Optional[Exception] = None):
        self.error_code = error_code
        self.original_exception = original_exception
        super().__init__(message)


class ComputeApiError(AWSClientError):
    """Raised when an EC2 or Auto Scaling read fails."""
    pass


class DnsApiError(AWSClientError):
    """Raised when a Route53 call fails."""
    pass


class TagWriteError(AWSClientError):
    """Raised when the instance Name tag cannot be written."""
    pass


def error_code(exc: Exception) -> Optional[str]:
    """Return the AWS error code carried by a botocore ClientError, if any."""
    response = getattr(exc, "response", None) or {}
    return response.get("Error", {}).get("Code")
