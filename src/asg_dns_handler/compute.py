"""EC2 and Auto Scaling lookups plus the instance Name tag writer."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, TYPE_CHECKING

from botocore.exceptions import BotoCoreError, ClientError

from .pattern import HOSTNAME_PATTERN_TAG
from .utils import (
    AddressUnavailableError,
    ComputeApiError,
    MalformedPatternError,
    TagWriteError,
    error_code,
    get_tag_value,
)

if TYPE_CHECKING:  # pragma: no cover
    from mypy_boto3_autoscaling.client import AutoScalingClient
    from mypy_boto3_ec2.client import EC2Client
else:
    AutoScalingClient = Any
    EC2Client = Any

_logger = logging.getLogger(__name__)

NAME_TAG = "Name"


def describe_instance(ec2_client: EC2Client, instance_id: str) -> Dict[str, Any]:
    """Return the EC2 description of ``instance_id``.

    Raises:
        AddressUnavailableError: If EC2 does not know the instance yet.
        ComputeApiError: For any other EC2 failure.
    """
    try:
        response = ec2_client.describe_instances(InstanceIds=[instance_id])
    except ClientError as exc:
        if error_code(exc) == "InvalidInstanceID.NotFound":
            raise AddressUnavailableError(f"instance {instance_id} not found") from exc
        _logger.error("unable to describe instance %s: %s", instance_id, exc)
        raise ComputeApiError(str(exc), error_code(exc), exc) from exc
    except BotoCoreError as exc:
        _logger.error("unable to describe instance %s: %s", instance_id, exc)
        raise ComputeApiError(str(exc), None, exc) from exc

    for reservation in response.get("Reservations", []):
        for instance in reservation.get("Instances", []):
            if instance.get("InstanceId", instance_id) == instance_id:
                return instance
    raise AddressUnavailableError(f"instance {instance_id} not found")


def _pattern_from_asg(autoscaling_client: AutoScalingClient, asg_name: str) -> Optional[str]:
    try:
        response = autoscaling_client.describe_tags(
            Filters=[
                {"Name": "auto-scaling-group", "Values": [asg_name]},
                {"Name": "key", "Values": [HOSTNAME_PATTERN_TAG]},
            ],
        )
    except (ClientError, BotoCoreError) as exc:
        _logger.error("unable to read tags of ASG %s: %s", asg_name, exc)
        raise ComputeApiError(str(exc), error_code(exc), exc) from exc
    value = get_tag_value(response.get("Tags", []), HOSTNAME_PATTERN_TAG).strip()
    return value or None


def fetch_hostname_pattern(
    ec2_client: EC2Client,
    autoscaling_client: AutoScalingClient,
    instance_id: str,
    asg_name: str,
) -> str:
    """Read the hostname pattern tag, preferring the instance over the ASG.

    Instance tags can already be gone while the instance terminates, so the
    group's own tag is the fallback.
    """
    try:
        instance = describe_instance(ec2_client, instance_id)
    except AddressUnavailableError:
        instance = {}

    value = get_tag_value(instance.get("Tags", []), HOSTNAME_PATTERN_TAG).strip()
    if value:
        return value

    value = _pattern_from_asg(autoscaling_client, asg_name)
    if value:
        _logger.info("using %s from ASG %s", HOSTNAME_PATTERN_TAG, asg_name)
        return value

    raise MalformedPatternError(
        f"no {HOSTNAME_PATTERN_TAG} tag on instance {instance_id} or ASG {asg_name}"
    )


def write_name_tag(ec2_client: EC2Client, instance_id: str, name: str) -> None:
    """Set the instance Name tag.

    Raises:
        TagWriteError: If EC2 rejects the tag write.
    """
    try:
        ec2_client.create_tags(
            Resources=[instance_id],
            Tags=[{"Key": NAME_TAG, "Value": name}],
        )
    except (ClientError, BotoCoreError) as exc:
        raise TagWriteError(str(exc), error_code(exc), exc) from exc
    _logger.info("tagged %s with %s=%s", instance_id, NAME_TAG, name)
