"""Pytest configuration and fixtures for asg-dns-handler tests."""

import os
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws

EXAMPLE_AMI_ID = "ami-12c6146b"
ZONE_NAME = "example.com"


@pytest.fixture(autouse=True)
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def mock_ec2():
    """Mock EC2 client."""
    with mock_aws():
        yield boto3.client("ec2", region_name="us-east-1")


@pytest.fixture
def mock_route53():
    """Mock Route53 client with an example.com hosted zone."""
    with mock_aws():
        client = boto3.client("route53", region_name="us-east-1")
        zone = client.create_hosted_zone(Name=ZONE_NAME, CallerReference="test")
        zone_id = zone["HostedZone"]["Id"].split("/")[-1]
        yield client, zone_id


@pytest.fixture
def mock_aws_env():
    """EC2 and Route53 sharing one moto backend, plus a stub Auto Scaling client."""
    with mock_aws():
        ec2 = boto3.client("ec2", region_name="us-east-1")
        route53 = boto3.client("route53", region_name="us-east-1")
        zone = route53.create_hosted_zone(Name=ZONE_NAME, CallerReference="test")
        zone_id = zone["HostedZone"]["Id"].split("/")[-1]

        autoscaling = MagicMock()
        autoscaling.describe_tags.return_value = {"Tags": []}
        autoscaling.complete_lifecycle_action.return_value = {}
        yield {
            "ec2": ec2,
            "route53": route53,
            "autoscaling": autoscaling,
            "zone_id": zone_id,
        }


def _run_instance(ec2_client, tags=None) -> str:
    """Launch a moto instance and return its ID."""
    kwargs = {"ImageId": EXAMPLE_AMI_ID, "MinCount": 1, "MaxCount": 1}
    if tags:
        kwargs["TagSpecifications"] = [
            {
                "ResourceType": "instance",
                "Tags": [{"Key": key, "Value": value} for key, value in tags.items()],
            }
        ]
    response = ec2_client.run_instances(**kwargs)
    return response["Instances"][0]["InstanceId"]


def _lifecycle_message(transition: str, instance_id: str, **overrides):
    """Build an Auto Scaling lifecycle notification."""
    message = {
        "Origin": "EC2",
        "Destination": "AutoScalingGroup",
        "LifecycleTransition": f"autoscaling:EC2_INSTANCE_{transition}",
        "AutoScalingGroupName": "asg-test",
        "EC2InstanceId": instance_id,
        "LifecycleActionToken": "71514b9d-6a40-4b26-8523-05e7ee35fa40",
        "LifecycleHookName": f"asg-test-{transition.lower()}",
        "Service": "AWS Auto Scaling",
        "AccountId": "123456789012",
        "RequestId": "63f5b5c2-58b3-0574-b7d5-b3162d0268f0",
    }
    message.update(overrides)
    return message


@pytest.fixture
def run_instance():
    """Factory launching moto instances."""
    return _run_instance


@pytest.fixture
def lifecycle_message():
    """Factory building lifecycle notifications."""
    return _lifecycle_message
