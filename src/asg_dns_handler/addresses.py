"""Address resolution for launching and terminating instances."""
from __future__ import annotations

import logging
from typing import Any, FrozenSet, TYPE_CHECKING

from .compute import describe_instance
from .dns import Route53RecordManager
from .hostname import ResolvedHostname
from .utils import AddressUnavailableError

if TYPE_CHECKING:  # pragma: no cover
    from mypy_boto3_ec2.client import EC2Client
else:
    EC2Client = Any

_logger = logging.getLogger(__name__)


def fetch_instance_address(ec2_client: EC2Client, instance_id: str, use_public_ip: bool = False) -> str:
    """Return the private (or public) IPv4 address of an instance.

    Raises:
        AddressUnavailableError: If the instance has no such address yet.
    """
    instance = describe_instance(ec2_client, instance_id)
    key = "PublicIpAddress" if use_public_ip else "PrivateIpAddress"
    address = instance.get(key)
    if not address:
        raise AddressUnavailableError(f"instance {instance_id} has no {key} yet")
    _logger.info("found %s %s for %s", key, address, instance_id)
    return address


def resolve_terminate_addresses(
    dns: Route53RecordManager,
    hostname: ResolvedHostname,
    *,
    ec2_client: EC2Client,
    instance_id: str,
    per_instance: bool,
    use_public_ip: bool = False,
) -> FrozenSet[str]:
    """Return the addresses a terminating instance should release.

    An absent record yields an empty set: a previous delivery already removed
    it. A per-instance record belongs to this instance alone, so all of its
    addresses go; a shared record only loses this instance's address.
    """
    record = dns.get_record(hostname.fqdn, hostname.zone_id)
    if record is None:
        _logger.info("no record for %s; terminate already complete", hostname.fqdn)
        return frozenset()
    if per_instance:
        return record.addresses
    try:
        address = fetch_instance_address(ec2_client, instance_id, use_public_ip)
    except AddressUnavailableError as exc:
        # EC2 drops the IP once the instance is terminated; a redelivery then
        # has nothing left to release.
        _logger.info("%s; treating %s as already released from %s", exc, instance_id, hostname.fqdn)
        return frozenset()
    return frozenset({address})
