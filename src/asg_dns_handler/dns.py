"""Route53 A-record management for ASG hostnames."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Optional, TYPE_CHECKING

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .utils import DnsApiError, error_code

if TYPE_CHECKING:  # pragma: no cover
    from mypy_boto3_route53.client import Route53Client
else:
    Route53Client = Any

DEFAULT_TTL = 300
RECORD_TYPE = "A"
LOG = logging.getLogger(__name__)


@dataclass
class DNSRecord:
    """Represents a DNS A record and its address set."""

    name: str
    zone_id: str
    ttl: int = DEFAULT_TTL
    addresses: FrozenSet[str] = field(default_factory=frozenset)
    type: str = RECORD_TYPE


def normalize_zone_id(zone_id: str) -> str:
    """Strip the ``/hostedzone/`` prefix Route53 sometimes returns."""
    return zone_id.strip().rsplit("/", 1)[-1]


def _normalize_name(name: str) -> str:
    return name.strip().rstrip(".").lower()


class Route53RecordManager:
    """Idempotent create/merge/delete of A records in Route53.

    Every write replaces the whole record set, so each operation re-reads the
    current addresses right before writing. Concurrent writers against the
    same shared name can still lose an update; nothing here locks across
    invocations.
    """

    def __init__(
        self,
        client: Optional[Route53Client] = None,
        ttl: int = DEFAULT_TTL,
    ) -> None:
        self.client = client or boto3.client("route53")
        self.ttl = ttl

    def get_record(self, fqdn: str, zone_id: str) -> Optional[DNSRecord]:
        """Return the A record named ``fqdn`` or None if absent."""
        zone_id = normalize_zone_id(zone_id)
        try:
            resp = self.client.list_resource_record_sets(
                HostedZoneId=zone_id,
                StartRecordName=fqdn,
                StartRecordType=RECORD_TYPE,
                MaxItems="1",
            )
        except (ClientError, BotoCoreError) as exc:
            LOG.error("Route53 get_record failed for %s: %s", fqdn, exc)
            raise DnsApiError(str(exc), error_code(exc), exc) from exc

        for record in resp.get("ResourceRecordSets", []):
            if _normalize_name(record.get("Name", "")) != _normalize_name(fqdn):
                continue
            if record.get("Type") != RECORD_TYPE:
                continue
            values = frozenset(
                value["Value"] for value in record.get("ResourceRecords", []) if value.get("Value")
            )
            return DNSRecord(
                name=fqdn,
                zone_id=zone_id,
                ttl=record.get("TTL", self.ttl),
                addresses=values,
            )
        return None

    def _change(self, action: str, record: DNSRecord, comment: str) -> None:
        self.client.change_resource_record_sets(
            HostedZoneId=record.zone_id,
            ChangeBatch={
                "Comment": comment,
                "Changes": [
                    {
                        "Action": action,
                        "ResourceRecordSet": {
                            "Name": record.name,
                            "Type": record.type,
                            "TTL": record.ttl,
                            "ResourceRecords": [
                                {"Value": address} for address in sorted(record.addresses)
                            ],
                        },
                    }
                ],
            },
        )

    def _write(self, fqdn: str, zone_id: str, addresses: Iterable[str], comment: str) -> DNSRecord:
        record = DNSRecord(
            name=fqdn,
            zone_id=normalize_zone_id(zone_id),
            ttl=self.ttl,
            addresses=frozenset(addresses),
        )
        try:
            self._change("UPSERT", record, comment)
        except (ClientError, BotoCoreError) as exc:
            LOG.error("Route53 UPSERT failed for %s: %s", fqdn, exc)
            raise DnsApiError(str(exc), error_code(exc), exc) from exc
        return record

    def upsert(self, fqdn: str, zone_id: str, address: str, merge: bool = True) -> DNSRecord:
        """Bind ``address`` to ``fqdn``.

        With ``merge`` the address joins any addresses already in the record;
        otherwise the record is replaced by ``{address}``. A record that
        already holds exactly the wanted set is left untouched.
        """
        current = self.get_record(fqdn, zone_id)
        existing = current.addresses if current else frozenset()
        wanted = existing | {address} if merge else frozenset({address})

        if current and wanted == existing:
            LOG.info("%s already bound to %s; nothing to write", fqdn, address)
            return current

        record = self._write(fqdn, zone_id, wanted, f"Bind {address} to {fqdn}")
        LOG.info("upserted %s -> %s", fqdn, ", ".join(sorted(record.addresses)))
        return record

    def remove(self, fqdn: str, zone_id: str, address: str) -> bool:
        """Unbind ``address`` from ``fqdn``.

        Deletes the record once its last address goes. Returns False when the
        record or the address was already gone.
        """
        current = self.get_record(fqdn, zone_id)
        if not current or address not in current.addresses:
            LOG.info("%s not bound to %s; nothing to remove", fqdn, address)
            return False

        remaining = current.addresses - {address}
        if remaining:
            self._write(fqdn, zone_id, remaining, f"Unbind {address} from {fqdn}")
            LOG.info("removed %s from %s; %d address(es) remain", address, fqdn, len(remaining))
            return True

        try:
            self._change("DELETE", current, f"Delete {fqdn}")
        except ClientError as exc:
            if error_code(exc) == "InvalidChangeBatch" and self.get_record(fqdn, zone_id) is None:
                LOG.warning("%s was deleted concurrently", fqdn)
                return False
            LOG.error("Route53 DELETE failed for %s: %s", fqdn, exc)
            raise DnsApiError(str(exc), error_code(exc), exc) from exc
        except BotoCoreError as exc:
            LOG.error("Route53 DELETE failed for %s: %s", fqdn, exc)
            raise DnsApiError(str(exc), None, exc) from exc
        LOG.info("deleted %s", fqdn)
        return True
