"""Parser for the ``asg:hostname_pattern`` tag value.

Grammar::

    prefix[-#instanceid][.subdomain]@zoneId

``#instanceid`` marks a per-instance name; without it every instance in the
group shares the same hostname.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .utils import MalformedPatternError

HOSTNAME_PATTERN_TAG = "asg:hostname_pattern"
INSTANCE_ID_TOKEN = "#instanceid"


@dataclass(frozen=True)
class HostnamePattern:
    """Structured form of a hostname pattern."""

    prefix: str
    per_instance: bool
    subdomain: Optional[str]
    zone_id: str


def parse_pattern(raw: str) -> HostnamePattern:
    """Parse a hostname pattern string.

    Raises:
        MalformedPatternError: If the ``@zoneId`` suffix or the prefix is
            missing, or ``#instanceid`` is not the tail of the host label.
    """
    value = (raw or "").strip()
    name, sep, zone_id = value.rpartition("@")
    zone_id = zone_id.strip()
    if not sep or not zone_id:
        raise MalformedPatternError(f"pattern '{raw}' has no @zoneId suffix")

    label, _, subdomain = name.partition(".")
    subdomain = subdomain.strip(".")
    if INSTANCE_ID_TOKEN in subdomain:
        raise MalformedPatternError(
            f"pattern '{raw}' may only use {INSTANCE_ID_TOKEN} in the host label"
        )

    per_instance = INSTANCE_ID_TOKEN in label
    prefix = label
    if per_instance:
        if not label.endswith(INSTANCE_ID_TOKEN) or label.count(INSTANCE_ID_TOKEN) > 1:
            raise MalformedPatternError(
                f"pattern '{raw}' must end its host label with -{INSTANCE_ID_TOKEN}"
            )
        prefix = label[: -len(INSTANCE_ID_TOKEN)].rstrip("-")

    if not prefix:
        raise MalformedPatternError(f"pattern '{raw}' has an empty prefix")

    return HostnamePattern(
        prefix=prefix,
        per_instance=per_instance,
        subdomain=subdomain or None,
        zone_id=zone_id,
    )
