"""Resolve a parsed hostname pattern into the name bound in DNS."""
from __future__ import annotations

from dataclasses import dataclass

from .pattern import HostnamePattern


@dataclass(frozen=True)
class ResolvedHostname:
    """Fully-qualified hostname and the hosted zone it lives in."""

    fqdn: str
    zone_id: str

    @property
    def label(self) -> str:
        """Leading label of the hostname, used for the instance Name tag."""
        return self.fqdn.split(".", 1)[0]


def resolve_hostname(pattern: HostnamePattern, instance_id: str) -> ResolvedHostname:
    """Build the hostname for ``instance_id``.

    Shared patterns resolve to the same name for every instance, so launch and
    terminate compute identical names without consulting any AWS state.
    """
    name = pattern.prefix
    if pattern.per_instance:
        name = f"{name}-{instance_id}"
    if pattern.subdomain:
        name = f"{name}.{pattern.subdomain}"
    return ResolvedHostname(fqdn=name, zone_id=pattern.zone_id)
