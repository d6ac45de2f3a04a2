"""DNS lifecycle handling for Auto Scaling launch and terminate hooks."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Tuple

from asg_dns_handler.addresses import fetch_instance_address, resolve_terminate_addresses
from asg_dns_handler.compute import fetch_hostname_pattern, write_name_tag
from asg_dns_handler.config import HandlerConfig
from asg_dns_handler.dns import Route53RecordManager
from asg_dns_handler.events import (
    REQUIRED_FIELDS,
    EventKind,
    LifecycleEvent,
    extract_messages,
    interpret_event,
    is_test_notification,
    parse_event_time,
)
from asg_dns_handler.hostname import ResolvedHostname, resolve_hostname
from asg_dns_handler.lifecycle.completion import CompletionResult, LifecycleCompleter
from asg_dns_handler.pattern import parse_pattern
from asg_dns_handler.utils import (
    AsgDnsError,
    MalformedEventError,
    TagWriteError,
    UnknownTransitionError,
    get_utc_now,
)

logger = logging.getLogger(__name__)


def _log(level: int, message: str, **fields: Any) -> None:
    payload = {"message": message, **fields}
    logger.log(level, json.dumps(payload, sort_keys=True, default=str))


def _log_info(message: str, **fields: Any) -> None:
    _log(logging.INFO, message, **fields)


def _log_warning(message: str, **fields: Any) -> None:
    _log(logging.WARNING, message, **fields)


def _log_error(message: str, **fields: Any) -> None:
    _log(logging.ERROR, message, **fields)


@dataclass
class LifecycleOutcome:
    """What one lifecycle message led to."""

    instance_id: str
    transition: str
    result: CompletionResult
    reported: bool
    hostname: Optional[str] = None
    addresses: Tuple[str, ...] = field(default_factory=tuple)
    error: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "instance_id": self.instance_id,
            "transition": self.transition,
            "result": self.result.value,
            "reported": self.reported,
            "hostname": self.hostname,
            "addresses": list(self.addresses),
            "error": self.error,
        }


def _launch(
    event: LifecycleEvent,
    hostname: ResolvedHostname,
    *,
    dns: Route53RecordManager,
    ec2_client: Any,
    config: HandlerConfig,
) -> Tuple[str, ...]:
    address = fetch_instance_address(ec2_client, event.instance_id, config.use_public_ip)
    record = dns.upsert(hostname.fqdn, hostname.zone_id, address, merge=config.multi_host)
    _log_info(
        "bound hostname",
        instance_id=event.instance_id,
        hostname=hostname.fqdn,
        address=address,
        record_addresses=sorted(record.addresses),
    )

    try:
        write_name_tag(ec2_client, event.instance_id, hostname.label)
    except TagWriteError as exc:
        _log_warning(
            "failed to write Name tag",
            instance_id=event.instance_id,
            name=hostname.label,
            error=str(exc),
        )
    return (address,)


def _terminate(
    event: LifecycleEvent,
    hostname: ResolvedHostname,
    *,
    dns: Route53RecordManager,
    ec2_client: Any,
    config: HandlerConfig,
    per_instance: bool,
) -> Tuple[str, ...]:
    addresses = resolve_terminate_addresses(
        dns,
        hostname,
        ec2_client=ec2_client,
        instance_id=event.instance_id,
        per_instance=per_instance,
        use_public_ip=config.use_public_ip,
    )
    for address in sorted(addresses):
        removed = dns.remove(hostname.fqdn, hostname.zone_id, address)
        _log_info(
            "unbound hostname" if removed else "address already unbound",
            instance_id=event.instance_id,
            hostname=hostname.fqdn,
            address=address,
        )
    return tuple(sorted(addresses))


def _abandon_unparsed(
    message: Dict[str, Any],
    completer: LifecycleCompleter,
    config: HandlerConfig,
    now: datetime,
) -> bool:
    """ABANDON a message that failed interpretation, when it can be addressed."""
    fields = [message.get(name) for name in REQUIRED_FIELDS[1:]]
    if not all(fields):
        return False
    asg_name, instance_id, token, hook_name = (str(value) for value in fields)
    started = parse_event_time(message.get("Time")) or now
    return completer.complete(
        asg_name=asg_name,
        hook_name=hook_name,
        token=token,
        instance_id=instance_id,
        result=CompletionResult.ABANDON,
        deadline=started + timedelta(seconds=config.heartbeat_timeout),
    )


def handle_lifecycle_message(
    message: Dict[str, Any],
    *,
    ec2_client: Any,
    route53_client: Any,
    autoscaling_client: Any,
    config: Optional[HandlerConfig] = None,
    clock: Callable[[], datetime] = get_utc_now,
) -> Optional[LifecycleOutcome]:
    """Assign or retire the DNS name for one lifecycle transition.

    Any fatal error skips the remaining steps and reports ABANDON, provided
    the heartbeat deadline has not passed. Test notifications return None.
    """
    config = config or HandlerConfig()
    if isinstance(message, dict) and is_test_notification(message):
        _log_info("skipping test notification", asg_name=message.get("AutoScalingGroupName"))
        return None

    completer = LifecycleCompleter(autoscaling_client, clock=clock)
    now = clock()

    try:
        event = interpret_event(message, heartbeat_timeout=config.heartbeat_timeout, now=now)
    except (MalformedEventError, UnknownTransitionError) as exc:
        message = message if isinstance(message, dict) else {}
        _log_error(
            "rejected lifecycle message",
            error=str(exc),
            error_type=type(exc).__name__,
            transition=message.get("LifecycleTransition"),
        )
        reported = _abandon_unparsed(message, completer, config, now)
        return LifecycleOutcome(
            instance_id=str(message.get("EC2InstanceId", "")),
            transition=str(message.get("LifecycleTransition", "")),
            result=CompletionResult.ABANDON,
            reported=reported,
            error=str(exc),
        )

    completer.begin()
    _log_info(
        "processing lifecycle transition",
        asg_name=event.asg_name,
        instance_id=event.instance_id,
        transition=event.transition,
        deadline=event.heartbeat_deadline.isoformat(),
    )

    dns = Route53RecordManager(route53_client, ttl=config.dns_ttl)
    hostname: Optional[ResolvedHostname] = None
    addresses: Tuple[str, ...] = ()
    error: Optional[str] = None
    result = CompletionResult.CONTINUE

    try:
        pattern = parse_pattern(
            fetch_hostname_pattern(ec2_client, autoscaling_client, event.instance_id, event.asg_name)
        )
        hostname = resolve_hostname(pattern, event.instance_id)
        if event.kind is EventKind.LAUNCHING:
            addresses = _launch(event, hostname, dns=dns, ec2_client=ec2_client, config=config)
        else:
            addresses = _terminate(
                event,
                hostname,
                dns=dns,
                ec2_client=ec2_client,
                config=config,
                per_instance=pattern.per_instance,
            )
    except AsgDnsError as exc:
        result = CompletionResult.ABANDON
        error = str(exc)
        _log_error(
            "lifecycle DNS update failed",
            instance_id=event.instance_id,
            hostname=hostname.fqdn if hostname else None,
            error=error,
            error_type=type(exc).__name__,
        )

    reported = completer.complete_event(event, result)
    _log_info(
        "lifecycle transition finished",
        instance_id=event.instance_id,
        hostname=hostname.fqdn if hostname else None,
        result=result.value,
        reported=reported,
    )
    return LifecycleOutcome(
        instance_id=event.instance_id,
        transition=event.transition,
        result=result,
        reported=reported,
        hostname=hostname.fqdn if hostname else None,
        addresses=addresses,
        error=error,
    )


def handle_payload(
    payload: Dict[str, Any],
    *,
    ec2_client: Any,
    route53_client: Any,
    autoscaling_client: Any,
    config: Optional[HandlerConfig] = None,
    clock: Callable[[], datetime] = get_utc_now,
) -> List[LifecycleOutcome]:
    """Handle every lifecycle message carried by a Lambda payload."""
    try:
        messages = extract_messages(payload)
    except MalformedEventError as exc:
        _log_error("unreadable lifecycle payload", error=str(exc))
        return []

    outcomes = []
    for message in messages:
        outcome = handle_lifecycle_message(
            message,
            ec2_client=ec2_client,
            route53_client=route53_client,
            autoscaling_client=autoscaling_client,
            config=config,
            clock=clock,
        )
        if outcome is not None:
            outcomes.append(outcome)
    return outcomes
