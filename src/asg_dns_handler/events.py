"""Lifecycle notification parsing."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from .utils import MalformedEventError, UnknownTransitionError, get_utc_now

_logger = logging.getLogger(__name__)

TEST_NOTIFICATION = "autoscaling:TEST_NOTIFICATION"

REQUIRED_FIELDS = (
    "LifecycleTransition",
    "AutoScalingGroupName",
    "EC2InstanceId",
    "LifecycleActionToken",
    "LifecycleHookName",
)


class EventKind(str, Enum):
    LAUNCHING = "Launching"
    TERMINATING = "Terminating"


@dataclass(frozen=True)
class LifecycleEvent:
    """A single lifecycle transition for one instance."""

    kind: EventKind
    asg_name: str
    instance_id: str
    lifecycle_action_token: str
    lifecycle_hook_name: str
    heartbeat_deadline: datetime
    transition: str = ""


def is_test_notification(message: Dict[str, Any]) -> bool:
    return message.get("Event") == TEST_NOTIFICATION


def classify_transition(transition: str) -> EventKind:
    """Map a LifecycleTransition value to an event kind."""
    if transition.endswith("LAUNCHING"):
        return EventKind.LAUNCHING
    if transition.endswith("TERMINATING"):
        return EventKind.TERMINATING
    raise UnknownTransitionError(f"unknown lifecycle transition '{transition}'")


def parse_event_time(value: Optional[str]) -> Optional[datetime]:
    """Parse the ISO-8601 ``Time`` field of a lifecycle message."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def interpret_event(
    message: Dict[str, Any],
    *,
    heartbeat_timeout: int,
    now: Optional[datetime] = None,
) -> LifecycleEvent:
    """Build a LifecycleEvent from a raw lifecycle message.

    The heartbeat window is configured on the hook rather than carried in the
    message, so the deadline is the message ``Time`` (or ``now``) plus
    ``heartbeat_timeout`` seconds.

    Raises:
        MalformedEventError: If a required field is missing or empty.
        UnknownTransitionError: If the transition is neither launching nor
            terminating.
    """
    if not isinstance(message, dict):
        raise MalformedEventError("lifecycle message is not a JSON object")

    missing = [field for field in REQUIRED_FIELDS if not message.get(field)]
    if missing:
        raise MalformedEventError(f"lifecycle message missing {', '.join(missing)}")

    transition = str(message["LifecycleTransition"])
    kind = classify_transition(transition)

    started = parse_event_time(message.get("Time")) or now or get_utc_now()
    return LifecycleEvent(
        kind=kind,
        asg_name=str(message["AutoScalingGroupName"]),
        instance_id=str(message["EC2InstanceId"]),
        lifecycle_action_token=str(message["LifecycleActionToken"]),
        lifecycle_hook_name=str(message["LifecycleHookName"]),
        heartbeat_deadline=started + timedelta(seconds=heartbeat_timeout),
        transition=transition,
    )


def extract_messages(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Unwrap the lifecycle messages carried by a Lambda payload.

    Accepts an SNS event (``Records[].Sns.Message``), an EventBridge event
    (``detail``) or a bare lifecycle message. SNS records without a readable
    message are logged and skipped.
    """
    if not isinstance(payload, dict):
        raise MalformedEventError("payload is not a JSON object")

    if "Records" in payload:
        messages = []
        for index, record in enumerate(payload.get("Records") or []):
            body = (record or {}).get("Sns", {}).get("Message")
            if body is None:
                _logger.error("skipping SNS record %d: no Message", index)
                continue
            try:
                messages.append(json.loads(body))
            except (TypeError, ValueError) as exc:
                _logger.error("skipping SNS record %d: message is not valid JSON: %s", index, exc)
        return messages

    if isinstance(payload.get("detail"), dict):
        return [payload["detail"]]

    return [payload]
