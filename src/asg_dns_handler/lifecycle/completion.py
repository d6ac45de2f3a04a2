"""Report CONTINUE/ABANDON back to an Auto Scaling lifecycle hook."""
from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional, TYPE_CHECKING

from botocore.exceptions import BotoCoreError, ClientError

from asg_dns_handler.events import LifecycleEvent
from asg_dns_handler.utils import get_utc_now

if TYPE_CHECKING:  # pragma: no cover
    from mypy_boto3_autoscaling.client import AutoScalingClient
else:
    AutoScalingClient = Any

_logger = logging.getLogger(__name__)


class CompletionResult(str, Enum):
    CONTINUE = "CONTINUE"
    ABANDON = "ABANDON"


class InvocationState(str, Enum):
    RECEIVED = "Received"
    PROCESSING = "Processing"
    COMPLETED = "Completed"


class LifecycleCompleter:
    """Tracks one invocation and sends its single completion call.

    The completion call is attempted at most once and never after the
    heartbeat deadline; redelivery of the whole transition is left to the
    notification source.
    """

    def __init__(
        self,
        autoscaling_client: AutoScalingClient,
        clock: Callable[[], datetime] = get_utc_now,
    ) -> None:
        self.client = autoscaling_client
        self.clock = clock
        self.state = InvocationState.RECEIVED
        self.result: Optional[CompletionResult] = None

    def begin(self) -> None:
        if self.state is InvocationState.RECEIVED:
            self.state = InvocationState.PROCESSING

    def complete_event(self, event: LifecycleEvent, result: CompletionResult) -> bool:
        return self.complete(
            asg_name=event.asg_name,
            hook_name=event.lifecycle_hook_name,
            token=event.lifecycle_action_token,
            instance_id=event.instance_id,
            result=result,
            deadline=event.heartbeat_deadline,
        )

    def complete(
        self,
        *,
        asg_name: str,
        hook_name: str,
        token: str,
        instance_id: str,
        result: CompletionResult,
        deadline: Optional[datetime] = None,
    ) -> bool:
        """Report ``result`` to the hook. Returns True if the call succeeded."""
        if self.state is InvocationState.COMPLETED:
            _logger.warning("lifecycle action for %s already completed", instance_id)
            return False
        self.state = InvocationState.COMPLETED
        self.result = result

        if deadline is not None and self.clock() >= deadline:
            _logger.warning(
                "heartbeat deadline %s passed for %s; leaving %s to the hook default",
                deadline.isoformat(),
                instance_id,
                hook_name,
            )
            return False

        try:
            self.client.complete_lifecycle_action(
                LifecycleHookName=hook_name,
                AutoScalingGroupName=asg_name,
                InstanceId=instance_id,
                LifecycleActionToken=token,
                LifecycleActionResult=result.value,
            )
        except (ClientError, BotoCoreError) as exc:
            _logger.error("error completing lifecycle action for %s: %s", instance_id, exc)
            return False

        _logger.info("completed %s for %s with %s", hook_name, instance_id, result.value)
        return True
