"""Lambda wrapper for lifecycle DNS handling."""
from __future__ import annotations

import logging

from asg_dns_handler import utils
from asg_dns_handler.config import HandlerConfig
from asg_dns_handler.lifecycle import dns as dns_lifecycle


def handle(event, context):  # noqa: ARG001 - AWS Lambda signature
    config = HandlerConfig.from_env()
    logging.getLogger().setLevel(config.log_level)
    outcomes = dns_lifecycle.handle_payload(
        event,
        ec2_client=utils.get_ec2_client(),
        route53_client=utils.get_route53_client(),
        autoscaling_client=utils.get_autoscaling_client(),
        config=config,
    )
    return [outcome.as_dict() for outcome in outcomes]
