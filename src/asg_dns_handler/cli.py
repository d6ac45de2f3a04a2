"""Command-line interface for the ASG DNS handler.

This module provides the Click-based CLI for resolving hostname patterns,
inspecting records and replaying lifecycle notifications by hand.
"""
import json
import logging
import sys
import click
from dataclasses import replace
from typing import Optional

from . import utils
from .config import HandlerConfig
from .console_output import ConsoleOutput
from .dns import Route53RecordManager
from .hostname import resolve_hostname
from .lifecycle.dns import handle_payload
from .pattern import parse_pattern

@click.group()
@click.version_option()
@click.option('--verbose', '-v', is_flag=True, help='Log handler progress to stderr')
@click.pass_context
def cli(ctx, verbose: bool):
    """ASG DNS Handler - Route53 names for Auto Scaling instances."""
    ctx.ensure_object(dict)
    ctx.obj['console'] = ConsoleOutput()
    if verbose:
        logging.basicConfig(level=logging.INFO)

@cli.command()
@click.argument('pattern')
@click.option('--instance-id', help='Instance ID substituted for #instanceid')
@click.pass_context
def resolve(ctx, pattern: str, instance_id: Optional[str]):
    """Resolve PATTERN into the hostname an instance would receive."""
    console = ctx.obj['console']

    try:
        parsed = parse_pattern(pattern)
    except utils.MalformedPatternError as e:
        console.print_error(str(e))
        sys.exit(1)

    if parsed.per_instance and not instance_id:
        console.print_error("pattern contains #instanceid; pass --instance-id")
        sys.exit(1)

    console.print_hostname(parsed, resolve_hostname(parsed, instance_id or ""))

@cli.command()
@click.argument('hostname')
@click.argument('zone_id')
@click.pass_context
def record(ctx, hostname: str, zone_id: str):
    """Show the A record currently bound to HOSTNAME in ZONE_ID."""
    console = ctx.obj['console']

    try:
        manager = Route53RecordManager(utils.get_route53_client())
        console.print_record(manager.get_record(hostname, zone_id), hostname)
    except Exception as e:
        console.print_error(f"Failed to read record: {str(e)}")
        sys.exit(1)

@cli.command()
@click.argument('event_file', type=click.File('r'), default='-')
@click.option('--use-public-ip/--use-private-ip', default=None,
              help='Bind the public instance address (defaults to USE_PUBLIC_IP)')
@click.option('--multi-host/--single-host', default=None,
              help='Merge addresses into a shared record (defaults to MULTI_HOST)')
@click.option('--heartbeat-timeout', type=int, help='Hook heartbeat window in seconds')
@click.option('--ttl', type=int, help='TTL for written records')
@click.pass_context
def handle(ctx, event_file, use_public_ip: Optional[bool], multi_host: Optional[bool],
           heartbeat_timeout: Optional[int], ttl: Optional[int]):
    """Handle a lifecycle notification read from EVENT_FILE (stdin by default).

    This talks to live AWS APIs, including completing the lifecycle action.
    """
    console = ctx.obj['console']

    try:
        payload = json.load(event_file)
        config = HandlerConfig.from_env()
    except ValueError as e:
        console.print_error(f"Invalid input: {str(e)}")
        sys.exit(1)

    overrides = {
        'use_public_ip': use_public_ip,
        'multi_host': multi_host,
        'heartbeat_timeout': heartbeat_timeout,
        'dns_ttl': ttl,
    }
    config = replace(config, **{key: value for key, value in overrides.items() if value is not None})

    try:
        outcomes = handle_payload(
            payload,
            ec2_client=utils.get_ec2_client(),
            route53_client=utils.get_route53_client(),
            autoscaling_client=utils.get_autoscaling_client(),
            config=config,
        )
    except Exception as e:
        console.print_error(f"Failed to handle event: {str(e)}")
        sys.exit(1)

    results = [outcome.as_dict() for outcome in outcomes]
    console.print_outcomes(results)
    if any(result['result'] != 'CONTINUE' for result in results):
        sys.exit(1)

def main():
    """Entry point for the CLI."""
    cli(obj={})

if __name__ == "__main__":
    main()
