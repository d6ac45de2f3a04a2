"""
ASG DNS Handler - DNS names for EC2 Auto Scaling Group instances.

This package binds and retires Route53 A records for instances as they pass
through Auto Scaling launch and terminate lifecycle hooks.
"""

__version__ = "0.1.0"

# Import key components for easier access
from .config import HandlerConfig
from .dns import Route53RecordManager
from .hostname import ResolvedHostname, resolve_hostname
from .pattern import HostnamePattern, parse_pattern
from .lifecycle.dns import handle_lifecycle_message, handle_payload

__all__ = [
    "HandlerConfig",
    "HostnamePattern",
    "ResolvedHostname",
    "Route53RecordManager",
    "handle_lifecycle_message",
    "handle_payload",
    "parse_pattern",
    "resolve_hostname",
]
