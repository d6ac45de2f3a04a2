"""Handler configuration read from the Lambda environment."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from .dns import DEFAULT_TTL

DEFAULT_HEARTBEAT_TIMEOUT = 3600

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def parse_bool(value: Optional[str], name: str = "value") -> bool:
    candidate = (value or "").strip().lower()
    if candidate in _TRUE:
        return True
    if candidate in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got '{value}'")


def parse_positive_int(value: Union[str, int], name: str = "value") -> int:
    try:
        parsed = int(str(value).strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{value}'")
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {parsed}")
    return parsed


@dataclass(frozen=True)
class HandlerConfig:
    """Configuration for lifecycle DNS handling."""

    use_public_ip: bool = False
    multi_host: bool = False
    heartbeat_timeout: int = DEFAULT_HEARTBEAT_TIMEOUT
    dns_ttl: int = DEFAULT_TTL
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HandlerConfig":
        """Build a config from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        return cls(
            use_public_ip=parse_bool(env.get("USE_PUBLIC_IP"), "USE_PUBLIC_IP"),
            multi_host=parse_bool(env.get("MULTI_HOST"), "MULTI_HOST"),
            heartbeat_timeout=parse_positive_int(
                env.get("HEARTBEAT_TIMEOUT", DEFAULT_HEARTBEAT_TIMEOUT), "HEARTBEAT_TIMEOUT"
            ),
            dns_ttl=parse_positive_int(env.get("DNS_TTL", DEFAULT_TTL), "DNS_TTL"),
            log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
        )
