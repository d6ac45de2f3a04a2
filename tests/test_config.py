"""Tests for handler configuration."""
from __future__ import annotations

import pytest

from asg_dns_handler.config import DEFAULT_HEARTBEAT_TIMEOUT, HandlerConfig, parse_bool
from asg_dns_handler.dns import DEFAULT_TTL


def test_defaults_from_empty_environment():
    config = HandlerConfig.from_env({})

    assert config == HandlerConfig()
    assert config.use_public_ip is False
    assert config.multi_host is False
    assert config.heartbeat_timeout == DEFAULT_HEARTBEAT_TIMEOUT
    assert config.dns_ttl == DEFAULT_TTL
    assert config.log_level == "INFO"


def test_values_from_environment():
    config = HandlerConfig.from_env(
        {
            "USE_PUBLIC_IP": "true",
            "MULTI_HOST": "Yes",
            "HEARTBEAT_TIMEOUT": "120",
            "DNS_TTL": "60",
            "LOG_LEVEL": "debug",
        }
    )

    assert config.use_public_ip is True
    assert config.multi_host is True
    assert config.heartbeat_timeout == 120
    assert config.dns_ttl == 60
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("value, expected", [("1", True), ("on", True), ("0", False), ("off", False), (None, False)])
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected


@pytest.mark.parametrize(
    "env",
    [
        {"MULTI_HOST": "maybe"},
        {"HEARTBEAT_TIMEOUT": "soon"},
        {"DNS_TTL": "0"},
    ],
)
def test_invalid_values_raise(env):
    with pytest.raises(ValueError):
        HandlerConfig.from_env(env)
