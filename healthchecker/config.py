"""Configuration loading from environment variables.

All values are read once at startup; there is no hot-reload.  Any invalid
value raises ConfigError, which the bootstrap treats as fatal.
"""

from __future__ import annotations

import os
import re

from healthchecker.errors import ConfigError
from healthchecker.models.config import (
    DEFAULT_NAMESPACE_PREFIXES,
    APIConfig,
    CheckerConfig,
    HealthCheckerConfig,
    LogConfig,
    NamespaceRule,
)

_DURATION_RE = re.compile(r"^([0-9]+)(s|m|h)?$")
_DURATION_UNITS = {"s": 1, "m": 60, "h": 3600}


def _env(key: str, default: str = "") -> str:
    value = os.environ.get(key, "").strip()
    return value or default


def _env_list(key: str, default: tuple[str, ...] = ()) -> frozenset[str]:
    raw = os.environ.get(key, "")
    if not raw.strip():
        return frozenset(default)
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


def _parse_interval(key: str, value: str) -> float:
    """Accept bare integer seconds (``30``) or ``<n>s``, ``<n>m``, ``<n>h``."""
    match = _DURATION_RE.match(value)
    if not match:
        raise ConfigError(key, value, "must be a positive integer number of seconds or a duration like 30s, 5m, 1h")
    seconds = int(match.group(1)) * _DURATION_UNITS[match.group(2) or "s"]
    if seconds <= 0:
        raise ConfigError(key, value, "must be a positive duration")
    return float(seconds)


def _parse_port(key: str, value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise ConfigError(key, value, "must be a valid port number 1-65535") from None
    if not 1 <= port <= 65535:
        raise ConfigError(key, value, "must be a valid port number 1-65535")
    return port


def _parse_timeout(key: str, value: str) -> float:
    try:
        timeout = float(value)
    except ValueError:
        raise ConfigError(key, value, "must be a positive number of seconds") from None
    if not timeout > 0:
        raise ConfigError(key, value, "must be a positive number of seconds")
    return timeout


def _validate_log_level(key: str, value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ConfigError(key, value, f"must be one of {sorted(valid)}")
    return value.lower()


def load_config() -> HealthCheckerConfig:
    """Load configuration from environment variables, applying defaults."""
    return HealthCheckerConfig(
        checker=CheckerConfig(
            interval_seconds=_parse_interval("CHECK_INTERVAL", _env("CHECK_INTERVAL", "30")),
            api_timeout_seconds=_parse_timeout("API_TIMEOUT", _env("API_TIMEOUT", "10")),
            namespaces=NamespaceRule(
                prefixes=_env_list("SYSTEM_NAMESPACE_PREFIXES", DEFAULT_NAMESPACE_PREFIXES),
                exact_names=_env_list("SYSTEM_NAMESPACES"),
            ),
        ),
        api=APIConfig(
            port=_parse_port("METRICS_PORT", _env("METRICS_PORT", "8080")),
        ),
        log=LogConfig(
            level=_validate_log_level("LOG_LEVEL", _env("LOG_LEVEL", "info")),
        ),
    )
