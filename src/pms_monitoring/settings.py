"""Process-wide settings for the monitoring service."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .config import ConfigurationError, env_int, env_seconds, env_str
from .config_loader import resolve_config_dir

SERVICE_NAME = "pms-monitoring"
SERVICE_VERSION = "1.0.0"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 9090
DEFAULT_POLL_INTERVAL_SECONDS = 30.0
DEFAULT_PROBE_TIMEOUT_SECONDS = 5.0
DEFAULT_SEND_TIMEOUT_SECONDS = 5.0
DEFAULT_SERVICES_FILENAME = "services.json"

_MAX_PORT = 65535


@dataclass(frozen=True)
class MonitorSettings:
    host: str
    port: int
    poll_interval_seconds: float
    probe_timeout_seconds: float
    send_timeout_seconds: float
    services_config_path: Path


@lru_cache(maxsize=1)
def get_monitor_settings() -> MonitorSettings:
    host = env_str("MONITOR_HOST", or_value=DEFAULT_HOST)
    port = env_int("PORT", or_value=DEFAULT_PORT)
    if port is None or not 0 < port <= _MAX_PORT:
        raise ConfigurationError.invalid_value("PORT", port, f"Must be between 1 and {_MAX_PORT}")

    config_path_value = env_str("SERVICES_CONFIG_PATH")
    if config_path_value:
        services_config_path = Path(config_path_value).expanduser()
    else:
        services_config_path = resolve_config_dir() / DEFAULT_SERVICES_FILENAME

    return MonitorSettings(
        host=host or DEFAULT_HOST,
        port=int(port),
        poll_interval_seconds=float(env_seconds("POLL_INTERVAL_SECONDS", or_value=DEFAULT_POLL_INTERVAL_SECONDS)),
        probe_timeout_seconds=float(env_seconds("PROBE_TIMEOUT_SECONDS", or_value=DEFAULT_PROBE_TIMEOUT_SECONDS)),
        send_timeout_seconds=float(env_seconds("BROADCAST_SEND_TIMEOUT_SECONDS", or_value=DEFAULT_SEND_TIMEOUT_SECONDS)),
        services_config_path=services_config_path,
    )


__all__ = [
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "DEFAULT_PORT",
    "DEFAULT_PROBE_TIMEOUT_SECONDS",
    "DEFAULT_SEND_TIMEOUT_SECONDS",
    "MonitorSettings",
    "SERVICE_NAME",
    "SERVICE_VERSION",
    "get_monitor_settings",
]
