"""Health probing of monitored services."""

from .http_health_prober import DEFAULT_PROBE_TIMEOUT_SECONDS, HttpHealthProber, uptime_for_status_code
from .types import HEALTH_CHECK_FAILED_MESSAGE, HealthStatus, ServiceStatus

__all__ = [
    "DEFAULT_PROBE_TIMEOUT_SECONDS",
    "HEALTH_CHECK_FAILED_MESSAGE",
    "HealthStatus",
    "HttpHealthProber",
    "ServiceStatus",
    "uptime_for_status_code",
]
