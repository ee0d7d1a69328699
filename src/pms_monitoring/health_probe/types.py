"""Type definitions for health probing."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

HEALTH_CHECK_FAILED_MESSAGE = "Health check failed"


class HealthStatus(Enum):
    """Simple health status enumeration"""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ServiceStatus:
    """Latest probe outcome for one service; replaced, never mutated, each cycle"""

    name: str
    status: HealthStatus
    response_time_ms: int
    uptime: int
    last_check: datetime = field(default_factory=utc_now)
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.response_time_ms < 0:
            raise ValueError(f"response_time_ms must be non-negative (got {self.response_time_ms})")
        if not 0 <= self.uptime <= 100:
            raise ValueError(f"uptime must be within [0, 100] (got {self.uptime})")

    @property
    def is_healthy(self) -> bool:
        return self.status is HealthStatus.HEALTHY

    @classmethod
    def unknown(cls, name: str, error: str = HEALTH_CHECK_FAILED_MESSAGE) -> "ServiceStatus":
        """Status recorded when the probe itself could not produce a result."""
        return cls(name=name, status=HealthStatus.UNKNOWN, response_time_ms=0, uptime=0, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation used by the live feed and the query API."""
        payload: Dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "responseTime": self.response_time_ms,
            "lastCheck": self.last_check.isoformat(),
            "uptime": self.uptime,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload
