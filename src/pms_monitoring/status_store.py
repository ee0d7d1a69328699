"""In-memory table of the latest status per monitored service."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .exceptions import ServiceNotFoundError
from .health_probe import ServiceStatus

OVERALL_HEALTHY = "healthy"
OVERALL_DEGRADED = "degraded"


@dataclass(frozen=True)
class StatusSummary:
    total_services: int
    healthy_services: int
    unhealthy_services: int
    overall_health: str

    def to_dict(self) -> Dict[str, object]:
        return {
            "totalServices": self.total_services,
            "healthyServices": self.healthy_services,
            "unhealthyServices": self.unhealthy_services,
            "overallHealth": self.overall_health,
        }


def summarize_statuses(statuses: List[ServiceStatus]) -> StatusSummary:
    """Count healthy entries; anything not healthy counts as unhealthy."""
    healthy = sum(1 for status in statuses if status.is_healthy)
    total = len(statuses)
    return StatusSummary(
        total_services=total,
        healthy_services=healthy,
        unhealthy_services=total - healthy,
        overall_health=OVERALL_HEALTHY if healthy == total else OVERALL_DEGRADED,
    )


class StatusStore:
    """
    Mapping from service name to its latest ``ServiceStatus``.

    One writer per polling cycle, many readers. A single lock guards the
    mapping; readers always get a copy.
    """

    def __init__(self) -> None:
        self._statuses: Dict[str, ServiceStatus] = {}
        self._lock = asyncio.Lock()

    async def upsert_all(self, statuses: Iterable[ServiceStatus]) -> None:
        """Replace the entries named in *statuses* in one critical section."""
        batch = list(statuses)
        async with self._lock:
            for status in batch:
                self._statuses[status.name] = status

    async def get_all(self) -> List[ServiceStatus]:
        """Point-in-time copy of every entry, in first-insertion order."""
        async with self._lock:
            return list(self._statuses.values())

    async def get(self, name: str) -> Optional[ServiceStatus]:
        async with self._lock:
            return self._statuses.get(name)

    async def require(self, name: str) -> ServiceStatus:
        """Like ``get`` but raises ``ServiceNotFoundError`` when absent."""
        status = await self.get(name)
        if status is None:
            raise ServiceNotFoundError(service_name=name)
        return status

    def __len__(self) -> int:
        return len(self._statuses)


__all__ = ["StatusStore", "StatusSummary", "summarize_statuses"]
