"""Health-check polling and live broadcast for a fixed set of microservices."""

from .broadcast_hub import BroadcastHub
from .health_probe import HealthStatus, HttpHealthProber, ServiceStatus
from .polling_scheduler import PollingScheduler
from .registry import ServiceRegistry, ServiceTarget
from .status_store import StatusStore

__version__ = "1.0.0"

__all__ = [
    "BroadcastHub",
    "HealthStatus",
    "HttpHealthProber",
    "PollingScheduler",
    "ServiceRegistry",
    "ServiceStatus",
    "ServiceTarget",
    "StatusStore",
]
