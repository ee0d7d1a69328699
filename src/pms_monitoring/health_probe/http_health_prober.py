"""HTTP-based health probing."""

import asyncio
import logging
import time

import aiohttp
from aiohttp import ClientError, ClientTimeout

from ..registry import ServiceTarget
from .error_describer import describe_exception, describe_status_code, describe_timeout
from .types import HealthStatus, ServiceStatus

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT_SECONDS = 5.0

# Status codes below this are treated as reachable
_SERVER_ERROR_THRESHOLD = 500
_HTTP_OK = 200
_FULL_UPTIME = 100
_DEGRADED_UPTIME = 90
_NO_UPTIME = 0


def uptime_for_status_code(status_code: int) -> int:
    """Instantaneous uptime score for a reachable response."""
    return _FULL_UPTIME if status_code == _HTTP_OK else _DEGRADED_UPTIME


class HttpHealthProber:
    """Probes one service target with a single bounded-timeout HTTP GET."""

    def __init__(self, timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS):
        """
        Initialize HTTP health prober.

        Args:
            timeout_seconds: Upper bound on the whole request, connect included
        """
        self.timeout_seconds = timeout_seconds

    async def probe(self, target: ServiceTarget) -> ServiceStatus:
        """
        Probe *target* and classify the outcome.

        Network failures, timeouts and 5xx responses are encoded as an
        ``unhealthy`` status; faults of the probing machinery itself (a
        closed session, an exhausted connector) as ``unknown``. Never raises.

        Args:
            target: Service to probe

        Returns:
            ServiceStatus describing this probe
        """
        start_time = time.monotonic()
        try:
            status_code = await self._fetch_status_code(target.url)
        except asyncio.TimeoutError:
            return self._unhealthy(target, start_time, describe_timeout(self.timeout_seconds))
        except (ClientError, OSError, ValueError) as exc:
            return self._unhealthy(target, start_time, describe_exception(exc))
        except RuntimeError as exc:
            logger.warning("Probe of %s could not run", target.name, exc_info=exc)
            return ServiceStatus.unknown(target.name, describe_exception(exc))

        if status_code >= _SERVER_ERROR_THRESHOLD:
            return self._unhealthy(target, start_time, describe_status_code(status_code))

        return ServiceStatus(
            name=target.name,
            status=HealthStatus.HEALTHY,
            response_time_ms=self._elapsed_ms(start_time),
            uptime=uptime_for_status_code(status_code),
        )

    async def _fetch_status_code(self, url: str) -> int:
        timeout = ClientTimeout(total=self.timeout_seconds)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url) as response:
                return response.status

    def _unhealthy(self, target: ServiceTarget, start_time: float, error: str) -> ServiceStatus:
        logger.debug("Probe of %s failed: %s", target.name, error)
        return ServiceStatus(
            name=target.name,
            status=HealthStatus.UNHEALTHY,
            response_time_ms=self._elapsed_ms(start_time),
            uptime=_NO_UPTIME,
            error=error,
        )

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return max(0, int(round((time.monotonic() - start_time) * 1000)))
