"""
Periodic health-check cycles.

Each cycle probes every registered service concurrently, waits for all of
them to settle, writes the results to the status store as one batch and
broadcasts the refreshed snapshot.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from .broadcast_hub import BroadcastHub
from .health_probe import ServiceStatus
from .health_probe.types import utc_now
from .registry import ServiceRegistry, ServiceTarget
from .status_store import StatusStore

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 30.0

ProbeFn = Callable[[ServiceTarget], Awaitable[ServiceStatus]]


class PollingScheduler:
    """Runs one cycle at startup, then one per interval until stopped."""

    def __init__(
        self,
        registry: ServiceRegistry,
        probe_fn: ProbeFn,
        store: StatusStore,
        hub: BroadcastHub,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self.registry = registry
        self.probe_fn = probe_fn
        self.store = store
        self.hub = hub
        self.interval_seconds = interval_seconds
        self.cycle_count = 0
        self.last_cycle_at: Optional[datetime] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background polling loop; the first cycle runs immediately."""

        if self.is_running:
            logger.warning("Polling scheduler already started")
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop(), name="health-polling-loop")
        logger.info("Polling %d services every %ss", len(self.registry), self.interval_seconds)

    async def stop(self) -> None:
        """Stop the loop; an in-flight cycle is abandoned."""

        self._running = False
        if self._task is None:
            return

        self._task.cancel()
        try:
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        finally:
            self._task = None
            logger.info("Polling scheduler stopped after %d cycles", self.cycle_count)

    async def run_cycle(self) -> List[ServiceStatus]:
        """Probe every target, update the store, broadcast, and return the cycle's statuses."""

        logger.info("Checking service health...")
        statuses = await self._probe_all(self.registry.targets)

        await self.store.upsert_all(statuses)
        self.cycle_count += 1
        self.last_cycle_at = utc_now()

        await self.hub.broadcast(await self.store.get_all())
        return statuses

    async def _probe_all(self, targets: tuple[ServiceTarget, ...]) -> List[ServiceStatus]:
        results = await asyncio.gather(*(self.probe_fn(target) for target in targets), return_exceptions=True)

        statuses: List[ServiceStatus] = []
        for target, result in zip(targets, results):
            if isinstance(result, BaseException):
                logger.error("%s: unknown (health check failed)", target.name, exc_info=result)
                statuses.append(ServiceStatus.unknown(target.name))
                continue

            logger.info("%s: %s (%dms)", target.name, result.status.value, result.response_time_ms)
            statuses.append(result)

        return statuses

    async def _run_loop(self) -> None:
        try:
            while self._running:
                started = time.monotonic()
                try:
                    await self.run_cycle()
                except asyncio.CancelledError:
                    raise
                except Exception:
                    logger.exception("Health check cycle failed; retrying next interval")
                if not self._running:
                    break
                elapsed = time.monotonic() - started
                await asyncio.sleep(max(0.0, self.interval_seconds - elapsed))
        except asyncio.CancelledError:
            logger.debug("Polling loop cancelled")
            raise
        finally:
            self._running = False


__all__ = ["DEFAULT_POLL_INTERVAL_SECONDS", "PollingScheduler", "ProbeFn"]
