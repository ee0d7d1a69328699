"""
Monitoring service composition root.

Wires the registry, prober, status store, broadcast hub, polling scheduler
and HTTP surface together, and owns their startup and shutdown order.
"""

import asyncio
import logging
import signal
from typing import Optional

from aiohttp import web

from .broadcast_hub import BroadcastHub
from .health_probe import HttpHealthProber
from .polling_scheduler import PollingScheduler
from .registry import ServiceRegistry, load_service_registry
from .settings import MonitorSettings, get_monitor_settings
from .status_store import StatusStore
from .web import create_app

logger = logging.getLogger(__name__)

_SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class MonitorService:
    """Long-running monitor: polling loop plus HTTP/WebSocket server."""

    def __init__(self, settings: MonitorSettings, registry: ServiceRegistry):
        self.settings = settings
        self.registry = registry
        self.store = StatusStore()
        self.hub = BroadcastHub(self.store, send_timeout_seconds=settings.send_timeout_seconds)
        self.prober = HttpHealthProber(timeout_seconds=settings.probe_timeout_seconds)
        self.scheduler = PollingScheduler(
            registry,
            self.prober.probe,
            self.store,
            self.hub,
            interval_seconds=settings.poll_interval_seconds,
        )
        self.app = create_app(self.store, self.hub)
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None
        self._stop_event = asyncio.Event()

    async def start(self) -> None:
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self.settings.host, self.settings.port)
        await self._site.start()

        await self.scheduler.start()

        port = self.settings.port
        logger.info("PMS Monitoring Dashboard running on port %d", port)
        logger.info("Dashboard: http://localhost:%d", port)
        logger.info("WebSocket: ws://localhost:%d/ws", port)
        logger.info("Monitoring %d services", len(self.registry))

    def request_stop(self, reason: str = "stop requested") -> None:
        if not self._stop_event.is_set():
            logger.info("%s, shutting down gracefully", reason)
            self._stop_event.set()

    async def wait_until_stopped(self) -> None:
        await self._stop_event.wait()

    async def stop(self) -> None:
        """Stop polling, stop accepting connections, then disconnect live clients."""
        await self.scheduler.stop()
        if self._site is not None:
            await self._site.stop()
            self._site = None
        await self.hub.close_all()
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        logger.info("Monitoring service stopped")

    def install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in _SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.request_stop, f"{sig.name} received")
            except (NotImplementedError, RuntimeError):
                # add_signal_handler is unavailable on Windows event loops
                logger.debug("Signal handler for %s not installed", sig.name)


async def run_monitor(settings: Optional[MonitorSettings] = None) -> None:
    """Run the monitor until SIGTERM/SIGINT."""
    settings = settings or get_monitor_settings()
    registry = load_service_registry(settings.services_config_path)

    service = MonitorService(settings, registry)
    service.install_signal_handlers()
    await service.start()
    try:
        await service.wait_until_stopped()
    finally:
        await service.stop()
