"""Fan-out of status snapshots to live dashboard connections."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence, Set

import orjson

from .health_probe import ServiceStatus
from .health_probe.types import utc_now
from .status_store import StatusStore

logger = logging.getLogger(__name__)

SNAPSHOT_MESSAGE_TYPE = "status"
DEFAULT_SEND_TIMEOUT_SECONDS = 5.0


class LiveConnection(Protocol):
    """Duplex channel to one viewer (``aiohttp.web.WebSocketResponse`` fits)."""

    @property
    def closed(self) -> bool: ...

    async def send_str(self, data: str) -> None: ...

    async def close(self) -> Any: ...


def build_snapshot_message(statuses: Sequence[ServiceStatus], timestamp: Optional[datetime] = None) -> Dict[str, Any]:
    """Live feed message: ``{"type": "status", "data": [...], "timestamp": ...}``."""
    return {
        "type": SNAPSHOT_MESSAGE_TYPE,
        "data": [status.to_dict() for status in statuses],
        "timestamp": (timestamp or utc_now()).isoformat(),
    }


def encode_message(message: Dict[str, Any]) -> str:
    return orjson.dumps(message).decode()


class BroadcastHub:
    """
    Tracks live connections and pushes the full snapshot to each of them.

    There is no per-connection queue: a send that fails or exceeds the send
    timeout drops that connection, other connections are unaffected.
    """

    def __init__(self, store: StatusStore, send_timeout_seconds: float = DEFAULT_SEND_TIMEOUT_SECONDS):
        self._store = store
        self.send_timeout_seconds = send_timeout_seconds
        self._connections: Set[LiveConnection] = set()
        self._lock = asyncio.Lock()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def register(self, connection: LiveConnection) -> bool:
        """
        Add *connection* to the live set and send it the current snapshot.

        Returns:
            True if the initial snapshot was delivered
        """
        async with self._lock:
            self._connections.add(connection)
        logger.info("New monitoring client connected (%d live)", self.connection_count)

        payload = encode_message(build_snapshot_message(await self._store.get_all()))
        try:
            delivered = await self._send(connection, payload)
        except Exception:
            logger.warning("Initial snapshot to monitoring client failed", exc_info=True)
            delivered = False
        if not delivered:
            await self.unregister(connection)
        return delivered

    async def unregister(self, connection: LiveConnection) -> None:
        async with self._lock:
            if connection not in self._connections:
                return
            self._connections.discard(connection)
        logger.info("Monitoring client disconnected (%d live)", self.connection_count)

    async def broadcast(self, statuses: Sequence[ServiceStatus]) -> int:
        """
        Send one snapshot of *statuses* to every live connection.

        Returns:
            Number of connections the snapshot was delivered to
        """
        payload = encode_message(build_snapshot_message(statuses))
        async with self._lock:
            recipients: List[LiveConnection] = list(self._connections)

        if not recipients:
            return 0

        results = await asyncio.gather(*(self._send(connection, payload) for connection in recipients), return_exceptions=True)

        dead: List[LiveConnection] = []
        for connection, result in zip(recipients, results):
            if isinstance(result, BaseException):
                logger.warning("Send to monitoring client raised %s", type(result).__name__, exc_info=result)
                dead.append(connection)
            elif not result:
                dead.append(connection)
        if dead:
            async with self._lock:
                self._connections.difference_update(dead)
            logger.warning("Dropped %d unreachable monitoring client(s)", len(dead))

        delivered_count = len(recipients) - len(dead)
        logger.debug("Broadcast snapshot of %d services to %d client(s)", len(statuses), delivered_count)
        return delivered_count

    async def close_all(self) -> None:
        """Close every live connection; used on shutdown."""
        async with self._lock:
            connections = list(self._connections)
            self._connections.clear()

        for connection in connections:
            try:
                await asyncio.wait_for(connection.close(), timeout=self.send_timeout_seconds)
            except (asyncio.TimeoutError, ConnectionError, RuntimeError, OSError) as exc:
                logger.debug("Failed to close monitoring client cleanly: %s", exc)

    async def _send(self, connection: LiveConnection, payload: str) -> bool:
        if connection.closed:
            return False
        try:
            await asyncio.wait_for(connection.send_str(payload), timeout=self.send_timeout_seconds)
        except asyncio.TimeoutError:
            logger.debug("Send to monitoring client timed out")
            return False
        except (ConnectionError, RuntimeError, OSError) as exc:
            logger.debug("Send to monitoring client failed: %s", exc)
            return False
        return True


__all__ = [
    "BroadcastHub",
    "LiveConnection",
    "SNAPSHOT_MESSAGE_TYPE",
    "build_snapshot_message",
    "encode_message",
]
