"""Read-only HTTP handlers and the live feed endpoint."""

import logging
from typing import Any

import orjson
from aiohttp import WSMsgType, web

from ..broadcast_hub import BroadcastHub
from ..exceptions import ServiceNotFoundError
from ..health_probe.types import utc_now
from ..settings import SERVICE_NAME, SERVICE_VERSION
from ..status_store import StatusStore, summarize_statuses
from .dashboard import DASHBOARD_HTML

logger = logging.getLogger(__name__)

STORE_KEY = web.AppKey("status_store", StatusStore)
HUB_KEY = web.AppKey("broadcast_hub", BroadcastHub)

_WEBSOCKET_HEARTBEAT_SECONDS = 30.0


def _dumps(payload: Any) -> str:
    return orjson.dumps(payload).decode()


def json_response(payload: Any, *, status: int = 200) -> web.Response:
    return web.json_response(payload, status=status, dumps=_dumps)


async def health(request: web.Request) -> web.Response:
    """Liveness of the monitoring process itself."""
    return json_response(
        {
            "status": "OK",
            "service": SERVICE_NAME,
            "timestamp": utc_now().isoformat(),
            "version": SERVICE_VERSION,
        }
    )


async def status_summary(request: web.Request) -> web.Response:
    statuses = await request.app[STORE_KEY].get_all()
    summary = summarize_statuses(statuses)
    return json_response(
        {
            "success": True,
            "summary": summary.to_dict(),
            "services": [status.to_dict() for status in statuses],
        }
    )


async def service_detail(request: web.Request) -> web.Response:
    name = request.match_info["name"]
    try:
        status = await request.app[STORE_KEY].require(name)
    except ServiceNotFoundError:
        return json_response({"success": False, "message": "Service not found"}, status=404)
    return json_response({"success": True, "service": status.to_dict()})


async def live_feed(request: web.Request) -> web.WebSocketResponse:
    """Push status snapshots to one viewer until it disconnects."""
    hub = request.app[HUB_KEY]
    ws = web.WebSocketResponse(heartbeat=_WEBSOCKET_HEARTBEAT_SECONDS)
    await ws.prepare(request)

    try:
        await hub.register(ws)
        # Inbound messages carry no meaning; reading keeps close frames flowing
        async for message in ws:
            if message.type == WSMsgType.ERROR:
                logger.warning("Monitoring client connection error: %s", ws.exception())
    finally:
        await hub.unregister(ws)
    return ws


async def index(request: web.Request) -> web.StreamResponse:
    """Dashboard page, or the live feed when the request is a WebSocket upgrade."""
    if web.WebSocketResponse().can_prepare(request).ok:
        return await live_feed(request)
    return web.Response(text=DASHBOARD_HTML, content_type="text/html")
