"""aiohttp application wiring for the query surface, dashboard and live feed."""

from aiohttp import web

from ..broadcast_hub import BroadcastHub
from ..status_store import StatusStore
from . import handlers
from .middlewares import security_headers_middleware


def create_app(store: StatusStore, hub: BroadcastHub) -> web.Application:
    app = web.Application(middlewares=[security_headers_middleware])
    app[handlers.STORE_KEY] = store
    app[handlers.HUB_KEY] = hub

    app.router.add_get("/", handlers.index)
    app.router.add_get("/ws", handlers.live_feed)
    app.router.add_get("/health", handlers.health)
    app.router.add_get("/api/status", handlers.status_summary)
    app.router.add_get("/api/service/{name}", handlers.service_detail)
    return app
