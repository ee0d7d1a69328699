"""HTTP surface: query API, dashboard page and WebSocket live feed."""

from .app import create_app
from .handlers import HUB_KEY, STORE_KEY

__all__ = ["HUB_KEY", "STORE_KEY", "create_app"]
