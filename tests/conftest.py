"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import socket
from typing import Any, List

import pytest

from pms_monitoring.config import reset_default_values
from pms_monitoring.settings import get_monitor_settings

_ISOLATED_ENV_VARS = (
    "PORT",
    "MONITOR_HOST",
    "POLL_INTERVAL_SECONDS",
    "PROBE_TIMEOUT_SECONDS",
    "BROADCAST_SEND_TIMEOUT_SECONDS",
    "SERVICES_CONFIG_PATH",
    "MONITORED_SERVICES",
    "LOG_APPEND",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Each test starts without monitor env vars or cached defaults."""
    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_default_values()
    get_monitor_settings.cache_clear()
    yield
    reset_default_values()
    get_monitor_settings.cache_clear()


class FakeConnection:
    """In-memory stand-in for a live WebSocket connection."""

    def __init__(self, *, fail_with: BaseException | None = None, closed: bool = False):
        self.sent: List[str] = []
        self.fail_with = fail_with
        self._closed = closed
        self.close_calls = 0

    @property
    def closed(self) -> bool:
        return self._closed

    async def send_str(self, data: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(data)

    async def close(self) -> Any:
        self.close_calls += 1
        self._closed = True
        return True


@pytest.fixture
def fake_connection_cls():
    return FakeConnection


@pytest.fixture
def unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
