import asyncio

import orjson
import pytest

from pms_monitoring.broadcast_hub import BroadcastHub, build_snapshot_message
from pms_monitoring.health_probe import HealthStatus, ServiceStatus
from pms_monitoring.status_store import StatusStore


def _status(name):
    return ServiceStatus(name=name, status=HealthStatus.HEALTHY, response_time_ms=3, uptime=100)


class SlowConnection:
    closed = False

    def __init__(self):
        self.sent = []

    async def send_str(self, data):
        await asyncio.sleep(10)
        self.sent.append(data)

    async def close(self):
        return True


@pytest.mark.asyncio
async def test_register_sends_current_snapshot_immediately(fake_connection_cls):
    store = StatusStore()
    await store.upsert_all([_status("a"), _status("b")])
    hub = BroadcastHub(store)
    connection = fake_connection_cls()

    delivered = await hub.register(connection)

    assert delivered is True
    assert hub.connection_count == 1
    message = orjson.loads(connection.sent[0])
    assert message["type"] == "status"
    assert [entry["name"] for entry in message["data"]] == ["a", "b"]
    assert "timestamp" in message


@pytest.mark.asyncio
async def test_register_before_first_cycle_sends_empty_snapshot(fake_connection_cls):
    hub = BroadcastHub(StatusStore())
    connection = fake_connection_cls()

    await hub.register(connection)

    assert orjson.loads(connection.sent[0])["data"] == []


@pytest.mark.asyncio
async def test_register_drops_connection_when_initial_send_fails(fake_connection_cls):
    hub = BroadcastHub(StatusStore())

    delivered = await hub.register(fake_connection_cls(fail_with=ConnectionResetError("gone")))

    assert delivered is False
    assert hub.connection_count == 0


@pytest.mark.asyncio
async def test_broadcast_sends_same_payload_to_every_connection(fake_connection_cls):
    hub = BroadcastHub(StatusStore())
    first, second = fake_connection_cls(), fake_connection_cls()
    await hub.register(first)
    await hub.register(second)

    delivered = await hub.broadcast([_status("a")])

    assert delivered == 2
    assert first.sent[-1] == second.sent[-1]
    assert len(first.sent) == len(second.sent) == 2


@pytest.mark.asyncio
async def test_failed_connection_is_removed_without_affecting_others(fake_connection_cls):
    hub = BroadcastHub(StatusStore())
    healthy = fake_connection_cls()
    flaky = fake_connection_cls()
    await hub.register(healthy)
    await hub.register(flaky)
    flaky.fail_with = ConnectionResetError("Cannot write to closing transport")

    assert await hub.broadcast([_status("a")]) == 1
    assert hub.connection_count == 1

    assert await hub.broadcast([_status("a")]) == 1
    assert len(healthy.sent) == 3
    assert len(flaky.sent) == 1


@pytest.mark.asyncio
async def test_closed_connection_is_skipped_and_removed(fake_connection_cls):
    hub = BroadcastHub(StatusStore())
    connection = fake_connection_cls()
    await hub.register(connection)
    connection._closed = True

    assert await hub.broadcast([_status("a")]) == 0
    assert hub.connection_count == 0
    assert len(connection.sent) == 1


@pytest.mark.asyncio
async def test_slow_connection_does_not_block_others(fake_connection_cls):
    hub = BroadcastHub(StatusStore(), send_timeout_seconds=0.1)
    fast = fake_connection_cls()
    await hub.register(fast)
    slow = SlowConnection()
    hub._connections.add(slow)

    delivered = await asyncio.wait_for(hub.broadcast([_status("a")]), timeout=2.0)

    assert delivered == 1
    assert len(fast.sent) == 2
    assert slow not in hub._connections


@pytest.mark.asyncio
async def test_unregister_is_idempotent(fake_connection_cls):
    hub = BroadcastHub(StatusStore())
    connection = fake_connection_cls()
    await hub.register(connection)

    await hub.unregister(connection)
    await hub.unregister(connection)

    assert hub.connection_count == 0
    assert await hub.broadcast([_status("a")]) == 0


@pytest.mark.asyncio
async def test_close_all_closes_and_clears(fake_connection_cls):
    hub = BroadcastHub(StatusStore())
    connections = [fake_connection_cls(), fake_connection_cls()]
    for connection in connections:
        await hub.register(connection)

    await hub.close_all()

    assert hub.connection_count == 0
    assert all(connection.close_calls == 1 for connection in connections)


def test_build_snapshot_message_shape():
    message = build_snapshot_message([_status("a")])

    assert set(message) == {"type", "data", "timestamp"}
    assert message["data"][0]["responseTime"] == 3


@pytest.mark.asyncio
async def test_unexpected_send_error_drops_only_that_connection(fake_connection_cls):
    hub = BroadcastHub(StatusStore())
    good = fake_connection_cls()
    broken = fake_connection_cls()
    await hub.register(good)
    await hub.register(broken)
    broken.fail_with = ValueError("frame encoder failed")

    delivered = await hub.broadcast([_status("a")])

    assert delivered == 1
    assert hub.connection_count == 1
    assert len(good.sent) == 2
    assert orjson.loads(good.sent[-1])["data"][0]["name"] == "a"


@pytest.mark.asyncio
async def test_register_treats_unexpected_error_as_failed_delivery(fake_connection_cls):
    hub = BroadcastHub(StatusStore())
    connection = fake_connection_cls(fail_with=ValueError("frame encoder failed"))

    delivered = await hub.register(connection)

    assert delivered is False
    assert hub.connection_count == 0
