"""
Terminal viewer for the live status feed.

Subscribes to the monitor's WebSocket and prints one line per service for
every snapshot it receives.
"""

import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional, TextIO

import orjson
import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from .broadcast_hub import SNAPSHOT_MESSAGE_TYPE
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = "ws://localhost:9090/ws"

_STATUS_MARKERS = {"healthy": "OK  ", "unhealthy": "FAIL", "unknown": "??  "}


def parse_snapshot(raw: Any) -> Optional[List[Dict[str, Any]]]:
    """Return the service list of a status message, or None for anything else."""
    try:
        message = orjson.loads(raw)
    except orjson.JSONDecodeError:
        logger.warning("Ignoring malformed message from monitor")
        return None
    if not isinstance(message, dict) or message.get("type") != SNAPSHOT_MESSAGE_TYPE:
        return None
    data = message.get("data")
    if not isinstance(data, list):
        return None
    return data


def format_service_line(service: Dict[str, Any]) -> str:
    status = str(service.get("status", "unknown"))
    marker = _STATUS_MARKERS.get(status, "??  ")
    line = f"[{marker}] {service.get('name', '?'):<16} {status:<10} {service.get('responseTime', 0):>6}ms  uptime {service.get('uptime', 0)}%"
    error = service.get("error")
    if error:
        line += f"  ({error})"
    return line


def render_snapshot(services: List[Dict[str, Any]], out: TextIO) -> None:
    healthy = sum(1 for service in services if service.get("status") == "healthy")
    out.write(f"--- {healthy}/{len(services)} healthy ---\n")
    for service in services:
        out.write(format_service_line(service) + "\n")
    out.flush()


async def watch(url: str, *, once: bool = False, out: TextIO = sys.stdout) -> int:
    """Print snapshots from *url*; returns a process exit code."""
    try:
        async with websockets.connect(url) as connection:
            async for raw in connection:
                services = parse_snapshot(raw)
                if services is None:
                    continue
                render_snapshot(services, out)
                if once:
                    return 0
    except ConnectionClosed:
        logger.warning("Monitor closed the live feed")
        return 1
    except (WebSocketException, OSError) as exc:
        logger.error("Cannot connect to %s: %s", url, exc)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print live service status from a PMS monitoring instance.")
    parser.add_argument("--url", default=DEFAULT_FEED_URL, help=f"WebSocket feed URL (default: {DEFAULT_FEED_URL})")
    parser.add_argument("--once", action="store_true", help="Exit after the first snapshot")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(user_friendly=True)
    try:
        exit_code = asyncio.run(watch(args.url, once=args.once))
    except KeyboardInterrupt:
        exit_code = 0
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
