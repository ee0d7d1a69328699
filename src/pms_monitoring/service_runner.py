"""Entry-point wrapper shared by long-running async services."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine, Optional

from .config import ConfigurationError
from .logging_config import setup_logging

ServiceFactory = Callable[[], Coroutine[Any, Any, None]]

CONFIGURATION_EXIT_CODE = 2


def run_async_service(
    factory: ServiceFactory,
    *,
    service_name: str,
    logger_name: Optional[str] = None,
    configure_logging: bool = True,
    shutdown_message: Optional[str] = None,
) -> None:
    """
    Run ``factory()`` on a fresh event loop until it returns.

    Ctrl+C ends the process quietly with *shutdown_message* logged. A
    ``ConfigurationError`` is logged and turned into exit status 2.
    """
    if configure_logging:
        setup_logging(service_name)
    log = logging.getLogger(logger_name or f"pms_monitoring.{service_name}")

    try:
        asyncio.run(factory())
    except KeyboardInterrupt:
        log.info(shutdown_message or f"{service_name} interrupted by user")
    except ConfigurationError as exc:
        log.error("Cannot start %s: %s", service_name, exc)
        raise SystemExit(CONFIGURATION_EXIT_CODE) from exc
