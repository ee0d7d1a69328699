"""
Process-wide logging setup for the monitor and its CLI.

``setup_logging("pms-monitoring")`` sends records to stdout and to
``logs/pms-monitoring.log``. The log directory may be overridden with
``{"log_directory": ...}`` in ``config/logging_config.json``. The file is
truncated at startup unless ``LOG_APPEND`` is truthy.
"""

import logging
import logging.handlers
import sys
import threading
from pathlib import Path
from typing import List, Optional

from .config import env_bool
from .config_loader import BaseConfigLoader

_setup_lock = threading.Lock()
_LOGGING_CONFIG_FILE = "logging_config.json"
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_QUIET_LOGGERS = ("asyncio", "aiohttp", "aiohttp.access", "websockets")

logger = logging.getLogger(__name__)


def _log_directory() -> Path:
    config_dir = Path("config")
    if (config_dir / _LOGGING_CONFIG_FILE).exists():
        settings = BaseConfigLoader(config_dir).load_json_file(_LOGGING_CONFIG_FILE)
        configured = settings.get("log_directory") if isinstance(settings, dict) else None
        if configured:
            return Path(configured).expanduser()
    return Path.cwd() / "logs"


def _detach_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        root.removeHandler(handler)
        try:
            handler.close()
        except OSError as exc:
            logger.debug("Ignoring error closing %r: %s", handler, exc)


def _handlers_for(service_name: Optional[str], user_friendly: bool) -> List[logging.Handler]:
    detailed = logging.Formatter(_LOG_FORMAT, _DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    # CLI mode: bare messages, warnings and above only
    console.setFormatter(logging.Formatter("%(message)s") if user_friendly else detailed)
    console.setLevel(logging.WARNING if user_friendly else logging.DEBUG)
    handlers: List[logging.Handler] = [console]

    if service_name:
        log_dir = _log_directory()
        log_dir.mkdir(parents=True, exist_ok=True)
        mode = "a" if env_bool("LOG_APPEND", or_value=False) else "w"
        log_file = logging.handlers.WatchedFileHandler(log_dir / f"{service_name}.log", mode=mode, encoding="utf-8")
        log_file.setFormatter(detailed)
        log_file.setLevel(logging.INFO)
        handlers.append(log_file)

    return handlers


def setup_logging(service_name: Optional[str] = None, user_friendly: bool = False) -> None:
    """Replace the root logger's handlers; safe to call more than once."""
    with _setup_lock:
        root = logging.getLogger()
        _detach_handlers(root)
        for handler in _handlers_for(service_name, user_friendly):
            root.addHandler(handler)
        root.setLevel(logging.INFO)
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
