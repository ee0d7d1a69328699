"""
JSON configuration documents under the ``config/`` directory.

Both the runtime defaults (``runtime_env.json``) and the service registry
(``services.json``) are read through ``BaseConfigLoader``.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import orjson

from .config.errors import ConfigurationError

logger = logging.getLogger(__name__)


def resolve_config_dir() -> Path:
    """``./config`` when the working directory has one, else the checkout's ``config/``."""
    local_dir = Path.cwd() / "config"
    if local_dir.exists():
        return local_dir
    return Path(__file__).resolve().parents[2] / "config"


class BaseConfigLoader:
    """Reads JSON documents relative to a configuration directory."""

    def __init__(self, config_dir: Path):
        self.config_dir = config_dir

    def load_json_file(self, filename: str) -> Any:
        """
        Decode ``config_dir/filename``.

        Raises:
            FileNotFoundError: the file does not exist
            ConfigurationError: the file is not valid JSON
        """
        path = self.config_dir / filename
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            document = orjson.loads(path.read_bytes())
        except orjson.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON in config file {path}: {exc}") from exc

        logger.debug("Loaded config file %s", path)
        return document

    def get_list(self, config: Dict[str, Any], key: str) -> List[Any]:
        if not isinstance(config, dict):
            raise ConfigurationError(f"Config document must be a JSON object, got {type(config).__name__}")
        try:
            value = config[key]
        except KeyError:
            raise ConfigurationError(f"Config document has no {key!r} key") from None
        if not isinstance(value, list):
            raise ConfigurationError(f"Config key {key!r} must be a list, got {type(value).__name__}")
        return value
