"""Readers for the files that supply environment defaults."""

from __future__ import annotations

from pathlib import Path
from typing import Dict

from ..config_loader import BaseConfigLoader
from .errors import ConfigurationError

_EXPORT_PREFIX = "export "


def read_dotenv(path: Path) -> Dict[str, str]:
    """``KEY=value`` lines from a .env file; an absent file yields ``{}``."""
    if not path.exists():
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read {path}: {exc}") from exc

    values: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw = line.partition("=")
        key = key.strip()
        if key.startswith(_EXPORT_PREFIX):
            key = key[len(_EXPORT_PREFIX) :].strip()
        if key:
            values[key] = raw.strip().strip("'\"")
    return values


def read_json_defaults(path: Path) -> Dict[str, str]:
    """
    Flat ``{"NAME": scalar}`` JSON object as string values.

    Nested objects or arrays are rejected because an environment variable
    cannot hold them; ``null`` becomes the empty string.
    """
    if not path.exists():
        return {}
    document = BaseConfigLoader(path.parent).load_json_file(path.name)
    if not isinstance(document, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")

    values: Dict[str, str] = {}
    for key, value in document.items():
        if isinstance(value, (dict, list)):
            raise ConfigurationError(f"{path}: {key} must be a scalar value")
        values[str(key)] = "" if value is None else str(value)
    return values
