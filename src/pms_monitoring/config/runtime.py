"""
Environment-backed configuration lookups.

Values come from the process environment first, then from ``.env`` and
finally ``config/runtime_env.json``. The file defaults are read once and
cached until ``reset_default_values`` is called.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Tuple, TypeVar

from .errors import ConfigurationError

T = TypeVar("T")

_TRUE_VALUES = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "false", "f", "no", "n", "off"})

_DOTENV_CANDIDATES = (Path(".env"),)
_JSON_ENV_CANDIDATES = (Path("config/runtime_env.json"),)

_defaults_cache: Optional[Dict[str, str]] = None


def _file_defaults() -> Dict[str, str]:
    from .env_sources import read_dotenv, read_json_defaults

    global _defaults_cache
    if _defaults_cache is None:
        merged: Dict[str, str] = {}
        # earlier files take precedence
        for path in _DOTENV_CANDIDATES:
            for key, value in read_dotenv(path).items():
                merged.setdefault(key, value)
        for path in _JSON_ENV_CANDIDATES:
            for key, value in read_json_defaults(path).items():
                merged.setdefault(key, value)
        _defaults_cache = merged
    return _defaults_cache


def reset_default_values() -> None:
    """Drop cached file defaults so the next lookup re-reads them."""
    global _defaults_cache
    _defaults_cache = None


def _not_set(name: str) -> ConfigurationError:
    return ConfigurationError(f"Required environment variable {name!r} is not set")


def _lookup(name: str, *, strip: bool = True, allow_blank: bool = False) -> Optional[str]:
    for candidate in (os.getenv(name), _file_defaults().get(name)):
        if candidate is None:
            continue
        if strip:
            candidate = candidate.strip()
        if candidate or allow_blank:
            return candidate
    return None


def _typed(name: str, or_value: Optional[T], required: bool, convert: Callable[[str], T]) -> Optional[T]:
    raw = _lookup(name)
    if raw is None:
        if required and or_value is None:
            raise _not_set(name)
        return or_value
    return convert(raw)


def _cast(name: str, cast: Callable[[str], T], kind: str) -> Callable[[str], T]:
    def convert(raw: str) -> T:
        try:
            return cast(raw)
        except ValueError as exc:
            raise ConfigurationError(f"Environment variable {name!r} must be {kind} (got {raw!r})") from exc

    return convert


def env_str(
    name: str,
    or_value: Optional[str] = None,
    *,
    required: bool = False,
    strip: bool = True,
    allow_blank: bool = False,
) -> Optional[str]:
    value = _lookup(name, strip=strip, allow_blank=allow_blank)
    if value is not None:
        return value
    if required:
        raise _not_set(name)
    return or_value


def env_int(name: str, or_value: Optional[int] = None, *, required: bool = False) -> Optional[int]:
    return _typed(name, or_value, required, _cast(name, int, "an integer"))


def env_float(name: str, or_value: Optional[float] = None, *, required: bool = False) -> Optional[float]:
    return _typed(name, or_value, required, _cast(name, float, "a number"))


def env_bool(name: str, or_value: Optional[bool] = None, *, required: bool = False) -> Optional[bool]:
    def convert(raw: str) -> bool:
        word = raw.lower()
        if word in _TRUE_VALUES:
            return True
        if word in _FALSE_VALUES:
            return False
        raise ConfigurationError(f"Environment variable {name!r} must be a boolean (got {raw!r})")

    return _typed(name, or_value, required, convert)


def env_list(
    name: str,
    *,
    or_value: Optional[Sequence[str]] = None,
    separator: str = ",",
    unique: bool = True,
    required: bool = False,
) -> Optional[Tuple[str, ...]]:
    """Comma separated values with blanks dropped; duplicates removed unless ``unique=False``."""
    raw = _lookup(name)
    items = [item.strip() for item in raw.split(separator)] if raw is not None else []
    items = [item for item in items if item]
    if not items:
        if required and not or_value:
            raise _not_set(name)
        return None if or_value is None else tuple(or_value)
    if unique:
        items = list(dict.fromkeys(items))
    return tuple(items)


def env_seconds(name: str, or_value: Optional[float] = None, *, required: bool = False) -> Optional[float]:
    """A duration in seconds; zero and negative values are rejected."""
    value = env_float(name, or_value=or_value, required=required)
    if value is not None and value <= 0:
        raise ConfigurationError(f"Environment variable {name!r} must be positive (got {value})")
    return value
