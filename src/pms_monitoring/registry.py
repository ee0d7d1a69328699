"""Static registry of monitored services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, Sequence

from .config import ConfigurationError, env_list
from .config_loader import BaseConfigLoader

logger = logging.getLogger(__name__)

SERVICES_ENV_VAR = "MONITORED_SERVICES"
SERVICES_CONFIG_KEY = "services"


@dataclass(frozen=True)
class ServiceTarget:
    """A monitored service: unique name plus the URL probed for health."""

    name: str
    url: str


class ServiceRegistry:
    """Immutable, ordered collection of ``ServiceTarget`` keyed by name."""

    def __init__(self, targets: Iterable[ServiceTarget], *, source: str = "registry"):
        ordered: list[ServiceTarget] = []
        seen: set[str] = set()
        for target in targets:
            if not target.name:
                raise ConfigurationError.missing_value("service name", source)
            if not target.url:
                raise ConfigurationError.missing_value(f"url for service {target.name!r}", source)
            if target.name in seen:
                raise ConfigurationError.duplicate_service(target.name, source)
            seen.add(target.name)
            ordered.append(target)

        if not ordered:
            raise ConfigurationError(f"No services configured in {source}")

        self._targets: tuple[ServiceTarget, ...] = tuple(ordered)
        self.source = source

    @property
    def targets(self) -> tuple[ServiceTarget, ...]:
        return self._targets

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(target.name for target in self._targets)

    def get(self, name: str) -> Optional[ServiceTarget]:
        for target in self._targets:
            if target.name == name:
                return target
        return None

    def __iter__(self) -> Iterator[ServiceTarget]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __contains__(self, name: object) -> bool:
        return any(target.name == name for target in self._targets)


def parse_service_entries(entries: Sequence[Any], source: str) -> list[ServiceTarget]:
    """Convert JSON ``{"name": ..., "url": ...}`` objects into targets."""
    targets: list[ServiceTarget] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigurationError.invalid_value(f"{source} services[{index}]", entry, "Expected an object with 'name' and 'url'")
        name = entry.get("name")
        url = entry.get("url")
        if not isinstance(name, str) or not isinstance(url, str):
            raise ConfigurationError.invalid_value(f"{source} services[{index}]", entry, "'name' and 'url' must be strings")
        targets.append(ServiceTarget(name=name.strip(), url=url.strip()))
    return targets


def parse_service_pairs(pairs: Sequence[str], source: str) -> list[ServiceTarget]:
    """Convert ``name=url`` strings into targets."""
    targets: list[ServiceTarget] = []
    for pair in pairs:
        name, separator, url = pair.partition("=")
        if not separator:
            raise ConfigurationError.invalid_format(source, pair, "name=url")
        targets.append(ServiceTarget(name=name.strip(), url=url.strip()))
    return targets


def load_service_registry(config_path: Path) -> ServiceRegistry:
    """
    Build the registry from ``MONITORED_SERVICES`` or the JSON services file.

    The environment variable wins when set; otherwise *config_path* must exist
    and contain ``{"services": [{"name": ..., "url": ...}, ...]}``.

    Raises:
        ConfigurationError: If neither source is usable or entries are invalid
    """
    pairs = env_list(SERVICES_ENV_VAR, unique=False)
    if pairs:
        registry = ServiceRegistry(parse_service_pairs(pairs, SERVICES_ENV_VAR), source=SERVICES_ENV_VAR)
        logger.info("Loaded %d services from %s", len(registry), SERVICES_ENV_VAR)
        return registry

    loader = BaseConfigLoader(config_path.parent)
    try:
        payload = loader.load_json_file(config_path.name)
    except FileNotFoundError as exc:
        raise ConfigurationError(
            f"Service registry is missing. Set {SERVICES_ENV_VAR} (name=url,...) or create {config_path}."
        ) from exc

    entries = loader.get_list(payload, SERVICES_CONFIG_KEY)
    source = str(config_path)
    registry = ServiceRegistry(parse_service_entries(entries, source), source=source)
    logger.info("Loaded %d services from %s", len(registry), source)
    return registry


__all__ = [
    "SERVICES_ENV_VAR",
    "ServiceRegistry",
    "ServiceTarget",
    "load_service_registry",
    "parse_service_entries",
    "parse_service_pairs",
]
