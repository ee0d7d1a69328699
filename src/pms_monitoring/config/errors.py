"""Exception types for configuration handling."""

from __future__ import annotations

from typing import Any


class ConfigurationError(RuntimeError):
    """Startup configuration is missing, malformed or inconsistent."""

    @classmethod
    def missing_value(cls, param_name: str, source: str = "") -> "ConfigurationError":
        where = f" in {source}" if source else ""
        return cls(f"{param_name} is missing or empty{where}")

    @classmethod
    def invalid_value(cls, param_name: str, value: Any, reason: str = "") -> "ConfigurationError":
        suffix = f". {reason}" if reason else ""
        return cls(f"Invalid value for {param_name}: {value!r}{suffix}")

    @classmethod
    def invalid_format(cls, param_name: str, received: str, expected: str) -> "ConfigurationError":
        return cls(f"{param_name} entry {received!r} is not in {expected} form")

    @classmethod
    def duplicate_service(cls, service_name: str, source: str) -> "ConfigurationError":
        return cls(f"Service {service_name!r} is registered more than once in {source}")


__all__ = ["ConfigurationError"]
