"""Exception hierarchy for the monitoring service.

Exception classes support two patterns:
1. No-argument raise: raise ServiceNotFoundError()
2. Contextual attributes: err = ServiceNotFoundError(service_name="core"); raise err
"""

from typing import Any

from .config.errors import ConfigurationError


class ApplicationError(Exception):
    """Base exception for all application errors.

    Supports keyword arguments that are stored as attributes for debugging.
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = self.__class__.__doc__ or "Application error occurred"
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class ServiceNotFoundError(ApplicationError):
    """No status is recorded for the requested service."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            service_name = kwargs.get("service_name")
            message = f"Service not found: {service_name}" if service_name else "Service not found"
        super().__init__(message, **kwargs)


__all__ = [
    "ApplicationError",
    "ConfigurationError",
    "ServiceNotFoundError",
]
