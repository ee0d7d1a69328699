"""Short human-readable descriptions of probe failures."""

from aiohttp import ClientResponseError, InvalidURL


def describe_timeout(timeout_seconds: float) -> str:
    return f"timeout of {int(timeout_seconds * 1000)}ms exceeded"


def describe_status_code(status_code: int) -> str:
    return f"Request failed with status code {status_code}"


def describe_exception(exc: BaseException) -> str:
    """Describe a transport-level failure, falling back to the exception type."""
    if isinstance(exc, InvalidURL):
        return f"Invalid URL: {exc.url}"
    if isinstance(exc, ClientResponseError):
        return describe_status_code(exc.status)
    text = str(exc).strip()
    if text:
        return text
    return type(exc).__name__
