"""Shared error handling for external data providers."""

import logging
from collections.abc import Awaitable, Callable

import httpx

PayloadFetch = Callable[[], Awaitable[dict[str, object]]]

_logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """Raised when a provider is unreachable or returns unusable data."""

    def __init__(self, action: str, status_code: str, detail: str) -> None:
        super().__init__(f"{action} failed (status={status_code}): {detail}")
        self.action = action
        self.status_code = status_code


async def call_provider(func: PayloadFetch, *, action: str) -> dict[str, object]:
    """Await a provider call and wrap transport or decoding failures."""
    try:
        payload = await func()
    except (httpx.HTTPError, ValueError) as exc:
        status_code = _status_code_from_exception(exc)
        _logger.warning("Provider %s failed (status=%s): %s", action, status_code, exc)
        raise ProviderError(action, status_code, str(exc)) from exc
    if not isinstance(payload, dict):
        raise ProviderError(action, "n/a", "response is not a JSON object")
    return payload


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"
