"""
Centralized error types for the monitoring pipeline and the route layer.

Pipeline errors are raised inside one run and collected into the run summary;
only the route layer turns exceptions into HTTP responses.
"""
from __future__ import annotations

from typing import Callable

from fastapi import HTTPException


class MonitorError(Exception):
    """Base class for monitoring pipeline errors."""


class FetchError(MonitorError):
    """Source page could not be fetched (network error, timeout, non-2xx)."""


class ParseError(MonitorError):
    """A game's section could not be located in the source markup."""


class PersistenceError(MonitorError):
    """Writing a reading or notification record to the store failed."""


class NotifyError(MonitorError):
    """The messaging provider rejected a message or could not be reached."""


class ConfigError(MonitorError):
    """Messaging credentials are missing; sends fail fast."""


# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

STATUS_SERVICE_UNAVAILABLE = 503  # source page or provider down
STATUS_INTERNAL_ERROR = 500

MSG_SOURCE_UNAVAILABLE = "Lottery source page is unavailable. Try again later."
MSG_SMS_NOT_CONFIGURED = "SMS credentials not configured. Add SOLAPI_API_KEY and SOLAPI_SECRET_KEY to .env."


# ---------------------------------------------------------------------------
# Error rules: (predicate, status_code, detail_message)
# Add new rules here instead of scattering checks in routes.
# ---------------------------------------------------------------------------

def _is_fetch_error(exc: Exception) -> bool:
    return isinstance(exc, FetchError)


def _is_config_error(exc: Exception) -> bool:
    return isinstance(exc, ConfigError)


# List of (predicate, status_code, detail). First match wins.
MONITOR_ERROR_RULES: list[tuple[Callable[[Exception], bool], int, str]] = [
    (_is_fetch_error, STATUS_SERVICE_UNAVAILABLE, MSG_SOURCE_UNAVAILABLE),
    (_is_config_error, STATUS_SERVICE_UNAVAILABLE, MSG_SMS_NOT_CONFIGURED),
]


def monitor_error_to_http(exc: Exception) -> HTTPException:
    """
    Map an exception from a monitoring run or store query into an HTTPException.
    Uses MONITOR_ERROR_RULES for known error types; otherwise returns 500 with the exception message.
    """
    for predicate, status_code, detail in MONITOR_ERROR_RULES:
        if predicate(exc):
            return HTTPException(status_code=status_code, detail=detail)
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=str(exc))
