"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Classified error taxonomy raised by the request pipeline.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Failure classification shared by executor, retry and callers."""

    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    INVALID_REQUEST = "invalid_request"
    TIMEOUT = "timeout"
    SERVER = "server"
    NETWORK = "network"
    UNKNOWN = "unknown"


_NON_RETRYABLE = frozenset({ErrorKind.AUTHENTICATION, ErrorKind.INVALID_REQUEST})


class ConfigurationError(ValueError):
    """Raised when settings are missing or out of range."""


class OpenRouterError(Exception):
    """Base class for every classified API failure."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload or {}

    @property
    def retryable(self) -> bool:
        return self.kind not in _NON_RETRYABLE

    def user_message(self) -> str:
        """Text suitable for surfacing to an end user."""
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status={self.status})"


class AuthenticationError(OpenRouterError):
    kind = ErrorKind.AUTHENTICATION


class RateLimitError(OpenRouterError):
    """Request was throttled; `retry_after_s` is set when the server sent one."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(
        self,
        message: str,
        *,
        retry_after_s: float | None = None,
        status: int | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, status=status, payload=payload)
        self.retry_after_s = retry_after_s

    def user_message(self) -> str:
        if self.retry_after_s is None:
            return self.message
        return f"{self.message} Please wait {self.retry_after_s:g} seconds before retrying."


class InvalidRequestError(OpenRouterError):
    kind = ErrorKind.INVALID_REQUEST


class RequestTimeoutError(OpenRouterError):
    kind = ErrorKind.TIMEOUT


class ServerError(OpenRouterError):
    kind = ErrorKind.SERVER


class NetworkError(OpenRouterError):
    """Transport-level failure before any response was received."""

    kind = ErrorKind.NETWORK


class UnknownAPIError(OpenRouterError):
    kind = ErrorKind.UNKNOWN


def error_for_status(
    status: int | None,
    message: str,
    *,
    retry_after_s: float | None = None,
    payload: dict[str, Any] | None = None,
) -> OpenRouterError:
    """Build the classified error for one HTTP (or in-band) status code."""
    if status == 401:
        return AuthenticationError(message, status=status, payload=payload)
    if status == 429:
        return RateLimitError(
            message,
            retry_after_s=retry_after_s,
            status=status,
            payload=payload,
        )
    if status == 400:
        return InvalidRequestError(message, status=status, payload=payload)
    if status in (500, 502, 503):
        return ServerError(message, status=status, payload=payload)
    return UnknownAPIError(message, status=status, payload=payload)
