"""Custom exception hierarchy for pysubway."""

from __future__ import annotations


class SubwayError(Exception):
    """Base exception for all pysubway errors."""


class SubwayConfigError(SubwayError):
    """Invalid or missing configuration."""


class SubwayNetworkError(SubwayError):
    """HTTP-level failure (connection error, timeout, non-2xx status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class SubwayDecodeError(SubwayError):
    """Response body was not JSON or did not match the expected shape."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class SubwayValidationError(SubwayError):
    """Client input rejected locally; nothing was sent to the server."""

    def __init__(self, message: str, *, field: str = "") -> None:
        self.field = field
        super().__init__(message)
