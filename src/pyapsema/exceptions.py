"""Exceptions raised by pyapsema.

Only the transport layer and configuration validation raise. Everything
between the transport and the polling facade converts failures into
:class:`~pyapsema.models.FetchResult` outcomes or a zero reading.
"""

from __future__ import annotations


class ApsemaError(Exception):
    """Base exception for all pyapsema errors."""

    pass


class ApsemaConfigError(ApsemaError, ValueError):
    """Accessory configuration is missing a required value."""

    pass


class ApsemaAuthError(ApsemaError):
    """Demo login did not yield a usable session."""

    pass


class ApsemaConnectionError(ApsemaError):
    """Network error or timeout talking to the EMA servers."""

    pass


class ApsemaAPIError(ApsemaError):
    """The EMA servers returned an unexpected response."""

    pass


class ApsemaHTTPStatusError(ApsemaAPIError):
    """HTTP status outside the range accepted for the request."""

    def __init__(self, status: int, url: str, body: str | None = None) -> None:
        """Initialize with response details.

        Args:
            status: HTTP status code received
            url: URL that was requested
            body: Response body text, if it was read
        """
        self.status = status
        self.url = url
        self.body = body
        super().__init__(f"HTTP {status} from {url}")
