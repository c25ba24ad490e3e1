"""Response model and exception hierarchy."""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass, field
from typing import Any, Union

HeaderValue = Union[str, list[str]]


@dataclass
class Response:
    """Fully buffered HTTP response.

    Attributes:
        status: HTTP status code.
        headers: Response headers keyed by lower-cased name. A header that
                 appeared more than once on the wire maps to a list of its
                 values in arrival order.
        data: Response body as text.
    """

    status: int
    headers: dict[str, HeaderValue] = field(default_factory=dict)
    data: str = ""

    @property
    def ok(self) -> bool:
        """Check if status code indicates success (2xx)."""
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Parse the body as JSON.

        Raises:
            json.JSONDecodeError: If the body is not valid JSON.
        """
        return json_module.loads(self.data)

    def text(self) -> str:
        """Return the body as text."""
        return self.data


class HTTPClientError(Exception):
    """Base exception for HTTP client errors."""
    pass


class RequestError(HTTPClientError):
    """The request could not be completed at the transport level.

    Attributes:
        status: Status code, when one is known.
        headers: Headers attached for diagnosis (the request's own headers
                 when raised by the dispatcher).
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        headers: dict[str, HeaderValue] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.headers = headers


class TimeoutError(HTTPClientError):
    """The request did not complete within the configured timeout."""

    def __init__(self, message: str = "Request timeout"):
        super().__init__(message)
        self.message = message


class ConfigurationError(HTTPClientError, ValueError):
    """Invalid client configuration, detected before any network activity."""
    pass


class InvalidURL(ConfigurationError):
    """URL is not an absolute http(s) URL."""

    def __init__(self, url: str, reason: str = "not an absolute http(s) URL"):
        super().__init__(f"Invalid URL '{url}': {reason}")
        self.url = url


class InvalidHeader(ConfigurationError):
    """Header name or value cannot be sent on the wire."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Invalid header '{name}': {reason}")
        self.name = name


class UnsupportedImpersonationTarget(ConfigurationError):
    """Browser or operating system is not in the impersonation table."""

    def __init__(self, browser: Any, os: Any = None):
        target = f"{browser}/{os}" if os is not None else str(browser)
        super().__init__(f"Unsupported impersonation target '{target}'")
        self.browser = browser
        self.os = os


class TransportError(HTTPClientError):
    """Error raised by a transport (connection, TLS, protocol, etc.)."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class TransportTimeout(TransportError):
    """Transport gave up waiting on the network."""
    pass
