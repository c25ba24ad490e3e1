"""HTTP client with browser impersonation via header shaping.

This package provides two front-ends over one dispatch pipeline:

- ``Client``: callback style, ``callback(error, response)``
- ``AsyncClient``: awaitable, returns ``Response`` or raises

Both can impersonate chrome, safari, edge, firefox or okhttp on android,
ios, linux, macos or windows by sending that browser's User-Agent and
companion headers. Only headers are shaped; the TLS handshake is httpx's own.

Basic usage:

    # Awaitable client
    from http_impersonate import AsyncClient

    async with AsyncClient({"impersonate": "chrome", "impersonate_os": "macos"}) as client:
        response = await client.get("https://example.com")
        print(response.status, response.text())

    # Callback client
    from http_impersonate import Client

    def on_done(err, response):
        print(err or response.status)

    client = Client({"timeout": 10.0})
    client.post("https://example.com/api", {"key": "value"}, callback=on_done)

    # Per-call options override client defaults
    client.get(
        "https://example.com",
        {"headers": {"X-Trace": "1"}, "auth": {"token": "abc"}},
        callback=on_done,
    )
"""

from .builder import Method, PreparedRequest, build_request
from .client import AsyncClient, Client
from .config import Auth, ClientOptions, ProxySettings, SSLOptions, merge_options
from .fingerprint import Browser, OperatingSystem, get_user_agent, list_targets, profile_headers
from .models import (
    ConfigurationError,
    HTTPClientError,
    InvalidHeader,
    InvalidURL,
    RequestError,
    Response,
    TimeoutError,
    UnsupportedImpersonationTarget,
)

__version__ = "0.1.0"

__all__ = [
    # Clients
    "Client",
    "AsyncClient",
    # Configuration
    "ClientOptions",
    "Auth",
    "ProxySettings",
    "SSLOptions",
    "merge_options",
    # Request building
    "Method",
    "PreparedRequest",
    "build_request",
    # Models
    "Response",
    # Exceptions
    "HTTPClientError",
    "RequestError",
    "TimeoutError",
    "ConfigurationError",
    "InvalidURL",
    "InvalidHeader",
    "UnsupportedImpersonationTarget",
    # Fingerprinting
    "Browser",
    "OperatingSystem",
    "profile_headers",
    "get_user_agent",
    "list_targets",
    # Version
    "__version__",
]
