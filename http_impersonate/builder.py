"""Turn effective options plus method, URL and body into a prepared request."""

from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import urlsplit

from .config import DEFAULT_TIMEOUT, ClientOptions, ProxySettings, SSLOptions
from .fingerprint import profile_headers
from .fingerprint.profiles import DEFAULT_OS
from .models import InvalidHeader, InvalidURL

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}

# Header values go out as latin-1 bytes; names must be plain ASCII.
HEADER_VALUE_ENCODING = "latin-1"


class Method(str, Enum):
    """HTTP methods the client can dispatch."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass
class PreparedRequest:
    """Fully specified request handed to a transport.

    Attributes:
        method: HTTP method.
        url: Original absolute URL.
        scheme: "http" or "https".
        host: Target hostname.
        port: Target port (explicit, else the scheme default).
        target: Path plus query string.
        headers: Final request headers in precedence order.
        timeout: Timeout in seconds.
        ssl: TLS settings for the transport.
        content: Encoded body, or None for no body.
        profile: Impersonation target label (e.g. "chrome/windows"), if any.
        proxy: Proxy settings carried for diagnostics; never applied.
    """

    method: Method
    url: str
    scheme: str
    host: str
    port: int
    target: str
    headers: dict[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    ssl: SSLOptions = field(default_factory=SSLOptions)
    content: bytes | None = None
    profile: str | None = None
    proxy: ProxySettings | None = None


def _set_header(headers: dict[str, str], name: str, value: str) -> None:
    """Set a header, replacing any existing spelling of the same name."""
    lowered = name.lower()
    for key in [k for k in headers if k.lower() == lowered]:
        del headers[key]
    headers[name] = value


def _check_headers(headers: dict[str, str]) -> None:
    """Reject headers that cannot be encoded for the wire."""
    for name, value in headers.items():
        if not name.isascii() or not name.strip():
            raise InvalidHeader(name, "name must be non-empty ASCII")
        if not isinstance(value, str):
            raise InvalidHeader(name, "value must be a string")
        try:
            value.encode(HEADER_VALUE_ENCODING)
        except UnicodeEncodeError as e:
            raise InvalidHeader(name, f"value is not {HEADER_VALUE_ENCODING} encodable") from e


def _parse_url(url: str) -> tuple[str, str, int, str]:
    """Split an absolute URL into scheme, host, port and request target."""
    try:
        parts = urlsplit(url)
        port = parts.port
    except (AttributeError, TypeError, ValueError) as e:
        raise InvalidURL(str(url), str(e)) from e

    scheme = parts.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise InvalidURL(url, "scheme must be http or https")
    if not parts.hostname:
        raise InvalidURL(url, "missing host")

    target = parts.path or "/"
    if parts.query:
        target += "?" + parts.query

    return scheme, parts.hostname, port or DEFAULT_PORTS[scheme], target


def _authorization(options: ClientOptions) -> str | None:
    """Build the Authorization header value, bearer token first."""
    auth = options.auth
    if auth is None:
        return None
    if auth.token:
        return f"Bearer {auth.token}"
    if auth.username and auth.password:
        raw = f"{auth.username}:{auth.password}".encode("utf-8")
        return f"Basic {base64.b64encode(raw).decode('ascii')}"
    return None


def _encode_body(body: Any) -> tuple[bytes | None, bool]:
    """Encode a body, reporting whether it was serialized as JSON."""
    if body is None:
        return None, False
    if isinstance(body, str):
        return body.encode("utf-8"), False
    if isinstance(body, (bytes, bytearray)):
        return bytes(body), False
    return json.dumps(body, separators=(",", ":")).encode("utf-8"), True


def build_request(
    method: Method | str,
    url: str,
    body: Any = None,
    options: ClientOptions | None = None,
) -> PreparedRequest:
    """Build a prepared request from effective options.

    Header layers are applied in order, each overriding the last:
    impersonation profile, user_agent, caller headers, Authorization,
    Cookie, and Content-Type for JSON bodies.

    Args:
        method: HTTP method.
        url: Absolute http(s) URL.
        body: Request body. Strings and bytes are sent unchanged; any other
              value is serialized as JSON.
        options: Effective (already merged) options.

    Returns:
        PreparedRequest ready for dispatch.

    Raises:
        InvalidURL: If url is not an absolute http(s) URL.
        UnsupportedImpersonationTarget: If the impersonation target is unknown.
        InvalidHeader: If a header name is not ASCII or a value is not latin-1.
    """
    options = options or ClientOptions()
    method = Method(method.upper() if isinstance(method, str) else method)
    scheme, host, port, target = _parse_url(url)

    headers = profile_headers(options.impersonate, options.impersonate_os)

    if options.user_agent:
        _set_header(headers, "User-Agent", options.user_agent)

    for name, value in options.headers.items():
        _set_header(headers, name, value)

    authorization = _authorization(options)
    if authorization:
        _set_header(headers, "Authorization", authorization)

    if options.cookies:
        _set_header(headers, "Cookie", options.cookies)

    content, is_json = _encode_body(body)
    if is_json:
        _set_header(headers, "Content-Type", "application/json")

    _check_headers(headers)

    profile = None
    if options.impersonate is not None:
        os_name = (options.impersonate_os or DEFAULT_OS).value
        profile = f"{options.impersonate.value}/{os_name}"

    if options.proxy is not None:
        logger.debug(
            "Proxy %s:%s configured but not applied to %s",
            options.proxy.host,
            options.proxy.port,
            host,
        )

    return PreparedRequest(
        method=method,
        url=url,
        scheme=scheme,
        host=host,
        port=port,
        target=target,
        headers=headers,
        timeout=options.timeout or DEFAULT_TIMEOUT,
        ssl=options.ssl or SSLOptions(),
        content=content,
        profile=profile,
        proxy=options.proxy,
    )
