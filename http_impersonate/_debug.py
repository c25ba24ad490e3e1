"""Debug/verbose output for request dispatch."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, TextIO

SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "proxy-authorization"})


@dataclass
class DebugInfo:
    """Debug information for a request/response cycle.

    Captures the headers actually sent (including impersonation headers),
    timing, and the outcome of the exchange.
    """

    # Request info
    timestamp: datetime
    method: str
    url: str

    # Transport info
    backend: str = "httpx"
    profile: str | None = None
    proxy_configured: str | None = None
    timeout: float = 0.0

    # Request details
    request_headers: dict[str, str] = field(default_factory=dict)
    body_length: int = 0

    # Response details (populated after request)
    status_code: int | None = None
    response_headers: dict[str, str | list[str]] = field(default_factory=dict)
    content_length: int = 0
    content_preview: str | None = None
    elapsed: float = 0.0

    # Error info
    error: str | None = None
    timed_out: bool = False


class DebugOutput:
    """Handles verbose output formatting and dispatch."""

    def __init__(
        self,
        enabled: bool = False,
        output: TextIO | None = None,
        callback: Callable[[DebugInfo], None] | None = None,
    ):
        """Initialize debug output handler.

        Args:
            enabled: Whether verbose output is printed.
            output: Output stream (defaults to stderr).
            callback: Optional callback for programmatic capture. Called
                      for every exchange even when printing is disabled.
        """
        self.enabled = enabled
        self.output = output or sys.stderr
        self.callback = callback

    @property
    def active(self) -> bool:
        """Whether any debug consumer is attached."""
        return self.enabled or self.callback is not None

    def log_request(self, info: DebugInfo) -> None:
        """Log debug info for a request/response cycle.

        Args:
            info: Debug information to log.
        """
        if self.callback:
            self.callback(info)

        if self.enabled:
            self._print_formatted(info)

    def _print_formatted(self, info: DebugInfo) -> None:
        """Print formatted debug output to stream."""
        out = self.output
        sep = "=" * 80

        out.write(f"\n{sep}\n")
        out.write(f"[{info.timestamp.strftime('%Y-%m-%d %H:%M:%S')}] ")
        out.write(f"{info.method} {info.url}\n")
        out.write(f"{sep}\n")

        parts = [f"Backend: {info.backend}"]
        parts.append(f"Impersonate: {info.profile}" if info.profile else "Impersonate: OFF")
        parts.append(f"Timeout: {info.timeout:g}s")
        out.write(" | ".join(parts) + "\n")

        if info.request_headers:
            out.write("\n> Request Headers:\n")
            for header, value in info.request_headers.items():
                value = mask_header(header, value)
                if len(value) > 80:
                    value = value[:77] + "..."
                out.write(f"  {header}: {value}\n")

        if info.body_length:
            out.write(f"> Body: {info.body_length:,} bytes\n")

        if info.proxy_configured:
            out.write(f"> Proxy (not applied): {mask_proxy_password(info.proxy_configured)}\n")

        out.write("\n" + "-" * 80 + "\n")

        if info.timed_out:
            out.write(f"< TIMEOUT after {info.elapsed:.3f}s\n")
        elif info.error:
            out.write(f"< ERROR: {info.error}\n")
        elif info.status_code is not None:
            out.write(f"< HTTP {info.status_code}")
            if info.elapsed:
                out.write(f"  [{info.elapsed:.3f}s]")
            out.write("\n")

            if info.response_headers:
                out.write("\n< Response Headers:\n")
                for header, value in info.response_headers.items():
                    values = value if isinstance(value, list) else [value]
                    for item in values:
                        if len(item) > 80:
                            item = item[:77] + "..."
                        out.write(f"  {header}: {item}\n")

            if info.content_length:
                out.write(f"\n< Content Length: {info.content_length:,} chars\n")

            if info.content_preview:
                preview = info.content_preview
                if len(preview) > 200:
                    preview = preview[:197] + "..."
                preview = preview.replace("\n", "\\n").replace("\r", "\\r")
                out.write(f"< Body Preview: {preview}\n")

        out.write(f"{sep}\n")
        out.flush()


def mask_header(name: str, value: str) -> str:
    """Mask the value of credential-bearing headers."""
    if name.lower() not in SENSITIVE_HEADERS:
        return value
    scheme, _, secret = value.partition(" ")
    if secret and name.lower() != "cookie":
        return f"{scheme} ****"
    return "****"


def mask_proxy_password(proxy_url: str) -> str:
    """Mask password in proxy URL for display.

    Args:
        proxy_url: Proxy URL that may contain credentials.

    Returns:
        URL with password masked.
    """
    if "@" not in proxy_url:
        return proxy_url

    if "://" in proxy_url:
        protocol, rest = proxy_url.split("://", 1)
    else:
        protocol, rest = "", proxy_url

    creds, host = rest.rsplit("@", 1)
    if ":" in creds:
        user, _ = creds.split(":", 1)
        creds = f"{user}:****"
    rest = f"{creds}@{host}"

    if protocol:
        return f"{protocol}://{rest}"
    return rest
