"""httpx-based transport implementation."""

from __future__ import annotations

import ssl
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncIterator, Iterator

import httpx

from ..builder import HEADER_VALUE_ENCODING, PreparedRequest
from ..config import SSLOptions
from ..models import TransportError, TransportTimeout
from .base import BaseTransport, TransportResponse


@contextmanager
def _translate_errors() -> Iterator[None]:
    """Re-raise httpx and TLS setup failures as transport errors."""
    try:
        yield
    except httpx.TimeoutException as e:
        raise TransportTimeout(str(e) or type(e).__name__, original_error=e) from e
    except httpx.HTTPError as e:
        raise TransportError(str(e) or type(e).__name__, original_error=e) from e
    except OSError as e:
        # ssl.SSLError and missing certificate files
        raise TransportError(str(e), original_error=e) from e


def _wire_headers(headers: dict[str, str]) -> list[tuple[str, bytes]]:
    """Encode header values as latin-1 so httpx does not force ASCII."""
    return [(name, value.encode(HEADER_VALUE_ENCODING)) for name, value in headers.items()]


def build_ssl_context(options: SSLOptions) -> ssl.SSLContext | bool:
    """Translate SSLOptions into an httpx ``verify`` value.

    Args:
        options: TLS settings.

    Returns:
        A bool when no CA or client certificate is given, otherwise an
        SSLContext with the CA and certificate chain loaded.
    """
    if not options.ca and not options.cert:
        return options.verify

    if options.ca and options.ca.lstrip().startswith("-----BEGIN"):
        context = ssl.create_default_context(cadata=options.ca)
    else:
        context = ssl.create_default_context(cafile=options.ca)

    if not options.verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    if options.cert:
        context.load_cert_chain(options.cert, options.key)

    return context


class HttpxTransport(BaseTransport):
    """Transport using httpx.

    Every exchange gets its own AsyncClient, so connections are never
    pooled or reused across requests.
    """

    def __init__(self, wire: httpx.AsyncBaseTransport | None = None):
        """Initialize httpx transport.

        Args:
            wire: Optional httpx transport (e.g. httpx.MockTransport) used in
                  place of the network.
        """
        self._wire = wire

    @property
    def backend_name(self) -> str:
        """Get name of the underlying HTTP library."""
        return "httpx"

    def _create_client(self, request: PreparedRequest) -> httpx.AsyncClient:
        """Create a single-use client configured for one request."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(request.timeout),
            verify=build_ssl_context(request.ssl),
            follow_redirects=False,
            transport=self._wire,
        )

    @staticmethod
    async def _iter_text(response: httpx.Response) -> AsyncIterator[str]:
        """Yield decoded body chunks in arrival order."""
        with _translate_errors():
            async for chunk in response.aiter_text():
                yield chunk

    @asynccontextmanager
    async def stream(self, request: PreparedRequest) -> AsyncIterator[TransportResponse]:
        """Open an exchange for a prepared request.

        Args:
            request: The request to send.

        Yields:
            TransportResponse for the exchange.

        Raises:
            TransportError: On connection or transport errors.
            TransportTimeout: When the network stalls past request.timeout.
        """
        with _translate_errors():
            client = self._create_client(request)

        async with client:
            with _translate_errors():
                raw = await client.send(
                    client.build_request(
                        method=request.method.value,
                        url=request.url,
                        headers=_wire_headers(request.headers),
                        content=request.content,
                    ),
                    stream=True,
                )
            try:
                yield TransportResponse(
                    status_code=raw.status_code,
                    headers=list(raw.headers.multi_items()),
                    chunks=self._iter_text(raw),
                )
            finally:
                await raw.aclose()
