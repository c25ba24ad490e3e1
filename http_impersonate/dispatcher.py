"""Dispatch a prepared request over a transport and map its outcome."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Iterable

from ._debug import DebugInfo, DebugOutput
from .builder import PreparedRequest
from .models import (
    HeaderValue,
    RequestError,
    Response,
    TimeoutError,
    TransportError,
    TransportTimeout,
)
from .transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Request timeout"


def collect_headers(items: Iterable[tuple[str, str]]) -> dict[str, HeaderValue]:
    """Fold raw header pairs into a mapping, keeping repeated names as lists.

    Args:
        items: Header (name, value) pairs in wire order.

    Returns:
        Dict keyed by lower-cased header name.
    """
    headers: dict[str, HeaderValue] = {}
    for name, value in items:
        name = name.lower()
        if name not in headers:
            headers[name] = value
            continue
        existing = headers[name]
        if isinstance(existing, list):
            existing.append(value)
        else:
            headers[name] = [existing, value]
    return headers


class Dispatcher:
    """Sends one prepared request per call and buffers the response.

    Each call has exactly one outcome: a Response, a RequestError, or a
    TimeoutError. There are no retries.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        debug: DebugOutput | None = None,
    ):
        """Initialize dispatcher.

        Args:
            transport: Transport used for exchanges (httpx if None).
            debug: Verbose output handler.
        """
        self._transport = transport or HttpxTransport()
        self._debug = debug or DebugOutput()

    @property
    def transport(self) -> Transport:
        """Get the transport in use."""
        return self._transport

    def _new_debug_info(self, request: PreparedRequest) -> DebugInfo:
        return DebugInfo(
            timestamp=datetime.now(),
            method=request.method.value,
            url=request.url,
            backend=getattr(self._transport, "backend_name", type(self._transport).__name__),
            profile=request.profile,
            proxy_configured=request.proxy.url if request.proxy else None,
            timeout=request.timeout,
            request_headers=dict(request.headers),
            body_length=len(request.content or b""),
        )

    def _log_failure(
        self,
        info: DebugInfo | None,
        error: Exception,
        elapsed: float,
        timed_out: bool = False,
    ) -> None:
        if info is None:
            return
        info.timed_out = timed_out
        info.error = str(error) or type(error).__name__
        info.elapsed = elapsed
        self._debug.log_request(info)

    async def dispatch(self, request: PreparedRequest) -> Response:
        """Send a request and wait for the complete response.

        Args:
            request: The prepared request.

        Returns:
            Response with status, headers and the full body.

        Raises:
            TimeoutError: If the transport timed out. The exchange is closed
                          and no further body chunks are read.
            RequestError: On any other failure while sending or reading,
                          including errors the transport did not
                          translate. Carries the request headers.
        """
        info = self._new_debug_info(request) if self._debug.active else None
        start_time = time.monotonic()

        try:
            async with self._transport.stream(request) as exchange:
                body: list[str] = []
                if exchange.chunks is not None:
                    async for chunk in exchange.chunks:
                        body.append(chunk)
                response = Response(
                    status=exchange.status_code,
                    headers=collect_headers(exchange.headers),
                    data="".join(body),
                )
        except TransportTimeout as e:
            elapsed = time.monotonic() - start_time
            logger.debug("%s %s timed out after %.3fs", request.method.value, request.url, elapsed)
            self._log_failure(info, e, elapsed, timed_out=True)
            raise TimeoutError(TIMEOUT_MESSAGE) from e
        except TransportError as e:
            elapsed = time.monotonic() - start_time
            logger.debug("%s %s failed: %s", request.method.value, request.url, e)
            self._log_failure(info, e, elapsed)
            raise RequestError(str(e), headers=dict(request.headers)) from e
        except Exception as e:
            # Anything a transport did not translate still ends as a RequestError
            elapsed = time.monotonic() - start_time
            message = str(e) or type(e).__name__
            logger.debug(
                "%s %s failed with untranslated %s: %s",
                request.method.value,
                request.url,
                type(e).__name__,
                message,
            )
            self._log_failure(info, e, elapsed)
            raise RequestError(message, headers=dict(request.headers)) from e

        elapsed = time.monotonic() - start_time
        logger.debug(
            "%s %s -> %d (%d chars, %.3fs)",
            request.method.value,
            request.url,
            response.status,
            len(response.data),
            elapsed,
        )
        if info:
            info.status_code = response.status
            info.response_headers = dict(response.headers)
            info.content_length = len(response.data)
            info.content_preview = response.data[:200] or None
            info.elapsed = elapsed
            self._debug.log_request(info)

        return response
