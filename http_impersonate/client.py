"""Callback-style and awaitable clients sharing one dispatch pipeline."""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Callable, ClassVar, TextIO

from ._debug import DebugInfo, DebugOutput
from .builder import Method, PreparedRequest, build_request
from .config import ClientOptions, OptionsLike, coerce_options, merge_options
from .dispatcher import Dispatcher
from .models import HTTPClientError, RequestError, Response, TimeoutError
from .transport import Transport

logger = logging.getLogger(__name__)

Callback = Callable[[Exception | None, Response | None], Any]


class BaseClient:
    """Shared configuration and request preparation for both clients.

    Holds the client-level default options (read-only after construction)
    and the dispatcher. Merging and building happen synchronously, before
    any network activity, so configuration errors surface immediately.
    """

    def __init__(
        self,
        options: OptionsLike = None,
        *,
        transport: Transport | None = None,
        verbose: bool = False,
        debug_output: TextIO | None = None,
        debug_callback: Callable[[DebugInfo], None] | None = None,
    ):
        """Initialize client.

        Args:
            options: Default options for every call (ClientOptions or a
                     mapping of its field names).
            transport: Transport for exchanges (httpx if None).
            verbose: Print a summary of every exchange.
            debug_output: Stream for verbose output (defaults to stderr).
            debug_callback: Receives a DebugInfo for every exchange.
        """
        self._options = coerce_options(options)
        self._debug = DebugOutput(
            enabled=verbose,
            output=debug_output,
            callback=debug_callback,
        )
        self._dispatcher = Dispatcher(transport, debug=self._debug)
        self._closed = False

    @property
    def default_options(self) -> ClientOptions:
        """Get the client-level default options."""
        return self._options

    @property
    def is_closed(self) -> bool:
        """Check if client has been closed."""
        return self._closed

    def _prepare(
        self,
        method: Method | str,
        url: str,
        body: Any = None,
        options: OptionsLike = None,
    ) -> PreparedRequest:
        """Merge per-call options over defaults and build the request."""
        if self._closed:
            raise RuntimeError("Client is closed")
        effective = merge_options(self._options, coerce_options(options))
        return build_request(method, url, body, effective)


class Client(BaseClient):
    """Callback-style client.

    Every verb takes a ``callback(error, response)`` that is invoked exactly
    once: with ``(None, Response)`` on success or ``(RequestError |
    TimeoutError, None)`` on failure. The request runs on a shared worker
    thread; the returned Future resolves after the callback has run.

    Examples:
        def on_done(err, response):
            if err:
                print("failed:", err)
            else:
                print(response.status, response.text())

        client = Client({"impersonate": "firefox", "impersonate_os": "linux"})
        client.get("https://example.com", callback=on_done)
    """

    # Shared executor for dispatches (class-level)
    _executor: ClassVar[concurrent.futures.ThreadPoolExecutor | None] = None
    _executor_lock: ClassVar[threading.Lock] = threading.Lock()
    max_workers: ClassVar[int] = 8

    @classmethod
    def _get_executor(cls) -> concurrent.futures.ThreadPoolExecutor:
        """Get or create the shared thread pool executor.

        Uses double-checked locking to safely initialize the shared executor.
        """
        if cls._executor is None:
            with cls._executor_lock:
                if cls._executor is None:
                    cls._executor = concurrent.futures.ThreadPoolExecutor(
                        max_workers=cls.max_workers,
                        thread_name_prefix="http_impersonate",
                    )
        return cls._executor

    @classmethod
    def shutdown_executor(cls, wait: bool = True) -> None:
        """Shut down the shared thread pool executor.

        Call this when you're done with all Client instances. A new
        executor is created on the next request.
        """
        with cls._executor_lock:
            if cls._executor is not None:
                cls._executor.shutdown(wait=wait)
                cls._executor = None

    def _run(self, request: PreparedRequest, callback: Callback) -> Response | None:
        """Dispatch in a fresh event loop on a worker thread, then notify.

        The callback runs exactly once per request. An exception raised by
        the callback itself is logged and re-raised into the Future.
        """
        error: HTTPClientError | None = None
        response: Response | None = None
        try:
            response = asyncio.run(self._dispatcher.dispatch(request))
        except (RequestError, TimeoutError) as e:
            error = e
        except Exception as e:
            error = RequestError(str(e) or type(e).__name__, headers=dict(request.headers))
            error.__cause__ = e

        try:
            callback(error, response)
        except Exception:
            logger.exception(
                "Callback for %s %s raised",
                request.method.value,
                request.url,
            )
            raise
        return response

    def request(
        self,
        method: Method | str,
        url: str,
        body: Any = None,
        options: OptionsLike = None,
        callback: Callback | None = None,
    ) -> concurrent.futures.Future:
        """Make an HTTP request.

        Args:
            method: HTTP method.
            url: Absolute http(s) URL.
            body: Request body (str/bytes sent as-is, anything else as JSON).
            options: Per-call options layered over the client defaults.
            callback: Called as ``callback(error, response)``.

        Returns:
            Future resolving to the Response (None on failure) once the
            callback has returned.

        Raises:
            TypeError: If callback is missing or not callable.
            InvalidURL: If url is not an absolute http(s) URL.
            UnsupportedImpersonationTarget: For an unknown browser or OS.
        """
        if callback is None or not callable(callback):
            raise TypeError("Callback is required for Client")
        prepared = self._prepare(method, url, body, options)
        return self._get_executor().submit(self._run, prepared, callback)

    def get(
        self,
        url: str,
        options: OptionsLike = None,
        callback: Callback | None = None,
    ) -> concurrent.futures.Future:
        """Make a GET request."""
        return self.request(Method.GET, url, None, options, callback)

    def post(
        self,
        url: str,
        body: Any = None,
        options: OptionsLike = None,
        callback: Callback | None = None,
    ) -> concurrent.futures.Future:
        """Make a POST request."""
        return self.request(Method.POST, url, body, options, callback)

    def put(
        self,
        url: str,
        body: Any = None,
        options: OptionsLike = None,
        callback: Callback | None = None,
    ) -> concurrent.futures.Future:
        """Make a PUT request."""
        return self.request(Method.PUT, url, body, options, callback)

    def patch(
        self,
        url: str,
        body: Any = None,
        options: OptionsLike = None,
        callback: Callback | None = None,
    ) -> concurrent.futures.Future:
        """Make a PATCH request."""
        return self.request(Method.PATCH, url, body, options, callback)

    def delete(
        self,
        url: str,
        options: OptionsLike = None,
        callback: Callback | None = None,
    ) -> concurrent.futures.Future:
        """Make a DELETE request."""
        return self.request(Method.DELETE, url, None, options, callback)

    def head(
        self,
        url: str,
        options: OptionsLike = None,
        callback: Callback | None = None,
    ) -> concurrent.futures.Future:
        """Make a HEAD request."""
        return self.request(Method.HEAD, url, None, options, callback)

    def options(
        self,
        url: str,
        options: OptionsLike = None,
        callback: Callback | None = None,
    ) -> concurrent.futures.Future:
        """Make an OPTIONS request."""
        return self.request(Method.OPTIONS, url, None, options, callback)

    def close(self) -> None:
        """Refuse further requests. In-flight requests still complete."""
        self._closed = True

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class AsyncClient(BaseClient):
    """Awaitable client.

    Every verb is a coroutine returning a Response, or raising RequestError
    or TimeoutError. Status codes (including 4xx/5xx) never raise.

    Examples:
        async with AsyncClient({"impersonate": "chrome"}) as client:
            response = await client.get("https://example.com")
            print(response.status, response.json())
    """

    async def request(
        self,
        method: Method | str,
        url: str,
        body: Any = None,
        options: OptionsLike = None,
    ) -> Response:
        """Make an HTTP request.

        Args:
            method: HTTP method.
            url: Absolute http(s) URL.
            body: Request body (str/bytes sent as-is, anything else as JSON).
            options: Per-call options layered over the client defaults.

        Returns:
            Response object.

        Raises:
            RequestError: On transport failure.
            TimeoutError: When the request times out.
            InvalidURL: If url is not an absolute http(s) URL.
            UnsupportedImpersonationTarget: For an unknown browser or OS.
        """
        prepared = self._prepare(method, url, body, options)
        return await self._dispatcher.dispatch(prepared)

    async def get(self, url: str, options: OptionsLike = None) -> Response:
        """Make a GET request."""
        return await self.request(Method.GET, url, None, options)

    async def post(self, url: str, body: Any = None, options: OptionsLike = None) -> Response:
        """Make a POST request."""
        return await self.request(Method.POST, url, body, options)

    async def put(self, url: str, body: Any = None, options: OptionsLike = None) -> Response:
        """Make a PUT request."""
        return await self.request(Method.PUT, url, body, options)

    async def patch(self, url: str, body: Any = None, options: OptionsLike = None) -> Response:
        """Make a PATCH request."""
        return await self.request(Method.PATCH, url, body, options)

    async def delete(self, url: str, options: OptionsLike = None) -> Response:
        """Make a DELETE request."""
        return await self.request(Method.DELETE, url, None, options)

    async def head(self, url: str, options: OptionsLike = None) -> Response:
        """Make a HEAD request."""
        return await self.request(Method.HEAD, url, None, options)

    async def options(self, url: str, options: OptionsLike = None) -> Response:
        """Make an OPTIONS request."""
        return await self.request(Method.OPTIONS, url, None, options)

    async def close_async(self) -> None:
        """Refuse further requests."""
        self._closed = True

    async def __aenter__(self) -> "AsyncClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close_async()
