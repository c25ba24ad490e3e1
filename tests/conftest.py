"""Shared test fixtures and configuration."""

from contextlib import asynccontextmanager
from typing import Generator

import httpx
import pytest

from http_impersonate import AsyncClient, Client, ClientOptions
from http_impersonate.builder import PreparedRequest
from http_impersonate.transport import BaseTransport, HttpxTransport, TransportResponse


class FakeTransport(BaseTransport):
    """Scripted transport for testing without network.

    Yields ``chunks`` one at a time. When ``error`` is set it is raised
    before chunk number ``fail_after`` (or on open when fail_after is None).
    """

    def __init__(
        self,
        status: int = 200,
        headers: list[tuple[str, str]] | None = None,
        chunks: tuple[str, ...] = ("test data",),
        error: Exception | None = None,
        fail_after: int | None = None,
    ):
        self.status = status
        self.headers = headers or []
        self.chunks = chunks
        self.error = error
        self.fail_after = fail_after
        self.requests: list[PreparedRequest] = []
        self.consumed: list[str] = []
        self.closed = 0

    @property
    def backend_name(self) -> str:
        return "fake"

    async def _iter_chunks(self):
        for index, chunk in enumerate(self.chunks):
            if self.error is not None and index == self.fail_after:
                raise self.error
            self.consumed.append(chunk)
            yield chunk

    @asynccontextmanager
    async def stream(self, request: PreparedRequest):
        self.requests.append(request)
        if self.error is not None and self.fail_after is None:
            raise self.error
        try:
            yield TransportResponse(
                status_code=self.status,
                headers=list(self.headers),
                chunks=self._iter_chunks(),
            )
        finally:
            self.closed += 1


# ============== Transport Fixtures ==============

@pytest.fixture
def fake_transport() -> FakeTransport:
    """Transport returning 200 with body 'test data'."""
    return FakeTransport()


@pytest.fixture
def captured() -> list[httpx.Request]:
    """Requests seen by the mock wire."""
    return []


@pytest.fixture
def mock_wire(captured: list[httpx.Request]) -> httpx.MockTransport:
    """httpx mock transport echoing a small JSON body."""

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(
            200,
            headers=[("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("X-Server", "mock")],
            text='{"ok": true}',
        )

    return httpx.MockTransport(handler)


@pytest.fixture
def httpx_transport(mock_wire: httpx.MockTransport) -> HttpxTransport:
    """HttpxTransport bound to the mock wire."""
    return HttpxTransport(wire=mock_wire)


# ============== Options Fixtures ==============

@pytest.fixture
def chrome_options() -> ClientOptions:
    """Chrome on Windows impersonation."""
    return ClientOptions(impersonate="chrome", impersonate_os="windows")


# ============== Client Fixtures ==============

@pytest.fixture
def client(fake_transport: FakeTransport) -> Generator[Client, None, None]:
    """Callback client with fake transport."""
    client = Client(transport=fake_transport)
    yield client
    client.close()


@pytest.fixture
def async_client(fake_transport: FakeTransport) -> AsyncClient:
    """Async client with fake transport."""
    return AsyncClient(transport=fake_transport)


@pytest.fixture(scope="session", autouse=True)
def shutdown_executor() -> Generator[None, None, None]:
    """Release the callback client's worker threads after the run."""
    yield
    Client.shutdown_executor()
