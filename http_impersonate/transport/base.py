"""Abstract transport protocol for HTTP exchanges."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import AsyncContextManager, AsyncIterator, Protocol, runtime_checkable

from ..builder import PreparedRequest


@dataclass
class TransportResponse:
    """Response head plus a body chunk iterator from an open exchange.

    Attributes:
        status_code: HTTP status code.
        headers: Raw header pairs in wire order, repeated names kept.
        chunks: Async iterator over decoded body text chunks.
    """

    status_code: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    chunks: AsyncIterator[str] | None = None


@runtime_checkable
class Transport(Protocol):
    """Protocol defining the transport interface.

    A transport opens one exchange per request. Leaving the returned
    context closes the exchange, aborting it if the body is unread.
    Failures are raised as TransportError, timeouts as TransportTimeout.
    """

    def stream(self, request: PreparedRequest) -> AsyncContextManager[TransportResponse]:
        """Open an exchange for a prepared request.

        Args:
            request: The request to send.

        Returns:
            Async context manager yielding the response head and body chunks.

        Raises:
            TransportError: On connection or transport errors.
            TransportTimeout: When the network stalls past request.timeout.
        """
        ...


class BaseTransport(ABC):
    """Abstract base class for transport implementations."""

    @abstractmethod
    def stream(self, request: PreparedRequest) -> AsyncContextManager[TransportResponse]:
        """Open an exchange for a prepared request."""
        raise NotImplementedError

    @property
    def backend_name(self) -> str:
        """Name of the underlying HTTP library."""
        return type(self).__name__
