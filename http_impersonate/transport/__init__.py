"""Transport layer implementations."""

from .base import BaseTransport, Transport, TransportResponse
from .httpx_transport import HttpxTransport

__all__ = ["BaseTransport", "Transport", "TransportResponse", "HttpxTransport"]
