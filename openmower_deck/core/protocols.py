"""Protocol definitions for transports, control endpoints and callbacks."""

from __future__ import annotations

from typing import AsyncIterator, Callable, Optional, Protocol

from .models import CommandRequest, ControlResponse


ConnectedCallback = Callable[[str], None]
MessageCallback = Callable[[str, object], None]
DisconnectedCallback = Callable[[str, Optional[BaseException]], None]


class TransportHandle(Protocol):
    """One live push connection, exclusively owned by a channel."""

    def __aiter__(self) -> AsyncIterator[str]:
        """Yield raw message texts in transport order until the stream ends."""
        ...

    @property
    def closed(self) -> bool:
        ...

    def close(self) -> None:
        """Release the connection immediately."""
        ...


class PushTransport(Protocol):
    """Minimal contract for opening server-pushed message streams."""

    async def open(self, endpoint: str) -> TransportHandle:
        """Open a stream at ``endpoint``.

        Returns once the handshake completes. Raises on any failure to
        establish the stream.
        """
        ...


class ControlEndpoint(Protocol):
    """Remote interface accepting named actions with arguments."""

    async def call(self, request: CommandRequest) -> ControlResponse:
        """Send one request and return whatever the endpoint answered.

        Raises:
            ControlTransportError: If no response could be obtained.
        """
        ...


class Notifier(Protocol):
    """Operator-facing notification surface."""

    def info(self, message: str, description: Optional[str] = None) -> None:
        ...

    def success(self, message: str, description: Optional[str] = None) -> None:
        ...

    def error(self, message: str, description: Optional[str] = None) -> None:
        ...
