"""Adapter modules for external integrations."""

from .openmower import ControlTransportError, OpenMowerClient
from .sse import SSEConnection, SSEDecoder, SSETransport, ServerSentEvent

__all__ = [
    "ControlTransportError",
    "OpenMowerClient",
    "SSEConnection",
    "SSEDecoder",
    "SSETransport",
    "ServerSentEvent",
]
