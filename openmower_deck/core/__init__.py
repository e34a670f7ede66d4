"""Core primitives for openmower-deck."""

from .models import (
    ChannelDescriptor,
    ChannelState,
    CommandRequest,
    CommandResult,
    ControlResponse,
    DecodeFunction,
    Scalar,
)
from .protocols import (
    ConnectedCallback,
    ControlEndpoint,
    DisconnectedCallback,
    MessageCallback,
    Notifier,
    PushTransport,
    TransportHandle,
)
from .utils import DecodeError, parse_json_object

__all__ = [
    "ChannelDescriptor",
    "ChannelState",
    "CommandRequest",
    "CommandResult",
    "ConnectedCallback",
    "ControlEndpoint",
    "ControlResponse",
    "DecodeError",
    "DecodeFunction",
    "DisconnectedCallback",
    "MessageCallback",
    "Notifier",
    "PushTransport",
    "Scalar",
    "TransportHandle",
    "parse_json_object",
]
