"""Domain models for telemetry channels and commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

Scalar = Union[str, int, float, bool, None]

DecodeFunction = Callable[[str], Any]


class ChannelState(str, Enum):
    """Lifecycle state of a single push channel."""

    IDLE = "idle"
    """Created but never started."""

    CONNECTING = "connecting"
    """Transport open requested, handshake not yet complete."""

    OPEN = "open"
    """Handshake complete, messages are flowing."""

    CLOSED = "closed"
    """Stopped by the caller; no transport handle held."""

    ERRORED = "errored"
    """Transport failed or closed without being asked to."""


@dataclass(slots=True, frozen=True)
class ChannelDescriptor:
    name: str
    endpoint: str
    decode: DecodeFunction
    label: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.label or self.name


@dataclass(slots=True, frozen=True)
class CommandRequest:
    action: str
    arguments: Mapping[str, Scalar] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.action, str) or not self.action.strip():
            raise ValueError("Command action must be a non-empty string")

        arguments = dict(self.arguments)
        for key, value in arguments.items():
            if not isinstance(key, str):
                raise TypeError(f"Command argument keys must be strings, got {key!r}")
            if value is not None and not isinstance(value, (str, int, float, bool)):
                raise TypeError(
                    f"Command argument {key!r} must be a scalar, got {type(value).__name__}"
                )
        object.__setattr__(self, "arguments", MappingProxyType(arguments))

    def as_payload(self) -> dict[str, Scalar]:
        return dict(self.arguments)


@dataclass(slots=True, frozen=True)
class CommandResult:
    ok: bool
    message: Optional[str] = None

    @classmethod
    def success(cls) -> "CommandResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, message: str) -> "CommandResult":
        return cls(ok=False, message=message)


@dataclass(slots=True, frozen=True)
class ControlResponse:
    """Raw outcome of one call against the control endpoint."""

    status: int
    payload: Optional[Any] = None

    @property
    def error_message(self) -> Optional[str]:
        """The body's ``error`` field, or None when it is missing, null or empty.

        The backend's GUI only treats a truthy error as a failure, so a blank
        ``error`` alongside a 2xx status still counts as success.
        """
        if not isinstance(self.payload, Mapping):
            return None
        error = self.payload.get("error")
        if error is None or error == "":
            return None
        if isinstance(error, str):
            return error
        return str(error)
