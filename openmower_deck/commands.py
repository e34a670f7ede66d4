"""Single-shot command dispatch to the mower control plane."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from .adapters.openmower import ControlTransportError
from .core import CommandRequest, CommandResult, ControlEndpoint, ControlResponse, Scalar

LOGGER = logging.getLogger(__name__)


class MowerCommandNames:
    """Action names understood by the OpenMower control endpoint."""

    START = "mower_start"
    """Start (or continue) mowing."""

    HOME = "mower_home"
    """Return to the docking station."""

    S1 = "mower_s1"
    """User-defined shortcut action 1."""

    S2 = "mower_s2"
    """User-defined shortcut action 2."""

    EMERGENCY = "emergency"
    """Set or reset the emergency stop. Argument: ``emergency`` (1/0)."""

    MOW = "mow"
    """Blade motor control. Arguments: ``mow_enabled`` (1/0), ``mow_direction``."""


class CommandDispatcher:
    """Sends one named action per call and normalises the outcome.

    There is no retry, queueing or de-duplication: every call performs
    exactly one request. Remote rejections and transport failures come back
    as failed :class:`CommandResult` values; anything else raised is a bug
    in the caller or the dispatcher and propagates.
    """

    def __init__(self, endpoint: ControlEndpoint) -> None:
        self._endpoint = endpoint

    async def dispatch(
        self, action: str, arguments: Optional[Mapping[str, Scalar]] = None
    ) -> CommandResult:
        request = CommandRequest(action=action, arguments=arguments or {})
        LOGGER.debug("Dispatching %s %s", request.action, dict(request.arguments))

        try:
            response = await self._endpoint.call(request)
        except ControlTransportError as exc:
            LOGGER.warning("Command %s failed to send: %s", request.action, exc)
            return CommandResult.failure(str(exc))

        result = _interpret(response)
        if result.ok:
            LOGGER.info("Command %s accepted", request.action)
        else:
            LOGGER.warning("Command %s rejected: %s", request.action, result.message)
        return result


class MowerCommands:
    """Convenience wrappers around :meth:`CommandDispatcher.dispatch`."""

    def __init__(self, dispatcher: CommandDispatcher) -> None:
        self._dispatcher = dispatcher

    async def start(self) -> CommandResult:
        return await self._dispatcher.dispatch(MowerCommandNames.START)

    async def home(self) -> CommandResult:
        return await self._dispatcher.dispatch(MowerCommandNames.HOME)

    async def s1(self) -> CommandResult:
        return await self._dispatcher.dispatch(MowerCommandNames.S1)

    async def s2(self) -> CommandResult:
        return await self._dispatcher.dispatch(MowerCommandNames.S2)

    async def emergency(self, enabled: bool) -> CommandResult:
        return await self._dispatcher.dispatch(
            MowerCommandNames.EMERGENCY, {"emergency": 1 if enabled else 0}
        )

    async def mow(self, enabled: bool, direction: int = 0) -> CommandResult:
        return await self._dispatcher.dispatch(
            MowerCommandNames.MOW,
            {"mow_enabled": 1 if enabled else 0, "mow_direction": direction},
        )


def _interpret(response: ControlResponse) -> CommandResult:
    error = response.error_message
    if error is not None:
        return CommandResult.failure(error)

    if response.status >= 400:
        message = f"Control endpoint returned HTTP {response.status}"
        if isinstance(response.payload, str) and response.payload:
            message = f"{message}: {response.payload}"
        return CommandResult.failure(message)

    return CommandResult.success()
