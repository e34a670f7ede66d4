"""Telemetry aggregator: channels plus the command path behind one interface."""

from __future__ import annotations

import contextlib
import logging
from types import MappingProxyType
from typing import Any, AsyncIterator, Iterable, Mapping, Optional

from .commands import CommandDispatcher
from .core import (
    ChannelDescriptor,
    ChannelState,
    CommandResult,
    Notifier,
    PushTransport,
    Scalar,
)
from .notifications import LoggingNotifier
from .telemetry import SubscriptionManager

LOGGER = logging.getLogger(__name__)


class TelemetryAggregator:
    """Composition root consumed by the presentation layer.

    One instance lives for one dashboard session: ``attach`` when the
    dashboard becomes visible, ``detach`` exactly once when it goes away.
    The snapshot is written only by channel message callbacks, one key per
    channel, all on the event loop thread.
    """

    def __init__(
        self,
        transport: PushTransport,
        dispatcher: CommandDispatcher,
        *,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._notifier: Notifier = notifier or LoggingNotifier()
        self._manager = SubscriptionManager(
            transport,
            on_connected=self._on_connected,
            on_message=self._on_message,
            on_disconnected=self._on_disconnected,
        )
        self._snapshot: dict[str, Any] = {}
        self._labels: dict[str, str] = {}
        self._attached = False

    @property
    def manager(self) -> SubscriptionManager:
        return self._manager

    @property
    def attached(self) -> bool:
        return self._attached

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def attach(self, descriptors: Iterable[ChannelDescriptor]) -> None:
        """Start every listed channel; connections complete in the background.

        If any channel cannot be started, the channels already started are
        stopped again before the error propagates.
        """

        descriptors = list(descriptors)
        self._attached = True
        try:
            for descriptor in descriptors:
                self._labels[descriptor.name] = descriptor.display_name
                self._manager.start(descriptor)
        except Exception:
            LOGGER.error("Attach failed, stopping channels started so far")
            self.detach()
            raise

        LOGGER.info(
            "Attached %d channel(s): %s",
            len(descriptors),
            ", ".join(descriptor.name for descriptor in descriptors),
        )

    def detach(self) -> None:
        """Stop every channel. Repeated calls are no-ops."""

        if not self._attached:
            return

        self._attached = False
        self._manager.stop_all()
        LOGGER.info("Detached all channels")

    async def aclose(self) -> None:
        """Detach and wait for all connection tasks to unwind."""

        self.detach()
        await self._manager.wait_closed()

    @contextlib.asynccontextmanager
    async def session(
        self, descriptors: Iterable[ChannelDescriptor]
    ) -> AsyncIterator["TelemetryAggregator"]:
        try:
            self.attach(descriptors)
            yield self
        finally:
            await self.aclose()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def snapshot(self) -> Mapping[str, Any]:
        """Return the latest value per channel that has produced one."""

        return MappingProxyType(dict(self._snapshot))

    def channel_states(self) -> dict[str, ChannelState]:
        return self._manager.states()

    def channel_errors(self) -> dict[str, Optional[BaseException]]:
        return {channel.name: channel.last_error for channel in self._manager.channels}

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    async def send_command(
        self, action: str, arguments: Optional[Mapping[str, Scalar]] = None
    ) -> CommandResult:
        """Dispatch one command and notify the operator of the outcome."""

        result = await self._dispatcher.dispatch(action, arguments)
        if result.ok:
            self._notifier.success("Command sent")
        else:
            self._notifier.error("Unable to send command", result.message)
        return result

    # ------------------------------------------------------------------
    # Channel callbacks
    # ------------------------------------------------------------------
    def _on_connected(self, name: str) -> None:
        self._notifier.info(f"{self._label(name)} Stream connected")

    def _on_message(self, name: str, value: Any) -> None:
        self._snapshot[name] = value

    def _on_disconnected(self, name: str, error: Optional[BaseException]) -> None:
        self._notifier.info(
            f"{self._label(name)} Stream closed",
            str(error) if error is not None else None,
        )

    def _label(self, name: str) -> str:
        return self._labels.get(name, name)
