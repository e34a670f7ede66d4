"""Subscription manager owning a set of independent push channels."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from ..core import (
    ChannelDescriptor,
    ChannelState,
    ConnectedCallback,
    DisconnectedCallback,
    MessageCallback,
    PushTransport,
)
from .channel import Channel

LOGGER = logging.getLogger(__name__)


class SubscriptionManager:
    """Opens, observes and closes named channels over one transport.

    Connect, message and disconnect events from every channel are routed to
    the three callback slots given here, each called with the channel name
    first. Stopped channels stay registered in the ``closed`` state so their
    last value and error remain queryable.
    """

    def __init__(
        self,
        transport: PushTransport,
        *,
        on_connected: Optional[ConnectedCallback] = None,
        on_message: Optional[MessageCallback] = None,
        on_disconnected: Optional[DisconnectedCallback] = None,
    ) -> None:
        self._transport = transport
        self.on_connected = on_connected
        self.on_message = on_message
        self.on_disconnected = on_disconnected
        self._channels: dict[str, Channel] = {}
        self._retired: list[Channel] = []

    @property
    def channels(self) -> list[Channel]:
        return list(self._channels.values())

    def get(self, name: str) -> Optional[Channel]:
        return self._channels.get(name)

    def states(self) -> dict[str, ChannelState]:
        return {name: channel.state for name, channel in self._channels.items()}

    def start(self, descriptor: ChannelDescriptor) -> asyncio.Task[None]:
        """Start the channel described by ``descriptor``.

        A channel that is already connecting or open is left alone and its
        existing connection task is returned.

        Raises:
            ValueError: If an active channel with the same name was started
                from a different descriptor.
        """

        channel = self._channels.get(descriptor.name)
        if channel is not None and channel.descriptor != descriptor:
            if channel.is_active:
                raise ValueError(
                    f"Channel {descriptor.name!r} is active with a different descriptor"
                )
            # the replaced channel's task may still be unwinding from stop()
            self._retired.append(channel)
            channel = None

        if channel is None:
            channel = Channel(
                descriptor,
                self._transport,
                on_connected=self._emit_connected,
                on_message=self._emit_message,
                on_disconnected=self._emit_disconnected,
            )
            self._channels[descriptor.name] = channel

        return channel.start()

    def stop(self, name: str) -> None:
        """Stop one channel; unknown or already closed names are a no-op."""

        channel = self._channels.get(name)
        if channel is None:
            LOGGER.debug("Ignoring stop for unknown channel %s", name)
            return
        channel.stop()

    def stop_all(self) -> None:
        """Stop every managed channel, whatever state it is in."""

        for channel in list(self._channels.values()):
            channel.stop()

    async def wait_closed(self) -> None:
        retired, self._retired = self._retired, []
        for channel in retired + list(self._channels.values()):
            await channel.wait_closed()

    # ------------------------------------------------------------------
    # Fan-out
    # ------------------------------------------------------------------
    def _emit_connected(self, name: str) -> None:
        if self.on_connected is not None:
            self.on_connected(name)

    def _emit_message(self, name: str, value: Any) -> None:
        if self.on_message is not None:
            self.on_message(name, value)

    def _emit_disconnected(self, name: str, error: Optional[BaseException]) -> None:
        if self.on_disconnected is not None:
            self.on_disconnected(name, error)
