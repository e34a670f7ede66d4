"""A single push-channel subscription and its connection lifecycle."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Callable, Optional

from ..core import (
    ChannelDescriptor,
    ChannelState,
    ConnectedCallback,
    DisconnectedCallback,
    MessageCallback,
    PushTransport,
    TransportHandle,
)

LOGGER = logging.getLogger(__name__)


class ChannelClosedError(ConnectionError):
    """Raised into ``last_error`` when the remote side ends a stream."""


class Channel:
    """One named subscription owning its transport handle and latest value.

    State machine::

        idle -> connecting -> open -> closed
        connecting | open -> errored -> closed

    ``stop`` is valid from every state and always ends in ``closed``. There
    is no automatic reconnect; leaving ``errored`` or ``closed`` requires a
    new ``start``.
    """

    def __init__(
        self,
        descriptor: ChannelDescriptor,
        transport: PushTransport,
        *,
        on_connected: Optional[ConnectedCallback] = None,
        on_message: Optional[MessageCallback] = None,
        on_disconnected: Optional[DisconnectedCallback] = None,
    ) -> None:
        self._descriptor = descriptor
        self._transport = transport
        self.on_connected = on_connected
        self.on_message = on_message
        self.on_disconnected = on_disconnected

        self._state = ChannelState.IDLE
        self._latest_value: Any = None
        self._last_error: Optional[BaseException] = None
        self._handle: Optional[TransportHandle] = None
        self._task: Optional[asyncio.Task[None]] = None
        # set while a session that reached OPEN still owes its disconnect event
        self._disconnect_pending = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def descriptor(self) -> ChannelDescriptor:
        return self._descriptor

    @property
    def name(self) -> str:
        return self._descriptor.name

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def latest_value(self) -> Any:
        return self._latest_value

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._last_error

    @property
    def has_handle(self) -> bool:
        return self._handle is not None

    @property
    def is_active(self) -> bool:
        return self._state in (ChannelState.CONNECTING, ChannelState.OPEN)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def start(self) -> asyncio.Task[None]:
        """Begin connecting; returns the task driving the connection.

        Must be called from a running event loop. Starting a channel that is
        already connecting or open returns the existing task.
        """

        if self.is_active and self._task is not None:
            return self._task

        self._release_handle()
        self._last_error = None
        self._disconnect_pending = False
        self._state = ChannelState.CONNECTING
        LOGGER.info(
            "Opening %s channel at %s", self.name, self._descriptor.endpoint
        )
        self._task = asyncio.create_task(self._run(), name=f"channel:{self.name}")
        return self._task

    def stop(self) -> None:
        """Release the transport handle and move to ``closed``.

        Idempotent. An in-flight connect is abandoned, not awaited.
        """

        task = self._task
        if task is not None and not task.done():
            task.cancel()

        self._release_handle()

        if self._state is not ChannelState.CLOSED:
            LOGGER.info("%s channel closed (was %s)", self.name, self._state.value)
            self._state = ChannelState.CLOSED

        self._fire_disconnected(None)

    async def wait_closed(self) -> None:
        """Wait for the connection task to finish after ``stop``."""

        task = self._task
        if task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _run(self) -> None:
        try:
            handle = await self._transport.open(self._descriptor.endpoint)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._fail(exc)
            return

        if self._state is not ChannelState.CONNECTING:
            handle.close()
            return

        self._handle = handle
        self._state = ChannelState.OPEN
        self._disconnect_pending = True
        LOGGER.info("%s channel connected", self.name)
        self._invoke(self.on_connected, self.name)

        try:
            async for raw in handle:
                self._handle_raw(raw)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._fail(exc)
            return

        self._fail(ChannelClosedError(f"{self.name} stream closed by remote"))

    def _handle_raw(self, raw: str) -> None:
        if self._state is not ChannelState.OPEN:
            return

        try:
            value = self._descriptor.decode(raw)
        except Exception as exc:
            self._last_error = exc
            LOGGER.warning("Discarding undecodable %s message: %s", self.name, exc)
            return

        self._latest_value = value
        self._invoke(self.on_message, self.name, value)

    def _fail(self, exc: BaseException) -> None:
        if self._state is ChannelState.CLOSED:
            return

        self._last_error = exc
        self._release_handle()
        LOGGER.warning(
            "%s channel errored while %s: %s", self.name, self._state.value, exc
        )
        self._state = ChannelState.ERRORED
        self._fire_disconnected(exc)

    def _release_handle(self) -> None:
        handle = self._handle
        self._handle = None
        if handle is not None and not handle.closed:
            handle.close()

    def _fire_disconnected(self, error: Optional[BaseException]) -> None:
        if not self._disconnect_pending:
            return
        self._disconnect_pending = False
        self._invoke(self.on_disconnected, self.name, error)

    def _invoke(self, callback: Optional[Callable[..., Any]], *args: Any) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            LOGGER.exception("%s channel callback failed", self.name)
