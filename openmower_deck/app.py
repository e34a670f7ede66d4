"""Main application entry-point for openmower-deck."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Mapping, Optional

import aiohttp

from .adapters import OpenMowerClient, SSETransport
from .aggregator import TelemetryAggregator
from .commands import CommandDispatcher
from .config import DeckConfig, load_config
from .core import CommandResult, Notifier, Scalar
from .health import HealthServer
from .logging import configure_logging
from .telemetry import HighLevelStatus, Status, default_channel_descriptors
from .telemetry.channels import HIGH_LEVEL_STATUS, STATUS

LOGGER = logging.getLogger(__name__)


class DeckApp:
    """Runs one dashboard session against an OpenMower GUI backend.

    Owns the shared aiohttp session, the SSE transport, the control client
    and the aggregator, and tears all of them down exactly once.
    """

    def __init__(
        self,
        config: Optional[DeckConfig] = None,
        *,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self._config = config or load_config()
        self._notifier = notifier
        self._aggregator: Optional[TelemetryAggregator] = None
        self._health_server: Optional[HealthServer] = None
        self._stop_event: Optional[asyncio.Event] = None

    @property
    def aggregator(self) -> Optional[TelemetryAggregator]:
        return self._aggregator

    async def run(self) -> None:
        """Attach the configured channels and report until stopped."""

        self._stop_event = asyncio.Event()
        config = self._config
        LOGGER.info("openmower-deck starting with config: %s", config.path)

        async with _client_session() as session:
            self._aggregator = build_aggregator(
                config, session=session, notifier=self._notifier
            )
            descriptors = default_channel_descriptors(config.channels.enabled)

            await self._start_health_server()
            try:
                async with self._aggregator.session(descriptors):
                    await self._display_loop()
            finally:
                await self._stop_health_server()

        LOGGER.info("openmower-deck stopped")

    def request_stop(self) -> None:
        if self._stop_event is not None:
            self._stop_event.set()

    @classmethod
    def start(cls, config: Optional[DeckConfig] = None) -> None:
        instance = cls(config=config)
        configure_logging(
            instance._config.logging.level,
            log_path=instance._config.logging.path,
            log_network=instance._config.logging.log_network,
        )
        try:
            asyncio.run(instance.run())
        except KeyboardInterrupt:
            LOGGER.info("openmower-deck received shutdown signal")

    async def _display_loop(self) -> None:
        assert self._stop_event is not None
        interval = self._config.display.refresh_seconds

        while not self._stop_event.is_set():
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._stop_event.wait(), timeout=interval)
            if self._aggregator is not None:
                LOGGER.info("%s", summarise_snapshot(self._aggregator.snapshot()))

    async def _start_health_server(self) -> None:
        health = self._config.health
        if not health.enabled or self._aggregator is None:
            return
        self._health_server = HealthServer(self._aggregator, health.host, health.port)
        await self._health_server.start()

    async def _stop_health_server(self) -> None:
        if self._health_server is not None:
            await self._health_server.stop()
            self._health_server = None


def build_aggregator(
    config: DeckConfig,
    *,
    session: aiohttp.ClientSession,
    notifier: Optional[Notifier] = None,
) -> TelemetryAggregator:
    transport = SSETransport(
        config.openmower.url,
        session=session,
        connect_timeout=config.channels.connect_timeout_seconds,
    )
    client = OpenMowerClient(
        config.openmower.url,
        session=session,
        timeout=config.commands.timeout_seconds,
    )
    return TelemetryAggregator(transport, CommandDispatcher(client), notifier=notifier)


async def run_command(
    config: DeckConfig,
    action: str,
    arguments: Optional[Mapping[str, Scalar]] = None,
) -> CommandResult:
    """Dispatch a single command outside of a dashboard session."""

    async with _client_session() as session:
        client = OpenMowerClient(
            config.openmower.url,
            session=session,
            timeout=config.commands.timeout_seconds,
        )
        return await CommandDispatcher(client).dispatch(action, arguments)


def summarise_snapshot(snapshot: Mapping[str, Any]) -> str:
    parts: list[str] = []

    high_level = snapshot.get(HIGH_LEVEL_STATUS)
    if isinstance(high_level, HighLevelStatus):
        parts.append(f"state={high_level.state_label}")
        if high_level.battery_percent is not None:
            parts.append(f"battery={high_level.battery_percent * 100:.0f}%")
        if high_level.gps_quality_percent is not None:
            parts.append(f"gps={high_level.gps_quality_percent * 100:.0f}%")
        parts.append(f"charging={'yes' if high_level.is_charging else 'no'}")
        parts.append(f"emergency={'yes' if high_level.emergency else 'no'}")

    status = snapshot.get(STATUS)
    if isinstance(status, Status):
        parts.append(f"mower={'on' if status.mower_on else 'off'}")
        if status.v_battery is not None:
            parts.append(f"vbat={status.v_battery:.2f}V")

    others = sorted(name for name in snapshot if name not in (HIGH_LEVEL_STATUS, STATUS))
    if others:
        parts.append(f"other={','.join(others)}")

    return " ".join(parts) if parts else "no telemetry yet"


@contextlib.asynccontextmanager
async def _client_session():
    session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))
    try:
        yield session
    finally:
        await session.close()
