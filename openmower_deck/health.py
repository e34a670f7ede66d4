"""Health and snapshot HTTP endpoint for openmower-deck."""

from __future__ import annotations

import contextlib
import dataclasses
import logging
from typing import Any, Dict, Optional

from aiohttp import web

from .aggregator import TelemetryAggregator
from .core import ChannelState

LOGGER = logging.getLogger(__name__)


def build_health_payload(aggregator: TelemetryAggregator) -> Dict[str, object]:
    errors = aggregator.channel_errors()
    channels: list[Dict[str, object]] = []
    for name, state in aggregator.channel_states().items():
        error = errors.get(name)
        channels.append(
            {
                "name": name,
                "state": state.value,
                "healthy": state is ChannelState.OPEN,
                "lastError": str(error) if error is not None else None,
            }
        )

    healthy = bool(channels) and all(item["healthy"] for item in channels)
    return {
        "status": "ok" if healthy else "degraded",
        "attached": aggregator.attached,
        "channels": channels,
    }


def build_snapshot_payload(aggregator: TelemetryAggregator) -> Dict[str, Any]:
    return {name: _jsonable(value) for name, value in aggregator.snapshot().items()}


def _jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return value


class HealthServer:
    """Minimal HTTP server exposing `/healthz` and `/snapshot`."""

    def __init__(self, aggregator: TelemetryAggregator, host: str, port: int) -> None:
        self._aggregator = aggregator
        self._host = host
        self._port = port
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None

    async def start(self) -> None:
        app = web.Application()
        app.router.add_get("/healthz", self._handle_health)
        app.router.add_get("/snapshot", self._handle_snapshot)

        self._runner = web.AppRunner(app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self._host, self._port)
        await self._site.start()
        LOGGER.info(
            "Health endpoint listening on http://%s:%s/healthz", self._host, self._port
        )

    async def stop(self) -> None:
        with contextlib.suppress(Exception):
            if self._site is not None:
                await self._site.stop()
        if self._runner is not None:
            await self._runner.cleanup()
        self._site = None
        self._runner = None

    async def _handle_health(self, request: web.Request) -> web.Response:
        payload = build_health_payload(self._aggregator)
        status = 200 if payload["status"] == "ok" else 503
        return web.json_response(payload, status=status)

    async def _handle_snapshot(self, request: web.Request) -> web.Response:
        return web.json_response(build_snapshot_payload(self._aggregator))
