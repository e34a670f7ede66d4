"""Tests for the application wiring."""

import asyncio
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import web

from openmower_deck.app import DeckApp, run_command, summarise_snapshot
from openmower_deck.config import load_config
from openmower_deck.core import ChannelState
from openmower_deck.telemetry import HighLevelStatus, Status, decode_high_level_status
from openmower_deck.telemetry.channels import HIGH_LEVEL_STATUS, STATUS

from conftest import RecordingNotifier, load_fixture


def test_summarise_empty_snapshot():
    assert summarise_snapshot({}) == "no telemetry yet"


def test_summarise_snapshot_reports_state_and_battery():
    snapshot = {
        HIGH_LEVEL_STATUS: decode_high_level_status(
            load_fixture("high_level_status.json")
        ),
        STATUS: Status(mower_status=255, v_battery=28.714),
        "imu": object(),
    }

    summary = summarise_snapshot(snapshot)

    assert "state=Mowing" in summary
    assert "battery=82%" in summary
    assert "mower=on" in summary
    assert "vbat=28.71V" in summary
    assert "other=imu" in summary


def test_summarise_unknown_state():
    summary = summarise_snapshot({HIGH_LEVEL_STATUS: HighLevelStatus(state_name="NULL")})

    assert summary.startswith("state=Unknown")


@pytest_asyncio.fixture
async def mower_backend(unused_tcp_port_factory):
    release = asyncio.Event()
    calls: list[tuple[str, object]] = []

    async def subscribe_handler(request: web.Request):
        topic = request.match_info["topic"]
        response = web.StreamResponse(headers={"Content-Type": "text/event-stream"})
        await response.prepare(request)
        if topic == "highLevelStatus":
            payload = load_fixture("high_level_status.json")
            await response.write(f"event:message\ndata:{payload}\n\n".encode())
        await release.wait()
        return response

    async def call_handler(request: web.Request):
        calls.append((request.match_info["command"], await request.json()))
        return web.json_response({})

    app = web.Application()
    app.router.add_get("/api/openmower/subscribe/{topic}", subscribe_handler)
    app.router.add_post("/api/openmower/call/{command}", call_handler)

    runner = web.AppRunner(app)
    await runner.setup()

    port = unused_tcp_port_factory()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()

    class _Server:
        url = f"http://127.0.0.1:{port}"

        @property
        def calls(self) -> list[tuple[str, object]]:
            return calls

    try:
        yield _Server()
    finally:
        release.set()
        await runner.cleanup()


@pytest.mark.asyncio
async def test_run_command_posts_to_backend(mower_backend, tmp_path: Path):
    config = load_config(tmp_path / "openmower-deck.cfg")
    config.openmower.url = mower_backend.url

    result = await run_command(config, "mower_s1", {})

    assert result.ok is True
    assert mower_backend.calls == [("mower_s1", {})]


@pytest.mark.asyncio
async def test_deck_app_runs_session_until_stopped(mower_backend, tmp_path: Path):
    config = load_config(tmp_path / "openmower-deck.cfg")
    config.openmower.url = mower_backend.url
    config.channels.enabled = [STATUS, HIGH_LEVEL_STATUS]
    config.display.refresh_seconds = 0.1
    notifier = RecordingNotifier()
    app = DeckApp(config, notifier=notifier)

    task = asyncio.create_task(app.run())
    try:
        for _ in range(100):
            aggregator = app.aggregator
            if aggregator is not None and HIGH_LEVEL_STATUS in aggregator.snapshot():
                break
            await asyncio.sleep(0.02)

        assert app.aggregator is not None
        snapshot = app.aggregator.snapshot()
        assert snapshot[HIGH_LEVEL_STATUS].state_label == "Mowing"
    finally:
        app.request_stop()
        await asyncio.wait_for(task, timeout=5.0)

    assert set(app.aggregator.channel_states().values()) == {ChannelState.CLOSED}
    assert "High Level Status Stream connected" in notifier.messages("info")
    assert "High Level Status Stream closed" in notifier.messages("info")
