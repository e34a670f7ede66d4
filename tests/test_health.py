import aiohttp
import pytest

from openmower_deck.aggregator import TelemetryAggregator
from openmower_deck.commands import CommandDispatcher
from openmower_deck.health import HealthServer, build_health_payload
from openmower_deck.telemetry import default_channel_descriptors
from openmower_deck.telemetry.channels import GPS, STANDARD_CHANNELS, STATUS

from conftest import FakeEndpoint, load_fixture, settle


@pytest.fixture
def aggregator(transport, notifier) -> TelemetryAggregator:
    return TelemetryAggregator(
        transport, CommandDispatcher(FakeEndpoint()), notifier=notifier
    )


def test_health_payload_without_channels_is_degraded(aggregator):
    payload = build_health_payload(aggregator)

    assert payload["status"] == "degraded"
    assert payload["attached"] is False
    assert payload["channels"] == []


@pytest.mark.asyncio
async def test_health_payload_reports_channel_states(aggregator, transport):
    transport.fail_next(STANDARD_CHANNELS[GPS].endpoint, ConnectionRefusedError("refused"))
    aggregator.attach(default_channel_descriptors([STATUS, GPS]))
    await settle()

    payload = build_health_payload(aggregator)

    assert payload["status"] == "degraded"
    channels = {item["name"]: item for item in payload["channels"]}
    assert channels[STATUS]["state"] == "open"
    assert channels[STATUS]["healthy"] is True
    assert channels[GPS]["state"] == "errored"
    assert channels[GPS]["healthy"] is False
    assert channels[GPS]["lastError"] == "refused"

    await aggregator.aclose()


@pytest.mark.asyncio
async def test_health_server_serves_health_and_snapshot(
    aggregator, transport, unused_tcp_port
):
    host = "127.0.0.1"
    port = unused_tcp_port
    server = HealthServer(aggregator, host, port)
    await server.start()

    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(f"http://{host}:{port}/healthz") as response:
                assert response.status == 503

            aggregator.attach(default_channel_descriptors([STATUS]))
            await settle()
            transport.latest(STANDARD_CHANNELS[STATUS].endpoint).push(
                load_fixture("status.json")
            )
            await settle()

            async with session.get(f"http://{host}:{port}/healthz") as response:
                payload = await response.json()
                assert response.status == 200
                assert payload["status"] == "ok"
                assert payload["attached"] is True

            async with session.get(f"http://{host}:{port}/snapshot") as response:
                snapshot = await response.json()
                assert response.status == 200
                assert snapshot[STATUS]["v_battery"] == pytest.approx(28.71)
    finally:
        await server.stop()
        await aggregator.aclose()
