import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import pytest

from openmower_deck.core import CommandRequest, ControlResponse

FIXTURES = Path(__file__).parent / "fixtures"

_END = object()


def load_fixture(name: str) -> str:
    """Return a recorded channel payload as raw message text."""
    return (FIXTURES / name).read_text(encoding="utf-8").strip()


class FakeHandle:
    """In-memory push stream fed by the test."""

    def __init__(self, endpoint: str) -> None:
        self.endpoint = endpoint
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True
        self._queue.put_nowait(_END)

    def push(self, raw: str) -> None:
        self._queue.put_nowait(raw)

    def end(self) -> None:
        """Simulate the remote side closing the stream."""
        self._queue.put_nowait(_END)

    def fail(self, exc: BaseException) -> None:
        self._queue.put_nowait(exc)

    def __aiter__(self) -> "FakeHandle":
        return self

    async def __anext__(self) -> str:
        if self._closed:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _END:
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            raise item
        return item


class FakeTransport:
    def __init__(self) -> None:
        self.handles: list[FakeHandle] = []
        self.open_calls: list[str] = []
        self._gates: dict[str, asyncio.Event] = {}
        self._failures: dict[str, BaseException] = {}

    def hold(self, endpoint: str) -> asyncio.Event:
        """Keep opens of ``endpoint`` pending until the returned event is set."""
        gate = asyncio.Event()
        self._gates[endpoint] = gate
        return gate

    def fail_next(self, endpoint: str, exc: BaseException) -> None:
        self._failures[endpoint] = exc

    async def open(self, endpoint: str) -> FakeHandle:
        self.open_calls.append(endpoint)
        gate = self._gates.get(endpoint)
        if gate is not None:
            await gate.wait()
        failure = self._failures.pop(endpoint, None)
        if failure is not None:
            raise failure
        handle = FakeHandle(endpoint)
        self.handles.append(handle)
        return handle

    def live_handles(self, endpoint: Optional[str] = None) -> list[FakeHandle]:
        return [
            handle
            for handle in self.handles
            if not handle.closed and (endpoint is None or handle.endpoint == endpoint)
        ]

    def latest(self, endpoint: str) -> FakeHandle:
        return [handle for handle in self.handles if handle.endpoint == endpoint][-1]


class FakeEndpoint:
    def __init__(
        self,
        response: Optional[ControlResponse] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        self.response = response or ControlResponse(status=200)
        self.error = error
        self.requests: list[CommandRequest] = []

    async def call(self, request: CommandRequest) -> ControlResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


class RecordingNotifier:
    def __init__(self) -> None:
        self.events: list[tuple[str, str, Optional[str]]] = []

    def info(self, message: str, description: Optional[str] = None) -> None:
        self.events.append(("info", message, description))

    def success(self, message: str, description: Optional[str] = None) -> None:
        self.events.append(("success", message, description))

    def error(self, message: str, description: Optional[str] = None) -> None:
        self.events.append(("error", message, description))

    def messages(self, kind: Optional[str] = None) -> list[str]:
        return [message for level, message, _ in self.events if kind in (None, level)]


def raw_json(payload: dict[str, Any]) -> str:
    return json.dumps(payload)


async def settle(rounds: int = 10) -> None:
    """Let pending tasks run until the loop goes quiet."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
