"""Server-Sent Events transport built on aiohttp."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import aiohttp

LOGGER = logging.getLogger(__name__)

DEFAULT_EVENT_TYPE = "message"


@dataclass(slots=True, frozen=True)
class ServerSentEvent:
    data: str
    event: str = DEFAULT_EVENT_TYPE
    id: Optional[str] = None


class SSEDecoder:
    """Incremental parser for the ``text/event-stream`` framing.

    Feed it one line at a time (without the line terminator); it returns an
    event whenever a blank line completes one.
    """

    def __init__(self) -> None:
        self._data: list[str] = []
        self._event: Optional[str] = None
        self._last_id: Optional[str] = None

    def feed(self, line: str) -> Optional[ServerSentEvent]:
        if not line:
            return self._dispatch()

        if line.startswith(":"):
            return None

        name, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if name == "data":
            self._data.append(value)
        elif name == "event":
            self._event = value
        elif name == "id":
            if "\0" not in value:
                self._last_id = value
        # "retry" and unknown fields are ignored; channels never reconnect
        return None

    def _dispatch(self) -> Optional[ServerSentEvent]:
        data, event = self._data, self._event
        self._data = []
        self._event = None

        if not data:
            return None

        return ServerSentEvent(
            data="\n".join(data),
            event=event or DEFAULT_EVENT_TYPE,
            id=self._last_id,
        )


class SSEConnection:
    """Live event stream; iterating yields the data of ``message`` events."""

    def __init__(self, response: aiohttp.ClientResponse) -> None:
        self._response = response
        self._decoder = SSEDecoder()

    @property
    def closed(self) -> bool:
        return self._response.closed

    def close(self) -> None:
        if not self._response.closed:
            self._response.close()

    def __aiter__(self) -> AsyncIterator[str]:
        return self._messages()

    async def _messages(self) -> AsyncIterator[str]:
        async for raw_line in self._response.content:
            line = raw_line.decode("utf-8", errors="replace").rstrip("\r\n")
            event = self._decoder.feed(line)
            if event is None:
                continue
            if event.event != DEFAULT_EVENT_TYPE:
                LOGGER.debug("Skipping %r event from %s", event.event, self._response.url)
                continue
            yield event.data


class SSETransport:
    """Opens SSE streams relative to a base URL."""

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        connect_timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._connect_timeout = connect_timeout

    async def open(self, endpoint: str) -> SSEConnection:
        """Open the stream at ``endpoint`` and return once headers arrive.

        Raises:
            asyncio.TimeoutError: If the handshake exceeds the connect timeout.
            aiohttp.ClientError: If the request fails or returns a non-2xx status.
        """

        session = self._ensure_session()
        url = f"{self._base_url}{endpoint}"

        try:
            async with asyncio.timeout(self._connect_timeout):
                response = await session.get(
                    url,
                    headers={"Accept": "text/event-stream", "Cache-Control": "no-cache"},
                )
        except asyncio.TimeoutError:
            LOGGER.warning(
                "SSE handshake timed out after %.1fs (url=%s)",
                self._connect_timeout,
                url,
            )
            raise

        response.raise_for_status()

        LOGGER.debug("SSE stream open at %s", url)
        return SSEConnection(response)

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=None)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session
