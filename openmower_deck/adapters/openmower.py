"""HTTP client for the OpenMower control endpoint."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional
from urllib.parse import quote

import aiohttp

from .. import constants
from ..core import CommandRequest, ControlResponse

LOGGER = logging.getLogger(__name__)


class ControlTransportError(RuntimeError):
    """Raised when no response could be obtained from the control endpoint."""


class OpenMowerClient:
    """Posts named actions to ``/api/openmower/call/{action}``."""

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout

    async def call(self, request: CommandRequest) -> ControlResponse:
        """Send ``request`` once and return the endpoint's answer.

        Raises:
            ControlTransportError: On connection failure or timeout.
        """

        session = self._ensure_session()
        url = f"{self._base_url}{constants.CALL_PATH_PREFIX}/{quote(request.action, safe='')}"

        try:
            async with asyncio.timeout(self._timeout):
                async with session.post(url, json=request.as_payload()) as response:
                    body = await response.text()
                    status = response.status
        except asyncio.TimeoutError as exc:
            LOGGER.warning(
                "Command %r timed out after %.1fs (url=%s)",
                request.action,
                self._timeout,
                url,
            )
            raise ControlTransportError(
                f"Request timed out after {self._timeout:.1f}s"
            ) from exc
        except aiohttp.ClientError as exc:
            LOGGER.warning("Command %r could not be sent: %s", request.action, exc)
            raise ControlTransportError(str(exc) or type(exc).__name__) from exc

        return ControlResponse(status=status, payload=_parse_body(body))

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


def _parse_body(body: str) -> Optional[Any]:
    if not body.strip():
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        return body.strip()
