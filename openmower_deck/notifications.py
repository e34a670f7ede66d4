"""Operator notification sinks."""

from __future__ import annotations

import logging
from typing import Optional

LOGGER = logging.getLogger(__name__)


class LoggingNotifier:
    """Notifier that writes every notification to the log."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or LOGGER

    def info(self, message: str, description: Optional[str] = None) -> None:
        self._logger.info(_format(message, description))

    def success(self, message: str, description: Optional[str] = None) -> None:
        self._logger.info(_format(message, description))

    def error(self, message: str, description: Optional[str] = None) -> None:
        self._logger.error(_format(message, description))


def _format(message: str, description: Optional[str]) -> str:
    if description:
        return f"{message}: {description}"
    return message
