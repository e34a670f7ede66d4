"""Logging setup for the deck CLI and watch loop."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

LOG_FILE_MAX_BYTES = 1_000_000
LOG_FILE_BACKUPS = 3

# Loggers that narrate raw HTTP and SSE traffic.
NETWORK_LOGGERS = ("aiohttp.access", "aiohttp.client", "aiohttp.internal")
TRANSPORT_LOGGER = "openmower_deck.adapters"


def configure_logging(
    level: str = "INFO", *, log_path: Optional[Path] = None, log_network: bool = False
) -> None:
    """Replace root handlers with a console handler and an optional log file.

    With ``log_network`` the aiohttp loggers keep the root level and the
    deck's own transport adapters log at DEBUG, so every stream handshake and
    command POST shows up. Otherwise the aiohttp loggers are held at WARNING.
    """

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    logging.captureWarnings(True)

    if log_network:
        logging.getLogger(TRANSPORT_LOGGER).setLevel(logging.DEBUG)
        for name in NETWORK_LOGGERS:
            logging.getLogger(name).setLevel(logging.NOTSET)
    else:
        for name in NETWORK_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
