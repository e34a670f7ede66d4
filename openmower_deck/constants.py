"""Constants used across the openmower-deck package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "openmower-deck"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME

DEFAULT_OPENMOWER_HOST = "localhost"
DEFAULT_OPENMOWER_PORT = 4006

SUBSCRIBE_PATH_PREFIX = "/api/openmower/subscribe"
CALL_PATH_PREFIX = "/api/openmower/call"
