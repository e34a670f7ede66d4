"""Configuration loader for openmower-deck."""

from __future__ import annotations

from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from . import constants
from .telemetry.channels import STANDARD_CHANNELS

DEFAULT_CHANNELS = list(STANDARD_CHANNELS)

DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0
DEFAULT_COMMAND_TIMEOUT_SECONDS = 10.0
DEFAULT_REFRESH_SECONDS = 1.0


class ConfigError(ValueError):
    """Raised when the configuration file holds unusable values."""


@dataclass(slots=True)
class OpenMowerConfig:
    url: str = (
        f"http://{constants.DEFAULT_OPENMOWER_HOST}:{constants.DEFAULT_OPENMOWER_PORT}"
    )


@dataclass(slots=True)
class ChannelsConfig:
    enabled: List[str] = field(default_factory=lambda: list(DEFAULT_CHANNELS))
    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS


@dataclass(slots=True)
class CommandConfig:
    timeout_seconds: float = DEFAULT_COMMAND_TIMEOUT_SECONDS


@dataclass(slots=True)
class DisplayConfig:
    refresh_seconds: float = DEFAULT_REFRESH_SECONDS


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None
    log_network: bool = False


@dataclass(slots=True)
class HealthConfig:
    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = 0


@dataclass(slots=True)
class DeckConfig:
    openmower: OpenMowerConfig
    channels: ChannelsConfig
    commands: CommandConfig
    display: DisplayConfig
    logging: LoggingConfig
    health: HealthConfig
    raw: ConfigParser
    path: Path


def _parse_list(value: str, *, default: Iterable[str]) -> List[str]:
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


def load_config(path: Optional[Path] = None) -> DeckConfig:
    """Load configuration from disk, applying defaults where necessary.

    Raises:
        ConfigError: If a value cannot be used (unknown channel, bad number).
    """

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "openmower": {
                "url": OpenMowerConfig().url,
            },
            "channels": {
                "enabled": ",".join(DEFAULT_CHANNELS),
                "connect_timeout_seconds": str(DEFAULT_CONNECT_TIMEOUT_SECONDS),
            },
            "commands": {
                "timeout_seconds": str(DEFAULT_COMMAND_TIMEOUT_SECONDS),
            },
            "display": {
                "refresh_seconds": str(DEFAULT_REFRESH_SECONDS),
            },
            "logging": {
                "level": "INFO",
                "path": "",
                "log_network": "false",
            },
            "health": {
                "enabled": "false",
                "host": "127.0.0.1",
                "port": "0",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    try:
        return _build_config(parser, config_path)
    except ValueError as exc:
        if isinstance(exc, ConfigError):
            raise
        raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc


def _build_config(parser: ConfigParser, config_path: Path) -> DeckConfig:
    openmower = OpenMowerConfig(url=parser.get("openmower", "url").rstrip("/"))

    enabled = _parse_list(
        parser.get("channels", "enabled", fallback=""), default=DEFAULT_CHANNELS
    )
    unknown = [name for name in enabled if name not in STANDARD_CHANNELS]
    if unknown:
        raise ConfigError(
            f"Unknown channel(s) in [channels] enabled: {', '.join(unknown)}"
        )

    channels = ChannelsConfig(
        enabled=enabled,
        connect_timeout_seconds=max(
            0.1,
            parser.getfloat(
                "channels",
                "connect_timeout_seconds",
                fallback=DEFAULT_CONNECT_TIMEOUT_SECONDS,
            ),
        ),
    )

    commands = CommandConfig(
        timeout_seconds=max(
            0.1,
            parser.getfloat(
                "commands", "timeout_seconds", fallback=DEFAULT_COMMAND_TIMEOUT_SECONDS
            ),
        ),
    )

    display = DisplayConfig(
        refresh_seconds=max(
            0.1,
            parser.getfloat(
                "display", "refresh_seconds", fallback=DEFAULT_REFRESH_SECONDS
            ),
        ),
    )

    log_path_value = parser.get("logging", "path", fallback="").strip()
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
        log_network=parser.getboolean("logging", "log_network", fallback=False),
    )

    health = HealthConfig(
        enabled=parser.getboolean("health", "enabled", fallback=False),
        host=parser.get("health", "host", fallback="127.0.0.1"),
        port=parser.getint("health", "port", fallback=0),
    )

    return DeckConfig(
        openmower=openmower,
        channels=channels,
        commands=commands,
        display=display,
        logging=logging_config,
        health=health,
        raw=parser,
        path=config_path,
    )
