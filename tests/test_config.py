from pathlib import Path

import pytest

from openmower_deck.config import (
    DEFAULT_COMMAND_TIMEOUT_SECONDS,
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    ConfigError,
    load_config,
)


def test_load_config_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "openmower-deck.cfg"
    config = load_config(config_path)

    assert config.openmower.url == "http://localhost:4006"
    assert config.channels.enabled == [
        "status",
        "imu",
        "gps",
        "wheel_ticks",
        "high_level_status",
    ]
    assert config.channels.connect_timeout_seconds == DEFAULT_CONNECT_TIMEOUT_SECONDS
    assert config.commands.timeout_seconds == DEFAULT_COMMAND_TIMEOUT_SECONDS
    assert config.display.refresh_seconds == 1.0
    assert config.logging.level == "INFO"
    assert config.logging.path is None
    assert config.health.enabled is False
    assert config.health.port == 0
    assert config.path == config_path


def test_load_config_overrides_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "openmower-deck.cfg"
    config_path.write_text(
        """
[openmower]
url = http://mower.local:4006/

[channels]
enabled = high_level_status, status
connect_timeout_seconds = 2.5

[commands]
timeout_seconds = 4

[display]
refresh_seconds = 0.5

[logging]
level = DEBUG
log_network = true

[health]
enabled = true
port = 8765
        """.strip()
        + "\n",
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config.openmower.url == "http://mower.local:4006"
    assert config.channels.enabled == ["high_level_status", "status"]
    assert config.channels.connect_timeout_seconds == 2.5
    assert config.commands.timeout_seconds == 4.0
    assert config.display.refresh_seconds == 0.5
    assert config.logging.level == "DEBUG"
    assert config.logging.log_network is True
    assert config.health.enabled is True
    assert config.health.port == 8765
    assert config.raw.get("channels", "enabled") == "high_level_status, status"


def test_load_config_expands_log_path(tmp_path: Path) -> None:
    config_path = tmp_path / "openmower-deck.cfg"
    config_path.write_text(
        f"[logging]\npath = {tmp_path / 'deck.log'}\n", encoding="utf-8"
    )

    config = load_config(config_path)

    assert config.logging.path == tmp_path / "deck.log"


def test_load_config_clamps_tiny_intervals(tmp_path: Path) -> None:
    config_path = tmp_path / "openmower-deck.cfg"
    config_path.write_text("[display]\nrefresh_seconds = 0\n", encoding="utf-8")

    config = load_config(config_path)

    assert config.display.refresh_seconds == 0.1


def test_load_config_rejects_unknown_channel(tmp_path: Path) -> None:
    config_path = tmp_path / "openmower-deck.cfg"
    config_path.write_text("[channels]\nenabled = status, battery\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="battery"):
        load_config(config_path)


def test_load_config_rejects_bad_number(tmp_path: Path) -> None:
    config_path = tmp_path / "openmower-deck.cfg"
    config_path.write_text("[commands]\ntimeout_seconds = soon\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_path)
