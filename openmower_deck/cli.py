"""Command-line interface for openmower-deck."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from . import constants
from .app import DeckApp, run_command
from .config import ConfigError, load_config
from .core import Scalar
from .logging import configure_logging

LOGGER = logging.getLogger(__name__)


def parse_argument(text: str) -> tuple[str, Scalar]:
    """Parse one ``key=value`` command argument.

    Integers, floats and ``true``/``false`` are converted; anything else
    stays a string.
    """

    key, sep, value = text.partition("=")
    key = key.strip()
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got {text!r}")

    value = value.strip()
    lowered = value.lower()
    if lowered in ("true", "false"):
        return key, lowered == "true"
    for convert in (int, float):
        try:
            return key, convert(value)
        except ValueError:
            continue
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=constants.APP_NAME,
        description="Telemetry and command console for OpenMower",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("watch", help="Subscribe to telemetry and log snapshots")

    command_parser = subparsers.add_parser(
        "command", help="Send one command to the mower"
    )
    command_parser.add_argument("action", help="Action name, e.g. mower_home")
    command_parser.add_argument(
        "arguments",
        nargs="*",
        type=parse_argument,
        metavar="key=value",
        help="Command arguments",
    )

    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    if args.command == "watch":
        DeckApp.start(config)
        return 0

    if args.command == "command":
        configure_logging(
            config.logging.level,
            log_path=config.logging.path,
            log_network=config.logging.log_network,
        )
        result = asyncio.run(run_command(config, args.action, dict(args.arguments)))
        if result.ok:
            print("Command sent")
            return 0
        print(f"Unable to send command: {result.message}", file=sys.stderr)
        return 1

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                print(f"{key} = {value}")
            print()
        return 0

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())
