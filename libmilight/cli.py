#!/usr/bin/env python3
"""
Command-line control of a MiLight bridge zone.

The bridge never reports its state, so the CLI cannot know whether a light
is already on. Each invocation therefore sends the commands for the
requested state outright instead of going through change detection.

Usage:
    milight --host 192.168.0.66 --zone 1 on
    milight --zone 1 level 50
    milight --zone 2 color orange
    milight raw 0x42 0x00
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .codec import Command, MiLightCodec, validate_zone
from .config import BridgeConfig
from .exceptions import ConfigError
from .transport import CommandSender, DatagramSender


logger = logging.getLogger("milight.cli")


def _byte(text: str) -> int:
    """Parse a decimal or 0x-prefixed byte for argparse."""
    try:
        value = int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid byte: {text}")
    if not 0 <= value <= 0xFF:
        raise argparse.ArgumentTypeError(f"byte out of range: {text}")
    return value


def _level(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid level: {text}")
    if not 0 <= value <= 100:
        raise argparse.ArgumentTypeError("level must be between 0 and 100")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="milight",
        description="Send commands to a MiLight bridge",
    )
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--host", help="Bridge hostname or IP address")
    parser.add_argument("--port", type=int, help="Bridge UDP port")
    parser.add_argument("--zone", type=int, default=0, help="Zone 0-4 (0 = all)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("on", help="Turn the zone on")
    subparsers.add_parser("off", help="Turn the zone off")

    level_parser = subparsers.add_parser("level", help="Set brightness (0-100)")
    level_parser.add_argument("value", type=_level)

    color_parser = subparsers.add_parser("color", help="Set a palette color")
    color_parser.add_argument("value", help="CSS color, e.g. red or #ff0000")

    raw_parser = subparsers.add_parser("raw", help="Send a raw code/param pair")
    raw_parser.add_argument("code", type=_byte)
    raw_parser.add_argument("param", type=_byte, nargs="?", default=0)

    return parser


def commands_for(args: argparse.Namespace, codec: MiLightCodec) -> List[List[Command]]:
    """
    Build the command batches for the parsed arguments.

    Batches are separated by the power-on delay.

    Args:
        args: Parsed arguments.
        codec: Codec used to encode the request.

    Returns:
        List of command batches; empty if there is nothing to send.

    Raises:
        ValueError: If the color cannot be parsed.
    """
    zone = args.zone

    if args.command == "on":
        return [[codec.power_command(True, zone)]]
    if args.command == "off":
        return [[codec.power_command(False, zone)]]
    if args.command == "level":
        if args.value == 0:
            return [[codec.power_command(False, zone)]]
        power_on = codec.power_command(True, zone)
        command = codec.level_command(args.value, zone)
        if command == power_on:
            return [[power_on]]
        return [[power_on], [command]]
    if args.command == "color":
        command = codec.color_command(args.value, zone)
        return [[command]] if command else []
    return [[Command(args.code, args.param)]]


async def run(
    args: argparse.Namespace,
    config: BridgeConfig,
    sender: Optional[CommandSender] = None,
) -> int:
    """
    Send the requested commands.

    Args:
        args: Parsed arguments.
        config: Bridge configuration.
        sender: Command transport; UDP when omitted.

    Returns:
        Process exit code.
    """
    sender = sender or DatagramSender()
    codec = MiLightCodec(level_mode=config.level_mode)

    try:
        batches = commands_for(args, codec)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not batches:
        print(f"Color {args.value} is not in the palette, nothing sent")
        return 0

    for i, batch in enumerate(batches):
        if i:
            await asyncio.sleep(config.power_on_delay)
        for command in batch:
            logger.debug("Sending %s", command)
            await sender.send(config.bridge_host, config.bridge_port, command)

    return 0


def load_config(args: argparse.Namespace) -> BridgeConfig:
    """
    Build the configuration from the config file and the command line.

    Command-line values override the file.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    data = {}
    if args.config:
        base = BridgeConfig.load(args.config)
        data = {
            "bridge_host": base.bridge_host,
            "bridge_port": base.bridge_port,
            "power_mode": base.power_mode.value,
            "level_mode": base.level_mode.value,
            "power_on_delay": base.power_on_delay,
        }
    if args.host:
        data["bridge_host"] = args.host
    if args.port is not None:
        data["bridge_port"] = args.port
    return BridgeConfig.from_dict(data)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        validate_zone(args.zone)
        config = load_config(args)
    except (ConfigError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return asyncio.run(run(args, config))


if __name__ == "__main__":
    sys.exit(main())
