"""
Command-line front end.

    python -m elerostick --port /dev/ttyUSB0 check
    python -m elerostick info 3
    python -m elerostick send 3 bottom
    python -m elerostick monitor --seconds 60

The serial port falls back to the SERIAL_PORT environment variable,
baud rate and command delay to SERIAL_BAUD_RATE and COMMAND_DELAY_MS.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence

from pydantic import ValidationError as SettingsError

from elerostick.config import StickSettings
from elerostick.dispatcher import CommandDispatcher
from elerostick.exceptions import EleroStickError
from elerostick.models.records import ChannelStatus
from elerostick.protocol.constants import Action
from elerostick.transport.abc import AbstractTransport
from elerostick.transport.serial_async import AsyncSerialTransport

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elerostick",
        description="Talk to an Elero Transmitter Stick",
    )
    parser.add_argument("--port", help="Serial port (default: $SERIAL_PORT)")
    parser.add_argument("--baudrate", type=int, help="Baud rate (default: 38400)")
    parser.add_argument(
        "--delay-ms",
        type=int,
        dest="delay_ms",
        help="Pause between commands in milliseconds (default: 500)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log frame traffic")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("check", help="List learned channels")

    info = commands.add_parser("info", help="Request the status of one channel")
    info.add_argument("channel", type=int)

    send = commands.add_parser("send", help="Send an action to one channel")
    send.add_argument("channel", type=int)
    send.add_argument(
        "action",
        help=f"One of: {', '.join(a.name.lower() for a in Action)}",
    )

    monitor = commands.add_parser("monitor", help="Print status pushes as they arrive")
    monitor.add_argument("--seconds", type=float, default=None, help="Stop after N seconds")

    return parser


def load_settings(args: argparse.Namespace) -> StickSettings:
    """Merge command-line options over the environment settings."""
    env = dict(os.environ)
    if args.port:
        env["SERIAL_PORT"] = args.port
    if args.baudrate is not None:
        env["SERIAL_BAUD_RATE"] = str(args.baudrate)
    if args.delay_ms is not None:
        env["COMMAND_DELAY_MS"] = str(args.delay_ms)
    return StickSettings.from_env(env)


def _print_status(channel: int, status: ChannelStatus) -> None:
    print(status)


async def run_command(
    args: argparse.Namespace,
    transport: AbstractTransport,
    settings: StickSettings,
) -> int:
    """Run one parsed command against a transport; returns the exit code."""
    dispatcher = CommandDispatcher(transport, settings.to_dispatcher_config())
    unsubscribe = dispatcher.store.subscribe(_print_status)
    try:
        async with dispatcher:
            if args.command == "check":
                channels = await dispatcher.check_learned_channels()
                print("Learned channels:", " ".join(str(c) for c in channels) or "none")
            elif args.command == "info":
                await dispatcher.request_status(args.channel)
            elif args.command == "send":
                await dispatcher.send_command(args.channel, args.action)
            elif args.command == "monitor":
                channels = await dispatcher.check_learned_channels()
                for channel in channels:
                    await dispatcher.request_status(channel)
                if args.seconds is None:
                    await asyncio.Event().wait()
                else:
                    await asyncio.sleep(args.seconds)
    finally:
        unsubscribe()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args)
    except SettingsError as e:
        parser.error(f"invalid settings: {e}")

    transport = AsyncSerialTransport(settings.serial_port, baudrate=settings.baudrate)
    try:
        return asyncio.run(run_command(args, transport, settings))
    except EleroStickError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
