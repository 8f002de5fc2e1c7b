#!/usr/bin/env python3
"""Poll an APsystems inverter reading from the command line.

Useful for checking a demo user id or ECU id before configuring the host.

Usage:
    pyapsema-poll --user-id 1234567
    pyapsema-poll --user-id 1234567 --kind Watts
    pyapsema-poll --legacy --ecu-id 216000012345
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pyapsema import __version__
from pyapsema.config import AccessoryConfig
from pyapsema.exceptions import ApsemaConfigError
from pyapsema.models import ReadingKind
from pyapsema.poller import InverterPoller


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="pyapsema-poll",
        description="Fetch the current power or daily energy of an APsystems installation.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pyapsema-poll --user-id 1234567
      Today's energy (kWh) via the demo login of user 1234567

  pyapsema-poll --login-url "https://www.apsystemsema.com/ema/intoDemoUser.action?id=1234567"
      Same, with a full demo login URL

  pyapsema-poll --user-id 1234567 --kind Watts
      Today's average power (W), estimated from the daily total

  pyapsema-poll --legacy --ecu-id 216000012345 --kind Watts
      Latest power sample from the legacy ECU API
""",
    )

    source_group = parser.add_argument_group("Source Options")
    source_group.add_argument("--user-id", help="Demo user id")
    source_group.add_argument("--login-url", help="Full demo login URL (overrides --user-id)")
    source_group.add_argument(
        "--legacy",
        action="store_true",
        help="Use the legacy ECU API (requires --ecu-id)",
    )
    source_group.add_argument("--ecu-id", help="ECU id for the legacy API")

    parser.add_argument(
        "--kind",
        choices=[kind.value for kind in ReadingKind],
        default=ReadingKind.KWH.value,
        help="Reading to fetch (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


async def run(args: argparse.Namespace) -> int:
    """Poll once and print the reading."""
    config = AccessoryConfig(
        name="cli",
        reading_kind=ReadingKind.parse(args.kind),
        use_legacy_api=args.legacy,
        ecu_id=args.ecu_id,
        login_url=args.login_url,
        user_id=args.user_id,
    )
    try:
        config.validate()
    except ApsemaConfigError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 2

    async with InverterPoller(config) as poller:
        value = await poller.poll()

    unit = "W" if config.reading_kind is ReadingKind.WATTS else "kWh"
    print(f"{value:g} {unit}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``pyapsema-poll`` console script."""
    args = create_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
