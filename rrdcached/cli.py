#!/usr/bin/env python3
"""Command-line access to a rrdcached daemon.

Usage:
    rrdc info /var/lib/rrd/load.rrd        Show the configuration of an RRD
    rrdc info --json /var/lib/rrd/load.rrd Same, as a JSON object
    rrdc list /                            List RRDs below a path prefix
    rrdc exec stats                        Run any command, print the reply

Connection defaults come from RRDCACHED_* environment variables.
"""

import argparse
import json
import logging
import math
import sys
from typing import Optional

from .client import RRDCachedClient
from .config import settings
from .protocol.errors import RRDCachedError

logger = logging.getLogger("rrdcached.cli")


def cmd_exec(client: RRDCachedClient, args: argparse.Namespace) -> int:
    """Run a raw command."""
    for line in client.execute(args.verb, *args.args):
        print(line)
    return 0


def cmd_info(client: RRDCachedClient, args: argparse.Namespace) -> int:
    """Print the configuration of one RRD."""
    if args.json:
        info = {
            key: None if isinstance(value, float) and not math.isfinite(value) else value
            for key, value in client.info_map(args.file).items()
        }
        print(json.dumps(info, indent=2, allow_nan=False))
        return 0
    for entry in client.info(args.file):
        print(f"{entry.key} = {entry.value}")
    return 0


def cmd_list(client: RRDCachedClient, args: argparse.Namespace) -> int:
    """Print the RRDs below a prefix."""
    for line in client.list_rrds(args.prefix):
        print(line)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rrdc",
        description="Talk to a rrdcached round-robin cache daemon",
    )
    parser.add_argument(
        "--address", default=settings.address,
        help="host[:port] or socket path (default: %(default)s)",
    )
    parser.add_argument(
        "--unix", action=argparse.BooleanOptionalAction, default=settings.unix,
        help="treat the address as a UNIX domain socket path",
    )
    parser.add_argument(
        "--timeout", type=float, default=settings.timeout,
        help="dial / read / write timeout in seconds (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log protocol traffic")

    sub = parser.add_subparsers(dest="command")

    p_exec = sub.add_parser("exec", help="Run a command and print the reply lines")
    p_exec.add_argument("verb")
    p_exec.add_argument("args", nargs="*")

    p_info = sub.add_parser("info", help="Show the configuration of an RRD")
    p_info.add_argument("file")
    p_info.add_argument("--json", action="store_true", help="print a JSON object (NaN and infinite values become null)")

    p_list = sub.add_parser("list", help="List RRDs below a path prefix")
    p_list.add_argument("prefix")

    return parser


COMMANDS = {
    "exec": cmd_exec,
    "info": cmd_info,
    "list": cmd_list,
}


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s:     %(name)s - %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        with RRDCachedClient(args.address, timeout=args.timeout, unix=args.unix) as client:
            return COMMANDS[args.command](client, args)
    except RRDCachedError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
