"""
todokern CLI - drive the encrypted todo kernel from a shell.

Usage:
    todokern encode --id N --action {create,read,delete,complete} --user U [--title T] ...
    todokern run INPUTS [--db PATH] [--json]
    todokern read --id N --user U [--db PATH] [--json]
    todokern list [--db PATH]
"""

import argparse
import logging
import sys
from pathlib import Path

from todokern.cli.commands import cmd_encode, cmd_list, cmd_read, cmd_run
from todokern.cli.commands.encode import ACTION_NAMES
from todokern.config import KernelConfig
from todokern.protocols import TodokernError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="todokern",
        description="Encrypted todo kernel driven by an inbound message queue",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # encode
    p_encode = subparsers.add_parser("encode", help="Encode a user message as hex")
    p_encode.add_argument("--id", type=int, required=True, help="Record id")
    p_encode.add_argument("--action", choices=sorted(ACTION_NAMES), required=True)
    p_encode.add_argument("--user", required=True, help="Requesting user")
    p_encode.add_argument("--title", default="")
    p_encode.add_argument("--created", type=int, default=0, help="Created timestamp")
    p_encode.add_argument("--due", type=int, default=0, help="Due timestamp")
    p_encode.add_argument("--owner", default="", help="Owner (defaults to --user on create)")
    p_encode.add_argument("--completed", action="store_true")
    p_encode.add_argument("--json", "-j", action="store_true",
                          help="Print as an inputs-file entry")

    # run
    p_run = subparsers.add_parser("run", help="Drain an inputs file into the store")
    p_run.add_argument("inputs", type=Path, help="JSON inputs file")
    p_run.add_argument("--db", type=Path, default=None, help="SQLite store path")
    p_run.add_argument("--json", "-j", action="store_true")

    # read
    p_read = subparsers.add_parser("read", help="Open one record as a user")
    p_read.add_argument("--id", type=int, required=True)
    p_read.add_argument("--user", required=True)
    p_read.add_argument("--db", type=Path, default=None)
    p_read.add_argument("--json", "-j", action="store_true")

    # list
    p_list = subparsers.add_parser("list", help="List stored record ids")
    p_list.add_argument("--db", type=Path, default=None)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = KernelConfig.from_env()
    except ValueError as e:
        logging.basicConfig(level=logging.WARNING)
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    logging.basicConfig(level=getattr(logging, config.log_level, logging.WARNING))

    try:
        if args.command == "encode":
            cmd_encode(args)
        elif args.command == "run":
            cmd_run(args, config)
        elif args.command == "read":
            cmd_read(args, config)
        elif args.command == "list":
            cmd_list(args, config)
    except TodokernError as e:
        logger.error(f"{e.kind}: {e}")
        sys.exit(1)
    except (ValueError, OSError) as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
