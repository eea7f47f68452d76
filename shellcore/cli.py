#!/usr/bin/env python3
# shellcore/cli.py
from __future__ import annotations

"""
Process entry point: argument parsing, logging setup, and the loop run.

    shellcore                      interactive shell
    shellcore -c "help"            run one line and exit
    shellcore --script cmds.txt    replay a command file ('#' lines skipped)
"""

import argparse
import asyncio
import io
import logging
from pathlib import Path
from typing import Optional, Sequence

from shellcore import __version__
from shellcore.config import load_config
from shellcore.exceptions import ConfigError
from shellcore.interface import BaseReader, StreamReader, make_reader, run_loop
from shellcore.session import Session
from shellcore.ui import colorize, init_logger, write_line


def parse_args(args: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments (None means sys.argv)."""
    parser = argparse.ArgumentParser(
        prog="shellcore",
        description="Line-oriented command shell",
        epilog="Environment variables: SHELLCORE_PS1, SHELLCORE_PS2, SHELLCORE_LOG_LEVEL, ...",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the logging level (default: from configuration, WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write a rotating log file",
    )
    parser.add_argument(
        "--no-completion",
        action="store_true",
        help="Disable tab completion in the interactive editor",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("-c", dest="command", metavar="COMMAND",
                        help="Run a single command line and exit")
    source.add_argument("--script", type=Path, metavar="FILE",
                        help="Run the command lines of FILE and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(args)


def _pick_reader(args: argparse.Namespace, session: Session,
                 enable_completion: bool, history_size: int) -> BaseReader:
    if args.command is not None:
        return StreamReader(io.StringIO(args.command + "\n"), history_size=history_size)
    if args.script is not None:
        text = args.script.read_text(encoding="utf-8")
        return StreamReader(io.StringIO(text), history_size=history_size)
    return make_reader(session, session.history, enable_completion=enable_completion,
                       history_size=history_size)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point; returns the process exit status."""
    args = parse_args(argv)

    try:
        config = load_config()
    except ConfigError as exc:
        init_logger().error("Invalid configuration: %s", exc)
        return 2

    logger = init_logger(
        "shellcore",
        level=args.log_level or config.log_level,
        logfile=args.log_file or config.log_file_path,
    )
    logger.info("shellcore %s starting up", __version__)

    session = Session.from_config(config)
    reader = _pick_reader(args, session,
                          enable_completion=config.enable_completion and not args.no_completion,
                          history_size=config.history_size)
    try:
        exit_code = asyncio.run(run_loop(session, reader=reader))
    except KeyboardInterrupt:
        write_line(session.stderr, colorize("Interrupted", "yellow"))
        return 130
    finally:
        logging.getLogger("shellcore").info("shellcore shutting down")

    return exit_code or 0
