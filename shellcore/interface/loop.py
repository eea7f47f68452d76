#!/usr/bin/env python3
# shellcore/interface/loop.py
from __future__ import annotations

"""
The read / parse / dispatch loop.

    Prompting -> Parsing -> Dispatching -> (Prompting | Terminated)

One logical line is fully dispatched, continuations included, before the
next one is read. Ctrl-C only cancels the pending read.
"""

import logging
from typing import TYPE_CHECKING, Optional

from shellcore.commands import CONTINUE, LoopSignal
from shellcore.interface.invoker import HELP_COMMAND, invoke_command
from shellcore.interface.parser import tokenize
from shellcore.interface.reader import BaseReader, make_reader

if TYPE_CHECKING:
    from shellcore.session import Session

logger = logging.getLogger(__name__)

HELP_FLAG = "--help"


async def dispatch_tokens(session: "Session", tokens: list[str]) -> LoopSignal:
    """Dispatch one tokenized line; `<name> ... --help` shows the help of <name>."""
    tokens = [token for token in tokens if token]
    if not tokens:
        return CONTINUE

    command_name, *args = tokens
    if HELP_FLAG in args:
        return await invoke_command(session, HELP_COMMAND, [command_name])
    return await invoke_command(session, command_name, args)


async def dispatch_line(session: "Session", line: str) -> LoopSignal:
    """Tokenize and dispatch a raw command line."""
    return await dispatch_tokens(session, tokenize(line))


async def run_loop(
    session: "Session",
    history: Optional[list[str]] = None,
    *,
    reader: Optional[BaseReader] = None,
) -> Optional[int]:
    """
    Prompt for commands and invoke each of them until one asks to quit.

    Returns the exit code carried by the quit signal (None for a plain quit
    or when the input ends). Read errors other than interrupt / end of
    input propagate.
    """
    if history is not None:
        session.history = history
    if reader is None:
        reader = make_reader(session, session.history)
    else:
        reader.history = session.history

    with reader:
        while True:
            try:
                line = await reader.read_command(session)
            except KeyboardInterrupt:
                # Drop the pending input and prompt again
                continue
            except EOFError:
                logger.debug("Input exhausted, leaving the command loop")
                return None

            signal = await dispatch_line(session, line)
            if signal.quit:
                logger.debug("Quit requested (exit code %r)", signal.exit_code)
                return signal.exit_code
