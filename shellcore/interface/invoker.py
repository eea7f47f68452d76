#!/usr/bin/env python3
# shellcore/interface/invoker.py
from __future__ import annotations

"""
Command invocation with per-dispatch fault isolation.

Each invocation gets a `DispatchContext`. While the command's primary call
runs, that context is the value of a ContextVar, so every continuation the
command starts with `spawn()` (and anything those start in turn) carries it
along. The primary call's exception, an exception from a spawned
continuation, or the first of several, is handed to the error resolver once.
The context variable is reset right after the primary call returns, so code
outside the command is never captured.
"""

import asyncio
import inspect
import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Awaitable, Optional

from shellcore.commands import CONTINUE, Command, LoopSignal
from shellcore.exceptions import ProtocolError, ShellError
from shellcore.interface.errors import handle_error
from shellcore.interface.parser import COMMENT_RE
from shellcore.ui import colorize, write_line

if TYPE_CHECKING:
    from shellcore.session import Session

logger = logging.getLogger(__name__)

HELP_COMMAND = "help"

_current_dispatch: ContextVar[Optional["DispatchContext"]] = ContextVar(
    "shellcore_dispatch", default=None)


class DispatchContext:
    """Fault boundary of a single command invocation."""

    def __init__(self, command_name: str) -> None:
        self.command_name = command_name
        self.error: Optional[BaseException] = None
        self.closed = False
        self._tasks: set[asyncio.Task[Any]] = set()

    def report(self, error: BaseException) -> bool:
        """Record `error`; only the first report of a dispatch counts."""
        if self.closed:
            logger.warning("'%s' reported %s after its dispatch finished; ignored",
                           self.command_name, type(error).__name__)
            return False
        if self.error is not None:
            logger.warning("'%s' reported a second error (%s: %s); ignored",
                           self.command_name, type(error).__name__, error)
            return False
        self.error = error
        return True

    def spawn(self, awaitable: Awaitable[Any]) -> asyncio.Task[Any]:
        """Run `awaitable` as a continuation of this dispatch."""
        if self.closed:
            raise ProtocolError(
                f"'{self.command_name}' started work after its dispatch finished")
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        # KeyboardInterrupt / SystemExit already left the event loop.
        if isinstance(exc, Exception):
            self.report(exc)

    async def wait(self) -> None:
        """Wait until every continuation is done or one of them failed."""
        while self._tasks and self.error is None:
            await asyncio.wait(set(self._tasks), return_when=asyncio.FIRST_COMPLETED)

    async def close(self) -> None:
        """
        Cancel leftover continuations and wait until they have unwound.

        Reports arriving from here on are protocol violations.
        """
        self.closed = True
        leftovers = list(self._tasks)
        for task in leftovers:
            task.cancel()
        if leftovers:
            await asyncio.gather(*leftovers, return_exceptions=True)


def current_dispatch() -> Optional[DispatchContext]:
    """The dispatch the calling code belongs to, if any."""
    return _current_dispatch.get()


def spawn(awaitable: Awaitable[Any]) -> asyncio.Task[Any]:
    """
    Start deferred work that belongs to the running command.

    Errors raised by it are routed like errors raised by the command itself,
    and the loop does not read the next line before it finishes.
    """
    dispatch = _current_dispatch.get()
    if dispatch is None:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise ProtocolError("spawn() called outside of a command dispatch")
    return dispatch.spawn(awaitable)


def _as_signal(session: "Session", outcome: Any) -> LoopSignal:
    """Normalize a command's return value; text results are printed."""
    if isinstance(outcome, LoopSignal):
        return outcome
    if outcome is not None:
        write_line(session.stdout, str(outcome))
    return CONTINUE


async def _run_isolated(session: "Session", command_obj: Command, args: list[str]) -> LoopSignal:
    dispatch = DispatchContext(command_obj.name)
    primary: Optional[asyncio.Task[Any]] = None
    outcome: Any = None

    token = _current_dispatch.set(dispatch)
    try:
        outcome = command_obj.invoke(session, args)
        if inspect.isawaitable(outcome):
            # The task copies the current context, dispatch included.
            primary = dispatch.spawn(outcome)
    except Exception as exc:
        dispatch.report(exc)
    finally:
        _current_dispatch.reset(token)

    try:
        await dispatch.wait()
    finally:
        await dispatch.close()

    if dispatch.error is not None:
        logger.debug("'%s' failed with %s", command_obj.name, type(dispatch.error).__name__)
        return await handle_error(dispatch.error, session)

    if primary is not None:
        outcome = primary.result()
    return _as_signal(session, outcome)


async def invoke_command(session: "Session", command_name: str, args: list[str]) -> LoopSignal:
    """
    Programmatically invoke a command by name with already parsed arguments.

    - Names starting with '#' (after optional whitespace) are comments: no-op.
    - Unknown names print a diagnostic and the command listing on stderr.
    - Known commands run inside a fault boundary; failures go to the
      session's error handlers.

    Returns the LoopSignal of the command (or of the error handler).
    """
    if COMMENT_RE.match(command_name):
        return CONTINUE

    command_obj = session.commands.get(command_name)
    if command_obj is None:
        if command_name == HELP_COMMAND:
            raise ShellError("The 'help' command is not registered.")
        logger.info("Invalid command: %s", command_name)
        write_line(session.stderr,
                   colorize("Invalid command: ", "red") + colorize(command_name, "white"))
        write_line(session.stderr)
        return await invoke_command(session, HELP_COMMAND, ["--stderr"])

    logger.debug("Dispatching %s %s", command_obj.name, args)
    return await _run_isolated(session, command_obj, list(args))
