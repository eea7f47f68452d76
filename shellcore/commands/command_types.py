#!/usr/bin/env python3
# shellcore/commands/command_types.py
from __future__ import annotations

"""
Command data structures and protocols.

This module defines:
- CommandCallback / CommandCompleter: the callable protocols a command implements.
- LoopSignal: what an invocation tells the loop (continue, quit, quit with a code).
- Command: a registered command with metadata and its callables.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Iterable, Optional, Protocol, Sequence, Union

if TYPE_CHECKING:
    from shellcore.session import Session


@dataclass(frozen=True, slots=True)
class LoopSignal:
    """
    Result of one dispatched line.

    Attributes:
        quit: True if the loop must stop after this dispatch.
        exit_code: Process exit status requested together with `quit`.
    """
    quit: bool = False
    exit_code: Optional[int] = None


CONTINUE = LoopSignal()
QUIT = LoopSignal(quit=True)


def quit_with(code: int) -> LoopSignal:
    """Signal that ends the loop and asks the process to exit with `code`."""
    return LoopSignal(quit=True, exit_code=code)


CommandOutcome = Union[LoopSignal, None]


class CommandCallback(Protocol):
    """
    Protocol for a command implementation.

    Plain functions and coroutine functions are both accepted; failures are
    reported by raising.
    """

    def __call__(  # pragma: no cover - signature only
        self, session: "Session", args: list[str]
    ) -> Union[CommandOutcome, Awaitable[CommandOutcome]]:
        ...


class CommandCompleter(Protocol):
    """Protocol for a command's own argument completion."""

    def __call__(  # pragma: no cover - signature only
        self, session: "Session", args: list[str]
    ) -> Union[Iterable[str], Awaitable[Iterable[str]]]:
        ...


@dataclass(slots=True)
class Command:
    """
    A registered command with metadata and the callables that run it.

    Important fields:
        name: Primary unique command name.
        callback: Function implementing the command.
        description: Short, user-facing description shown by `help`.
        usage: One-line usage string (optional).
        completer: Optional argument completion; absence means no candidates.
        aliases: Extra names resolving to the same command.
        category: Logical group for the help listing.
    """

    name: str
    callback: CommandCallback
    description: str = ""
    usage: str = ""
    completer: Optional[CommandCompleter] = None
    aliases: Sequence[str] = field(default_factory=tuple)
    category: str = "general"
    module: str = field(default="", repr=False)

    def invoke(self, session: "Session", args: list[str]) -> Any:
        """Execute the underlying callback; may return an awaitable."""
        return self.callback(session, args)

    @property
    def can_complete(self) -> bool:
        return self.completer is not None

    def complete(self, session: "Session", args: list[str]) -> Any:
        """Run the completer. Callers check `can_complete` first."""
        assert self.completer is not None
        return self.completer(session, args)
