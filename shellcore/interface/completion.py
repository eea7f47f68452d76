#!/usr/bin/env python3
# shellcore/interface/completion.py
from __future__ import annotations

"""
Command line completion.

- No token yet: every registered command name.
- First token: command names starting with it, registration order kept.
- Later tokens: delegated to the command's own completer, if it has one.
"""

import inspect
import shlex
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shellcore.session import Session


def split_for_completion(raw_input: str) -> list[str]:
    """
    Split a live input buffer into completion tokens.

    Behavior:
      - Use shlex.split for shell-like parsing (POSIX).
      - If trailing whitespace exists, append an empty token to signal a new one.
      - On malformed quotes, fall back to whitespace splitting.
    """
    raw_input = raw_input.lstrip()
    if not raw_input:
        return []

    try:
        parts = shlex.split(raw_input, posix=True)
    except ValueError:
        parts = raw_input.split()
    if raw_input[-1].isspace():
        parts.append("")
    return parts


async def complete(session: "Session", tokens: list[str]) -> list[str]:
    """Return completion candidates for `tokens` (the last one is being typed)."""
    args = list(tokens)
    all_command_names = session.commands.names()
    if not args:
        return all_command_names
    if len(args) == 1:
        return [name for name in all_command_names if name.startswith(args[0])]

    # We presumably have a command name already; feed the remaining
    # arguments into the command's own completer
    command_name, *rest = args
    command_obj = session.commands.get(command_name)
    if command_obj is None or not command_obj.can_complete:
        return []

    candidates = command_obj.complete(session, rest)
    if inspect.isawaitable(candidates):
        candidates = await candidates
    return list(candidates)


async def suggest(session: "Session", text_before_cursor: str) -> list[str]:
    """Candidates for the buffer content left of the cursor."""
    return await complete(session, split_for_completion(text_before_cursor))
