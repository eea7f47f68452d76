#!/usr/bin/env python3
# shellcore/interface/parser.py
from __future__ import annotations

"""
Tokenizing helpers for the command loop.

Responsibilities:
- Split a command line into shell-like tokens (POSIX quoting, no comments).
- Tell whether a physical line still needs a continuation line.
- Join a continuation line onto the pending input.
"""

import re
import shlex

COMMENT_RE = re.compile(r"^\s*#")


def tokenize(command_line: str) -> list[str]:
    """
    Split a raw command line into non-empty tokens using POSIX rules.

    On malformed quoting, fall back to plain whitespace splitting.
    """
    try:
        tokens = shlex.split(command_line, posix=True)
    except ValueError:
        tokens = command_line.split()
    return [token for token in tokens if token]


def is_incomplete(command_line: str) -> bool:
    """
    True while a quote is left open or the line ends with an escaping backslash.

    Comment lines are always complete, whatever they contain.
    """
    if COMMENT_RE.match(command_line):
        return False
    try:
        shlex.split(command_line, posix=True)
    except ValueError:
        return True
    return False


def join_continuation(pending: str, continuation: str) -> str:
    """Append a continuation line: backslash-newline vanishes, quoted newlines stay."""
    if pending.endswith("\\"):
        return pending[:-1] + continuation
    return f"{pending}\n{continuation}"
