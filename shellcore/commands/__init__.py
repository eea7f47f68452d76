#!/usr/bin/env python3
# shellcore/commands/__init__.py
from __future__ import annotations

"""
Package for command definitions and registration.

Provides:
- Data structures and protocols (`Command`, `LoopSignal`, `CommandCallback`).
- The per-session registry and its decorator (`CommandRegistry`).
- Built-in commands (`register_builtins`).
"""


from .command_types import (
    CONTINUE,
    QUIT,
    Command,
    CommandCallback,
    CommandCompleter,
    LoopSignal,
    quit_with,
)
from .commands import CommandRegistry
from .builtins import BUILTIN_COMMANDS, register_builtins

__all__ = [
    "CONTINUE",
    "QUIT",
    "Command",
    "CommandCallback",
    "CommandCompleter",
    "LoopSignal",
    "quit_with",
    "CommandRegistry",
    "BUILTIN_COMMANDS",
    "register_builtins",
]
