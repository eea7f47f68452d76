#!/usr/bin/env python3
# shellcore/__init__.py
from __future__ import annotations
"""
shellcore: interactive command dispatcher for line-oriented shells.

Avoid eager imports of the CLI entry point; `python -m shellcore` and the
console script import it on demand.
"""

__version__ = "0.1.0"

from shellcore.commands import (  # noqa: E402
    CONTINUE,
    QUIT,
    Command,
    CommandRegistry,
    LoopSignal,
    quit_with,
)
from shellcore.exceptions import (  # noqa: E402
    CommandError,
    ConfigError,
    ProtocolError,
    ShellError,
    UsageError,
)
from shellcore.interface import (  # noqa: E402
    ErrorHandlerGroup,
    complete,
    handle_error,
    invoke_command,
    run_loop,
    spawn,
)
from shellcore.session import Session  # noqa: E402

__all__ = [
    "__version__",
    "CONTINUE",
    "QUIT",
    "Command",
    "CommandRegistry",
    "LoopSignal",
    "quit_with",
    "CommandError",
    "ConfigError",
    "ProtocolError",
    "ShellError",
    "UsageError",
    "ErrorHandlerGroup",
    "complete",
    "handle_error",
    "invoke_command",
    "run_loop",
    "spawn",
    "Session",
]
