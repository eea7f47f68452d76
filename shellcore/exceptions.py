#!/usr/bin/env python3
# shellcore/exceptions.py
from __future__ import annotations

"""
Exception hierarchy shared by commands, the dispatcher and configuration.

Commands report failure by raising. Anything carrying a ``code`` attribute
can be routed to a specific rule of an error-handler group; the codes used
by the built-in exceptions follow the errno naming style (``EUSAGE`` ...).
"""

from typing import Any


class ShellError(Exception):
    """Base class for errors raised by shell commands and the dispatcher."""

    default_code: str | None = None

    def __init__(self, message: str = "", *, code: Any = None) -> None:
        super().__init__(message)
        self.code = code if code is not None else self.default_code


class CommandError(ShellError):
    """A command failed; `code` selects the recovery rule."""


class UsageError(CommandError):
    """A command was called with arguments it cannot accept."""

    default_code = "EUSAGE"

    def __init__(self, message: str = "", *, usage: str = "", code: Any = None) -> None:
        super().__init__(message, code=code)
        self.usage = usage


class ProtocolError(ShellError):
    """A command reported completion more than once or outside its dispatch."""

    default_code = "EPROTO"


class ConfigError(ShellError, ValueError):
    """Configuration value failed validation."""

    default_code = "ECONFIG"
