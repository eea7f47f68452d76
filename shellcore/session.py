#!/usr/bin/env python3
# shellcore/session.py
from __future__ import annotations

"""
Session state shared by the loop, the dispatcher and every command.

A session owns the three streams, the environment mapping used to render
prompts, the command registry and the ordered error-handler groups. Only one
command runs at a time, so nothing here is locked.
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, TextIO

from shellcore.commands import CommandRegistry, register_builtins

if TYPE_CHECKING:
    from shellcore.config import ShellConfig
    from shellcore.interface.errors import ErrorHandlerGroup

logger = logging.getLogger(__name__)

DEFAULT_ENV: dict[str, str] = {"ps1": "> ", "ps2": "> "}


def _default_error_handlers() -> list["ErrorHandlerGroup"]:
    from shellcore.interface.errors import default_error_handlers

    return default_error_handlers()


@dataclass
class Session:
    """
    Capability surface consumed by the dispatcher.

    Attributes:
        stdin / stdout / stderr: Stream handles all command I/O goes through.
        env: Environment variables; ``ps1``/``ps2`` hold the prompt templates.
        commands: Registry of commands; built-ins are installed when missing.
        error_handlers: Ordered handler groups, first matching kind wins.
        history: Lines accepted by the reader during this run.
    """

    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)
    env: dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_ENV))
    commands: CommandRegistry = field(default_factory=CommandRegistry)
    error_handlers: list["ErrorHandlerGroup"] = field(default_factory=_default_error_handlers)
    history: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        for key, value in DEFAULT_ENV.items():
            self.env.setdefault(key, value)
        register_builtins(self.commands)

    @classmethod
    def from_config(cls, config: "ShellConfig", **kwargs: Any) -> "Session":
        """Build a session whose prompts come from `config`."""
        env = dict(kwargs.pop("env", {}))
        env.setdefault("ps1", config.ps1)
        env.setdefault("ps2", config.ps2)
        return cls(env=env, **kwargs)

    def env_value(self, key: str, default: Optional[Any] = None) -> Any:
        return self.env.get(key, default)

    def prompt(self, var: str = "ps1") -> str:
        """Render the prompt template stored under `var` against the environment."""
        template = str(self.env.get(var, ""))
        try:
            return template % self.env
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Cannot render %s %r: %s", var, template, exc)
            return template
