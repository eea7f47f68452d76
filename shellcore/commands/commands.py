#!/usr/bin/env python3
# shellcore/commands/commands.py
from __future__ import annotations

"""
Command registry and decorator utilities.

This module provides:
- CommandRegistry: ordered in-memory registry of commands and aliases.
- CommandRegistry.command: decorator registering a function with metadata.
"""

import inspect
from typing import Any, Callable, Dict, Iterator, Optional

from .command_types import Command, CommandCompleter


class CommandRegistry:
    """Holds all command definitions of one session and provides lookups."""

    def __init__(self) -> None:
        # Every lookup key (primary names and aliases) in registration order
        self._by_name: Dict[str, Command] = {}

    # ---------------- Registration ----------------

    def register(self, command_obj: Command, *, replace: bool = False) -> Command:
        """Register a command and its aliases, ensuring no collisions."""
        keys = [command_obj.name, *command_obj.aliases]
        if not replace:
            for key in keys:
                if key in self._by_name:
                    raise ValueError(f"Command name '{key}' already registered.")
        else:
            for key in keys:
                self.unregister(key)

        for key in keys:
            self._by_name[key] = command_obj
        return command_obj

    def unregister(self, name: str) -> Optional[Command]:
        """Remove a command (and its aliases) by any of its names."""
        command_obj = self._by_name.get(name)
        if command_obj is None:
            return None
        for key in [k for k, v in self._by_name.items() if v is command_obj]:
            del self._by_name[key]
        return command_obj

    def command(
        self,
        *,
        name: str | None = None,
        description: str | None = None,
        usage: str | None = None,
        completer: CommandCompleter | None = None,
        aliases: tuple[str, ...] = (),
        category: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """
        Decorator to register a function as a command with metadata.

        - Function name is transformed from snake_case to kebab-case for `name` if not provided.
        - The first docstring line becomes the description when none is given.
        """

        def wrapper(func: Callable[..., Any]) -> Callable[..., Any]:
            doc = inspect.getdoc(func) or ""
            command_obj = Command(
                name=name or func.__name__.replace("_", "-"),
                callback=func,
                description=(description or doc.split("\n", 1)[0]).strip(),
                usage=usage or "",
                completer=completer,
                aliases=tuple(aliases),
                category=category or "general",
            )
            command_obj.module = func.__module__
            self.register(command_obj)
            return func

        return wrapper

    # ---------------- Lookup ----------------

    def get(self, name: str) -> Optional[Command]:
        """Return the command by primary name or alias, or None if not found."""
        return self._by_name.get(name)

    def all(self) -> list[Command]:
        """Return only primary commands (avoid duplicates in listings)."""
        seen: list[Command] = []
        for command_obj in self._by_name.values():
            if not any(command_obj is c for c in seen):
                seen.append(command_obj)
        return seen

    def names(self) -> list[str]:
        """Return every registered name and alias, in registration order."""
        return list(self._by_name)

    def categories(self) -> dict[str, list[Command]]:
        """Group commands by category for help output."""
        grouped: dict[str, list[Command]] = {}
        for cmd in self.all():
            grouped.setdefault(cmd.category, []).append(cmd)
        return grouped

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[Command]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self.all())
