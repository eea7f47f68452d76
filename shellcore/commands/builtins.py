#!/usr/bin/env python3
# shellcore/commands/builtins.py
from __future__ import annotations

"""
Commands every session starts with.

`help` must always be present: the dispatcher falls back to it for unknown
command names and for `<command> --help`.
"""

from typing import TYPE_CHECKING

from shellcore.exceptions import UsageError
from shellcore.ui import clear_screen, colorize, format_table, write_line

from .command_types import QUIT, Command, LoopSignal, quit_with
from .commands import CommandRegistry

if TYPE_CHECKING:
    from shellcore.session import Session

STDERR_FLAG = "--stderr"


# ---------- help ----------

def _format_listing(registry: CommandRegistry) -> str:
    categories = registry.categories()
    blocks: list[str] = []
    for category in sorted(categories, key=lambda c: (c != "general", c)):
        rows = []
        for command_obj in sorted(categories[category], key=lambda c: c.name):
            names = ", ".join([command_obj.name, *command_obj.aliases])
            rows.append([colorize(names, "bold"), command_obj.description or "(no description)"])
        title = "Commands" if category == "general" else f"Commands ({category})"
        blocks.append(f"{title}:\n{format_table(rows)}")
    return "\n\n".join(blocks)


def _format_command_help(command_obj: Command) -> str:
    lines = [f"{colorize(command_obj.name, 'bold')}: {command_obj.description or '(no description)'}"]
    if command_obj.aliases:
        lines.append(f"  Aliases: {', '.join(command_obj.aliases)}")
    lines.append(f"  Usage:   {command_obj.usage or command_obj.name}")
    return "\n".join(lines)


def help_command(session: "Session", args: list[str]) -> None:
    """Show the command list, or the details of the given commands."""
    stream = session.stderr if STDERR_FLAG in args else session.stdout
    names = [arg for arg in args if arg != STDERR_FLAG]

    if not names:
        write_line(stream, _format_listing(session.commands))
        return

    for name in names:
        command_obj = session.commands.get(name)
        if command_obj is None:
            write_line(stream, colorize(f"No such command: {name}", "yellow"))
        else:
            write_line(stream, _format_command_help(command_obj))


def _complete_command_names(session: "Session", args: list[str]) -> list[str]:
    prefix = args[-1] if args else ""
    return [name for name in session.commands.names() if name.startswith(prefix)]


# ---------- quit ----------

def quit_command(session: "Session", args: list[str]) -> LoopSignal:
    """Leave the shell, optionally with an exit code."""
    if not args:
        return QUIT
    if len(args) > 1:
        raise UsageError("quit takes at most one argument", usage="quit [code]")
    try:
        return quit_with(int(args[0]))
    except ValueError:
        raise UsageError(f"exit code must be an integer, got {args[0]!r}",
                         usage="quit [code]") from None


# ---------- clear ----------

def clear_command(session: "Session", args: list[str]) -> None:
    """Clear the terminal screen."""
    clear_screen(session.stdout)


# ---------- history ----------

def history_command(session: "Session", args: list[str]) -> None:
    """Show the lines entered during this session."""
    if args:
        try:
            count = int(args[0])
        except ValueError:
            raise UsageError(f"count must be an integer, got {args[0]!r}",
                             usage="history [count]") from None
        entries = session.history[-count:] if count > 0 else []
        offset = len(session.history) - len(entries)
    else:
        entries, offset = session.history, 0

    for index, line in enumerate(entries, start=offset + 1):
        write_line(session.stdout, f"{index:5d}  {line}")


# ---------- set ----------

def set_command(session: "Session", args: list[str]) -> None:
    """Show environment variables, or assign one: set <name> <value...>."""
    if not args:
        for key in sorted(session.env):
            write_line(session.stdout, f"{key}={session.env[key]}")
        return

    key, *value = args
    if not value:
        if key not in session.env:
            raise UsageError(f"{key} is not set", usage="set [name [value...]]")
        write_line(session.stdout, f"{key}={session.env[key]}")
        return
    session.env[key] = " ".join(value)


def _complete_env_keys(session: "Session", args: list[str]) -> list[str]:
    if len(args) > 1:
        return []
    prefix = args[-1] if args else ""
    return [key for key in sorted(session.env) if key.startswith(prefix)]


BUILTIN_COMMANDS: tuple[Command, ...] = (
    Command(name="help", callback=help_command,
            description="Show available commands or help for one command",
            usage="help [command...]", completer=_complete_command_names),
    Command(name="quit", callback=quit_command, aliases=("exit",),
            description="Leave the shell", usage="quit [code]"),
    Command(name="clear", callback=clear_command, aliases=("cls",),
            description="Clear the screen", usage="clear"),
    Command(name="history", callback=history_command,
            description="Show the lines entered during this session",
            usage="history [count]"),
    Command(name="set", callback=set_command, aliases=("env",),
            description="Show or assign environment variables (ps1, ps2, ...)",
            usage="set [name [value...]]", completer=_complete_env_keys),
)


def register_builtins(registry: CommandRegistry) -> None:
    """Install built-ins whose names are still free; user commands win."""
    for command_obj in BUILTIN_COMMANDS:
        if any(key in registry for key in (command_obj.name, *command_obj.aliases)):
            continue
        registry.register(Command(
            name=command_obj.name,
            callback=command_obj.callback,
            description=command_obj.description,
            usage=command_obj.usage,
            completer=command_obj.completer,
            aliases=command_obj.aliases,
            category=command_obj.category,
            module=__name__,
        ))
