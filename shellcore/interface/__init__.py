#!/usr/bin/env python3
# shellcore/interface/__init__.py
from __future__ import annotations

"""
Package for the interactive loop and command dispatch.

Provides:
- Error-handler groups and resolution.
- Command-name completion.
- The fault-isolating command invoker.
- Line readers (prompt_toolkit / plain streams).
- The read / parse / dispatch loop.
"""


# Resolver FIRST (the invoker depends on it)
from .errors import (
    CodePattern,
    CodePredicate,
    ErrorHandlerGroup,
    ExactCode,
    Fallback,
    default_error_handlers,
    error_code,
    handle_error,
    resolve_handler,
)

# Parser / completion
from .parser import tokenize, is_incomplete
from .completion import complete, split_for_completion, suggest

# Invoker
from .invoker import DispatchContext, current_dispatch, invoke_command, spawn

# Readers and loop
from .reader import BaseReader, PromptToolkitReader, StreamReader, make_reader
from .loop import dispatch_line, dispatch_tokens, run_loop

__all__ = [
    # errors
    "CodePattern",
    "CodePredicate",
    "ErrorHandlerGroup",
    "ExactCode",
    "Fallback",
    "default_error_handlers",
    "error_code",
    "handle_error",
    "resolve_handler",
    # parser / completion
    "tokenize",
    "is_incomplete",
    "complete",
    "split_for_completion",
    "suggest",
    # invoker
    "DispatchContext",
    "current_dispatch",
    "invoke_command",
    "spawn",
    # readers / loop
    "BaseReader",
    "PromptToolkitReader",
    "StreamReader",
    "make_reader",
    "dispatch_line",
    "dispatch_tokens",
    "run_loop",
]
