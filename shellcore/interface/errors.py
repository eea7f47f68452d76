#!/usr/bin/env python3
# shellcore/interface/errors.py
from __future__ import annotations

"""
Error-handler resolution.

Handler tables are plain data: an ordered list of `ErrorHandlerGroup`s, each
scoped to one exception kind and holding four rule tiers:

    1) ExactCode      - error code equals a string (string codes only)
    2) CodePattern    - regex search against the code (string codes only)
    3) CodePredicate  - callable(code) -> bool (any code, including None)
    4) Fallback       - always applies

The first group whose kind matches wins, then the first rule of the first
tier that applies. Errors nothing applies to are re-raised unchanged.
"""

import errno
import inspect
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional, Pattern, Sequence, Union

from shellcore.commands import CONTINUE, LoopSignal
from shellcore.exceptions import ShellError, UsageError
from shellcore.ui import colorize, write_line

if TYPE_CHECKING:
    from shellcore.session import Session

logger = logging.getLogger(__name__)

Handler = Callable[[BaseException, "Session"], Any]
ErrorKind = Union[type[BaseException], tuple[type[BaseException], ...]]


def error_code(error: BaseException) -> Any:
    """
    Return the code rules are matched against.

    `error.code` when the exception has one, else the symbolic errno name for
    OS errors (``ECONNRESET``, ``ENOENT`` ...), else None.
    """
    code = getattr(error, "code", None)
    if code is None and isinstance(error, OSError) and error.errno is not None:
        code = errno.errorcode.get(error.errno)
    return code


# ---------------------------------------------------------------------------
# Rule variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ExactCode:
    code: str
    handler: Handler

    def applies(self, code: Any) -> bool:
        return isinstance(code, str) and code == self.code


@dataclass(frozen=True, slots=True)
class CodePattern:
    pattern: Pattern[str]
    handler: Handler

    def __post_init__(self) -> None:
        if isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", re.compile(self.pattern))

    def applies(self, code: Any) -> bool:
        return isinstance(code, str) and self.pattern.search(code) is not None


@dataclass(frozen=True, slots=True)
class CodePredicate:
    predicate: Callable[[Any], bool]
    handler: Handler

    def applies(self, code: Any) -> bool:
        return bool(self.predicate(code))


@dataclass(frozen=True, slots=True)
class Fallback:
    handler: Handler

    def applies(self, code: Any) -> bool:
        return True


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------

@dataclass
class ErrorHandlerGroup:
    """
    Recovery rules for one exception kind.

    Rules may be given up front or added with the decorator helpers:

        network = ErrorHandlerGroup(OSError)

        @network.on_code("ECONNRESET")
        def _reset(error, session): ...

        @network.otherwise
        def _any(error, session): ...
    """

    kind: ErrorKind
    exact: list[ExactCode] = field(default_factory=list)
    patterns: list[CodePattern] = field(default_factory=list)
    predicates: list[CodePredicate] = field(default_factory=list)
    fallback: Optional[Fallback] = None

    def matches(self, error: BaseException) -> bool:
        return isinstance(error, self.kind)

    def resolve(self, error: BaseException) -> Optional[Handler]:
        """Return the handler of the first applicable rule, tier by tier."""
        code = error_code(error)
        tiers: Sequence[Sequence[Any]] = (
            self.exact,
            self.patterns,
            self.predicates,
            (self.fallback,) if self.fallback is not None else (),
        )
        for rules in tiers:
            for rule in rules:
                if rule.applies(code):
                    return rule.handler
        return None

    # ---------------- decorator helpers ----------------

    def on_code(self, code: str) -> Callable[[Handler], Handler]:
        def wrapper(handler: Handler) -> Handler:
            self.exact.append(ExactCode(code, handler))
            return handler
        return wrapper

    def on_pattern(self, pattern: str | Pattern[str]) -> Callable[[Handler], Handler]:
        def wrapper(handler: Handler) -> Handler:
            self.patterns.append(CodePattern(pattern, handler))  # type: ignore[arg-type]
            return handler
        return wrapper

    def on_predicate(self, predicate: Callable[[Any], bool]) -> Callable[[Handler], Handler]:
        def wrapper(handler: Handler) -> Handler:
            self.predicates.append(CodePredicate(predicate, handler))
            return handler
        return wrapper

    def otherwise(self, handler: Handler) -> Handler:
        self.fallback = Fallback(handler)
        return handler


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def find_group(
    error: BaseException, groups: Sequence[ErrorHandlerGroup]
) -> Optional[ErrorHandlerGroup]:
    """First group whose kind matches the error (not the most specific one)."""
    return next((group for group in groups if group.matches(error)), None)


def resolve_handler(
    error: BaseException, groups: Sequence[ErrorHandlerGroup]
) -> Optional[Handler]:
    """Return the single handler for `error`, or None when nothing applies."""
    group = find_group(error, groups)
    if group is None:
        return None
    return group.resolve(error)


async def handle_error(error: BaseException, session: "Session") -> LoopSignal:
    """
    Route `error` to its handler and return what the handler decided.

    The handler resumes the loop by returning (None or a LoopSignal). Errors
    no group or rule applies to are re-raised as they are; so are errors the
    handler itself raises.
    """
    handler = resolve_handler(error, session.error_handlers)
    if handler is None:
        logger.error("No error handler for %s (code=%r)",
                     type(error).__name__, error_code(error))
        raise error

    logger.debug("Handling %s with %s", type(error).__name__,
                 getattr(handler, "__qualname__", handler))
    outcome = handler(error, session)
    if inspect.isawaitable(outcome):
        outcome = await outcome
    return outcome if isinstance(outcome, LoopSignal) else CONTINUE


# ---------------------------------------------------------------------------
# Defaults installed on new sessions
# ---------------------------------------------------------------------------

def _report_usage(error: BaseException, session: "Session") -> None:
    write_line(session.stderr, colorize(f"[error] {error}", "red"))
    usage = getattr(error, "usage", "")
    if usage:
        write_line(session.stderr, f"Usage: {usage}")


def _report_shell_error(error: BaseException, session: "Session") -> None:
    code = error_code(error)
    suffix = f" ({code})" if code else ""
    write_line(session.stderr, colorize(f"[error] {error}{suffix}", "red"))


def default_error_handlers() -> list[ErrorHandlerGroup]:
    """
    Handler groups for the package's own exceptions.

    Anything that is not a ShellError stays unhandled and ends the process,
    so bugs in commands surface with their traceback.
    """
    shell_errors = ErrorHandlerGroup(ShellError)
    shell_errors.on_code(UsageError.default_code)(_report_usage)  # type: ignore[arg-type]
    shell_errors.otherwise(_report_shell_error)
    return [shell_errors]
