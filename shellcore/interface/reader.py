#!/usr/bin/env python3
# shellcore/interface/reader.py
from __future__ import annotations

"""
Line reading frontends.

Selection order:
    1) prompt_toolkit (completion + in-memory history) on an interactive terminal
    2) plain stream reading (pipes, scripts, tests)

Every reader raises KeyboardInterrupt when the pending read is interrupted
and EOFError when the input is exhausted.
"""

from typing import TYPE_CHECKING, Optional, TextIO

from shellcore.interface.completion import split_for_completion, suggest
from shellcore.interface.parser import is_incomplete, join_continuation

if TYPE_CHECKING:
    from shellcore.session import Session

DEFAULT_HISTORY_SIZE = 500


class BaseReader:
    """
    Base interface for line readers.

    Subclasses implement `read_line()`; `setup()`/`teardown()` are optional.
    `read_command()` joins continuation lines and records the result in the
    history list, which is shared with the session.
    """

    def __init__(self, history: Optional[list[str]] = None,
                 history_size: int = DEFAULT_HISTORY_SIZE) -> None:
        self.history: list[str] = history if history is not None else []
        self.history_size = history_size

    def setup(self) -> None:
        ...

    async def read_line(self, prompt: str) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    def teardown(self) -> None:
        ...

    async def read_command(self, session: "Session") -> str:
        """Read one logical command, prompting with ps2 while it is incomplete."""
        line = await self.read_line(session.prompt("ps1"))
        while is_incomplete(line):
            line = join_continuation(line, await self.read_line(session.prompt("ps2")))

        if line.strip():
            self.history.append(line)
            if len(self.history) > self.history_size:
                del self.history[:-self.history_size]
        return line

    # Context manager helpers
    def __enter__(self) -> "BaseReader":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()


class StreamReader(BaseReader):
    """Read lines from a text stream; prompts go to `output` when given."""

    def __init__(self, stream: TextIO, output: Optional[TextIO] = None,
                 history: Optional[list[str]] = None,
                 history_size: int = DEFAULT_HISTORY_SIZE) -> None:
        super().__init__(history, history_size)
        self._stream = stream
        self._output = output

    async def read_line(self, prompt: str) -> str:
        if self._output is not None:
            self._output.write(prompt)
            self._output.flush()
        line = self._stream.readline()
        if line == "":
            raise EOFError
        return line.rstrip("\r\n")


class PromptToolkitReader(BaseReader):
    """Line editor with history and live completion."""

    def __init__(self, session: "Session", history: Optional[list[str]] = None,
                 *, enable_completion: bool = True,
                 history_size: int = DEFAULT_HISTORY_SIZE) -> None:
        from prompt_toolkit import PromptSession
        from prompt_toolkit.completion import Completer, Completion
        from prompt_toolkit.history import InMemoryHistory
        from prompt_toolkit.key_binding import KeyBindings

        super().__init__(history, history_size)

        # Seed editor history from lines accepted earlier in this process only
        editor_history = InMemoryHistory()
        for entry in self.history:
            editor_history.append_string(entry)

        shell_session = session

        class _Completer(Completer):
            def get_completions(self, document, complete_event):
                # prompt_async only drives get_completions_async
                return iter(())

            async def get_completions_async(self, document, complete_event):
                parts = split_for_completion(document.text_before_cursor)
                replace_len = len(parts[-1]) if parts else 0
                for word in await suggest(shell_session, document.text_before_cursor):
                    yield Completion(word, start_position=-replace_len)

        # Key bindings to refresh completion when deleting characters.
        kb = KeyBindings()

        @kb.add("backspace")
        def _(event):
            b = event.app.current_buffer
            if b.selection_state:
                b.cut_selection()
            else:
                b.delete_before_cursor(1)
            b.start_completion(select_first=False)

        self._prompt_session = PromptSession(
            history=editor_history,
            completer=_Completer() if enable_completion else None,
            complete_while_typing=enable_completion,
            key_bindings=kb if enable_completion else None,
        )

    async def read_line(self, prompt: str) -> str:
        return await self._prompt_session.prompt_async(prompt)


def make_reader(session: "Session", history: Optional[list[str]] = None, *,
                enable_completion: bool = True,
                history_size: int = DEFAULT_HISTORY_SIZE) -> BaseReader:
    """
    Factory to select the best available reader for the session's streams.
    """
    interactive = all(
        getattr(stream, "isatty", lambda: False)() for stream in (session.stdin, session.stdout))
    if interactive:
        return PromptToolkitReader(session, history, enable_completion=enable_completion,
                                   history_size=history_size)
    # Terminal input with redirected output still gets prompts
    output = session.stdout if getattr(session.stdin, "isatty", lambda: False)() else None
    return StreamReader(session.stdin, output=output, history=history,
                        history_size=history_size)
