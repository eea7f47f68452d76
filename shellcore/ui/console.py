#!/usr/bin/env python3
# shellcore/ui/console.py
from __future__ import annotations

import threading
from typing import TextIO

from .ansi import strip_ansi, supports_color

# Single shared print mutex for all UI output (prompts, logging, command output).
PRINT_MUTEX = threading.Lock()


def write_line(stream: TextIO, text: str = "", *, flush: bool = True) -> None:
    """
    Thread-safe single-line write to one of the session streams.

    Color codes are dropped when the stream is not a terminal so that
    redirected output and captured test streams stay plain.
    """
    if not supports_color(stream):
        text = strip_ansi(text)
    with PRINT_MUTEX:
        stream.write(f"{text}\n")
        if flush:
            stream.flush()

