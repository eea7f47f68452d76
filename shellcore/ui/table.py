#!/usr/bin/env python3
# shellcore/ui/table.py
from __future__ import annotations

from typing import List, Sequence

from .ansi import strip_ansi


def _calculate_column_widths(rows: Sequence[Sequence[str]]) -> List[int]:
    """Compute visual widths ignoring ANSI sequences."""
    column_widths: List[int] = []
    for row in rows:
        for col_idx, cell in enumerate(row):
            cell_length = len(strip_ansi(cell))
            if col_idx >= len(column_widths):
                column_widths.append(cell_length)
            else:
                column_widths[col_idx] = max(column_widths[col_idx], cell_length)
    return column_widths


def format_table(
    rows: Sequence[Sequence[object]],
    *,
    indent: int = 2,
    gap: int = 3,
) -> str:
    """Return a borderless, left-aligned column layout (ANSI-safe widths)."""
    str_rows: List[List[str]] = [[str(cell) for cell in row] for row in rows]
    widths = _calculate_column_widths(str_rows)

    def render_row(row: Sequence[str]) -> str:
        parts = []
        for i, cell in enumerate(row):
            if i == len(row) - 1:
                parts.append(cell)
            else:
                parts.append(cell + " " * (widths[i] - len(strip_ansi(cell)) + gap))
        return (" " * indent + "".join(parts)).rstrip()

    return "\n".join(render_row(row) for row in str_rows)
