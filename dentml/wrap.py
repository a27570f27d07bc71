"""Greedy word wrapping for text and comment bodies."""

from __future__ import annotations

import re
from typing import List, Tuple

from rich.cells import cell_len

# A word plus the whitespace that follows it.
_CHUNK_RE = re.compile(r"(\S+\s+)")
# One sentence-ending word: no other period before the final one.
_SENTENCE_END_RE = re.compile(r"[^.]+\. ")


def chunks(text: str, period_spaces: int = 2) -> List[str]:
    """Split ``text`` into ``word + whitespace`` chunks.

    Chunks that end a sentence get ``period_spaces`` spaces after the period.
    """

    result: List[str] = []
    for chunk in _CHUNK_RE.split(text):
        if not chunk:
            continue
        if _SENTENCE_END_RE.fullmatch(chunk):
            chunk += " " * (period_spaces - 1)
        result.append(chunk)
    return result


def wrap_words(
    text: str,
    column: int,
    indent_width: int,
    margin: int,
    period_spaces: int = 2,
) -> Tuple[List[str], str]:
    """Pack ``text`` into lines no wider than ``margin`` where possible.

    The first line starts at ``column``, the following ones at
    ``indent_width``. The first chunk is never moved to a new line, since a
    newline would not make an over-long word fit. Returns the right-trimmed
    lines (without indentation) and the trailing whitespace to re-append
    after the last line.
    """

    lines: List[List[str]] = [[]]
    col = column
    first = True
    for chunk in chunks(text, period_spaces):
        if not first and margin > 0 and col + cell_len(chunk.rstrip()) > margin:
            lines.append([])
            col = indent_width
        lines[-1].append(chunk)
        col += cell_len(chunk)
        first = False
    trail = " " if text.endswith(" ") else ""
    return ["".join(line).rstrip() for line in lines], trail


__all__ = ["chunks", "wrap_words"]
