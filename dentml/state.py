"""Output accumulator that also measures what it has emitted.

A :class:`State` is used both for the real output and for trial renders:
print a node into a fresh state, look at ``lines``/``right``, then either
merge it with :meth:`State.out` or drop it.
"""

from __future__ import annotations

from typing import List, Optional, Tuple, Union

from rich.cells import cell_len

from .theme import Category, Colorizer

Piece = Union[str, Tuple[Category, str]]
Chunk = Tuple[Optional[Category], str]


class State:
    def __init__(
        self,
        spaces: int = 2,
        colorizer: Optional[Colorizer] = None,
        right: Optional[int] = 0,
    ) -> None:
        self.spaces = spaces
        self.colorizer = colorizer if colorizer is not None else Colorizer.plain()
        self.total = 0
        self.right = right
        self.start = right or 0
        self.lines = 0
        self.first_line_len: Optional[int] = None
        # Nothing but indentation on the current line so far.
        self.at_line_start = right == 0
        # Colors are applied when the text is read; widths use the plain text.
        self._chunks: List[Chunk] = []

    def __repr__(self) -> str:
        return (
            f"State(right={self.right!r}, total={self.total}, lines={self.lines}, "
            f"first_line_len={self.first_line_len!r})"
        )

    @property
    def text(self) -> str:
        return "".join(
            value if category is None else self.colorizer(category, value)
            for category, value in self._chunks
        )

    @property
    def strict(self) -> bool:
        """Negative spacing: never emit newlines or indentation."""

        return self.spaces < 0

    def detached(self) -> "State":
        """A measuring state whose width is added to, not replacing, ``right`` on merge."""

        return State(self.spaces, self.colorizer, right=None)

    def trial(self, spaces: Optional[int] = None) -> "State":
        """A scratch state seeded at the current column."""

        state = State(self.spaces if spaces is None else spaces, self.colorizer, right=self.right)
        state.at_line_start = self.at_line_start
        return state

    def _emit(self, chunks: List[Chunk]) -> None:
        plain = "".join(value for _, value in chunks)
        self._chunks.extend(chunks)
        width = cell_len(plain)
        self.total += width
        if self.right is not None:
            self.right += width
        if plain.strip(" "):
            self.at_line_start = False

    def out(self, value: Union[str, "State"]) -> "State":
        if isinstance(value, State):
            return self._merge(value)
        self._emit([(None, value)])
        return self

    def _merge(self, other: "State") -> "State":
        right_before = self.right or 0
        self._chunks.extend(other._chunks)
        self.total += other.total
        self.lines += other.lines
        if other.right is None:
            if self.right is not None:
                self.right += other.total
        else:
            self.right = other.right
        if other._chunks:
            self.at_line_start = other.at_line_start if other.right is not None else False
        if self.first_line_len is None and other.first_line_len is not None:
            self.first_line_len = (right_before - self.start) + other.first_line_len
        return self

    def color(self, *pieces: Piece) -> "State":
        """Emit ``pieces``; ``(category, text)`` tuples are colorized, strings are not."""

        self._emit([piece if isinstance(piece, tuple) else (None, piece) for piece in pieces])
        return self

    def rstrip(self) -> "State":
        """Drop spaces at the end of the current line."""

        while self._chunks:
            category, value = self._chunks[-1]
            trimmed = value.rstrip(" ")
            removed = len(value) - len(trimmed)
            self.total -= removed
            if self.right is not None:
                self.right -= removed
            if trimmed:
                self._chunks[-1] = (category, trimmed)
                break
            self._chunks.pop()
        return self

    def _break(self) -> None:
        if self.first_line_len is None:
            self.first_line_len = (self.right or 0) - self.start
        self._chunks.append((None, "\n"))
        self.total += 1
        self.right = 0
        self.lines += 1
        self.at_line_start = True

    def newline(self) -> "State":
        if self.spaces >= 0:
            self._break()
        return self

    def verbatim(self, text: str, category: Category = Category.TEXT) -> "State":
        """Emit ``text`` as-is, keeping its newlines even in strict mode."""

        for index, line in enumerate(text.split("\n")):
            if index:
                self._break()
            if line:
                self.color((category, line))
        return self

    def spaces_string(self, n: int) -> "State":
        if n > 0:
            self.out(" " * n)
        return self

    def indent_width(self, stops: int) -> int:
        if self.spaces <= 0 or stops <= 0:
            return 0
        return self.spaces * stops

    def indent(self, stops: int) -> "State":
        return self.spaces_string(self.indent_width(stops))


__all__ = ["Piece", "State"]
