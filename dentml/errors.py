"""Exceptions raised while building or printing a document."""

from __future__ import annotations

from typing import Optional


class DentError(Exception):
    """Base class for every error raised by dentml."""


class VoidElementHasChildrenError(DentError, ValueError):
    """An HTML void element (``<br>``, ``<img>``, ...) was given children."""

    def __init__(self, name: str, line: Optional[int] = None) -> None:
        self.name = name
        self.line = line
        where = f" at line {line}" if line is not None else ""
        super().__init__(f"Void element '{name}' with children{where}")


class UnknownNodeKindError(DentError, TypeError):
    """A node of a kind the printer does not know how to handle."""

    def __init__(self, node: object) -> None:
        self.node = node
        super().__init__(f"Unknown node kind: {node!r}")


class InvalidInputError(DentError, TypeError):
    """The input is neither text, bytes nor an already-parsed document."""

    def __init__(self, src: object) -> None:
        self.src = src
        super().__init__(f"invalid argument (expected str, bytes or document): {type(src).__name__}")


__all__ = [
    "DentError",
    "InvalidInputError",
    "UnknownNodeKindError",
    "VoidElementHasChildrenError",
]
