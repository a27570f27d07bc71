"""Simple DOM model consumed by the formatter.

Parser adapters in :mod:`dentml.parse` build this tree from lxml or
BeautifulSoup output; it can also be assembled by hand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional


class NodeKind(str, Enum):
    DOCUMENT = "document"
    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"
    CDATA = "cdata"
    ENTITY_REF = "entity_ref"
    PI = "pi"
    DTD = "dtd"
    DECL = "decl"
    ATTRIBUTE = "attribute"
    NAMESPACE = "namespace"


@dataclass
class DomAttr:
    name: str
    value: str = ""
    prefix: Optional[str] = None
    kind: NodeKind = field(default=NodeKind.ATTRIBUTE, init=False)


@dataclass
class DomNamespace:
    """A namespace declaration (``xmlns`` or ``xmlns:prefix``) on an element."""

    prefix: Optional[str]
    href: str
    kind: NodeKind = field(default=NodeKind.NAMESPACE, init=False)


@dataclass(eq=False)
class DomNode:
    """One node of a parsed document.

    ``name`` holds the element local name, PI target, entity name or DOCTYPE
    root name; ``text`` holds character data, comment/CDATA/PI bodies and the
    raw source of markup declarations.
    """

    kind: NodeKind
    name: str = ""
    prefix: Optional[str] = None
    text: str = ""
    attrs: List[DomAttr] = field(default_factory=list)
    namespaces: List[DomNamespace] = field(default_factory=list)
    children: List["DomNode"] = field(default_factory=list)
    parent: Optional["DomNode"] = field(default=None, repr=False)
    line: Optional[int] = None
    version: str = "1.0"
    public_id: Optional[str] = None
    system_id: Optional[str] = None
    _position: int = field(default=-1, init=False, repr=False, compare=False)

    def append(self, child: "DomNode") -> "DomNode":
        child.parent = self
        child._position = len(self.children)
        self.children.append(child)
        return child

    def _index(self) -> int:
        if self.parent is None:
            raise ValueError("node has no parent")
        siblings = self.parent.children
        position = self._position
        if 0 <= position < len(siblings) and siblings[position] is self:
            return position
        # The children list was edited directly; find the node again.
        for index, sibling in enumerate(siblings):
            if sibling is self:
                self._position = index
                return index
        raise ValueError("node is not among its parent's children")

    def prev_sibling(self) -> Optional["DomNode"]:
        if self.parent is None:
            return None
        index = self._index()
        return self.parent.children[index - 1] if index > 0 else None

    def next_sibling(self) -> Optional["DomNode"]:
        if self.parent is None:
            return None
        index = self._index() + 1
        siblings = self.parent.children
        return siblings[index] if index < len(siblings) else None

    def preceding_siblings(self) -> Iterator["DomNode"]:
        """Earlier siblings, nearest first."""

        node = self.prev_sibling()
        while node is not None:
            yield node
            node = node.prev_sibling()

    @property
    def qualified_name(self) -> str:
        return f"{self.prefix}:{self.name}" if self.prefix else self.name

    def root(self) -> Optional["DomNode"]:
        """First element child; the document element when called on a document."""

        for child in self.children:
            if child.kind is NodeKind.ELEMENT:
                return child
        return None

    def doctype(self) -> Optional["DomNode"]:
        for child in self.children:
            if child.kind is NodeKind.DTD:
                return child
        return None


def document(*children: DomNode, version: str = "1.0") -> DomNode:
    doc = DomNode(NodeKind.DOCUMENT, version=version)
    for child in children:
        doc.append(child)
    return doc


def element(
    name: str,
    *children: DomNode,
    attrs: Optional[List[DomAttr]] = None,
    prefix: Optional[str] = None,
    line: Optional[int] = None,
) -> DomNode:
    node = DomNode(NodeKind.ELEMENT, name=name, prefix=prefix, attrs=list(attrs or []), line=line)
    for child in children:
        node.append(child)
    return node


def text(value: str) -> DomNode:
    return DomNode(NodeKind.TEXT, text=value)


__all__ = [
    "DomAttr",
    "DomNamespace",
    "DomNode",
    "NodeKind",
    "document",
    "element",
    "text",
]
