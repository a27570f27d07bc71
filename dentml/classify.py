"""Layout facts derived from a node and its direct children."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import FrozenSet, List, Tuple

from .dom_model import DomAttr, DomNamespace, DomNode, NodeKind
from .errors import UnknownNodeKindError, VoidElementHasChildrenError
from .options import DentOptions

VOID_ELEMENTS: FrozenSet[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "command",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

BOOLEAN_ATTRIBUTES: FrozenSet[str] = frozenset(
    {
        "allowfullscreen",
        "allowpaymentrequest",
        "async",
        "autofocus",
        "autoplay",
        "checked",
        "controls",
        "default",
        "defer",
        "disabled",
        "formnovalidate",
        "hidden",
        "ismap",
        "itemscope",
        "loop",
        "multiple",
        "muted",
        "nomodule",
        "novalidate",
        "open",
        "playsinline",
        "readonly",
        "required",
        "reversed",
        "selected",
        "truespeed",
        "typemustmatch",
    }
)

ELEMENT_LIKE = frozenset({NodeKind.ELEMENT, NodeKind.COMMENT, NodeKind.PI})
TEXT_LIKE = frozenset({NodeKind.TEXT, NodeKind.CDATA, NodeKind.ENTITY_REF})

# Whitespace other than U+00A0, which counts as content.
_BLANK_RE = re.compile(r"[^\S\xa0]*")


@dataclass
class NodeFacts:
    text: bool = False
    element: bool = False
    comment: bool = False
    dtd: bool = False
    elements: bool = False
    nonempty: bool = False
    mixed: bool = False
    # Children are laid out inline: mixed content, or text split by entity
    # references or CDATA.
    flow: bool = False
    void: bool = False
    name: str = ""
    attributes: List[DomAttr] = field(default_factory=list)
    namespaces: List[DomNamespace] = field(default_factory=list)


def is_blank(value: str) -> bool:
    return _BLANK_RE.fullmatch(value) is not None


def node_kind(node: object) -> NodeKind:
    kind = getattr(node, "kind", None)
    if isinstance(kind, NodeKind):
        return kind
    raise UnknownNodeKindError(node)


def own_facts(node: DomNode) -> Tuple[bool, bool, bool]:
    """``(text-like, element-like, nonempty)`` for one child."""

    kind = node_kind(node)
    if kind is NodeKind.TEXT:
        return True, False, not is_blank(node.text)
    if kind in (NodeKind.CDATA, NodeKind.ENTITY_REF):
        return True, False, True
    if kind in ELEMENT_LIKE:
        return False, True, False
    if kind in (NodeKind.DTD, NodeKind.DECL):
        return False, False, False
    raise UnknownNodeKindError(node)


def collate_key(value: str) -> Tuple[str, str]:
    """Case-insensitive ordering with lowercase first on ties."""

    return value.casefold(), value.swapcase()


def attribute_sort_key(attr: DomAttr) -> Tuple[bool, Tuple[str, str], Tuple[str, str]]:
    return attr.prefix is not None, collate_key(attr.prefix or ""), collate_key(attr.name)


def namespace_sort_key(ns: DomNamespace) -> Tuple[bool, Tuple[str, str]]:
    return ns.prefix is not None, collate_key(ns.prefix or "")


def element_name(node: DomNode, options: DentOptions) -> str:
    name = node.qualified_name
    return name.lower() if options.is_html else name


def classify(node: DomNode, options: DentOptions) -> NodeFacts:
    """Compute the layout facts for ``node``.

    Raises :class:`VoidElementHasChildrenError` for an HTML void element
    with children and :class:`UnknownNodeKindError` for anything that is
    not a known node kind.
    """

    kind = node_kind(node)
    facts = NodeFacts()
    if kind is NodeKind.ELEMENT:
        facts.element = True
        facts.name = element_name(node, options)
        if options.is_html and facts.name in VOID_ELEMENTS:
            facts.void = True
            if node.children:
                raise VoidElementHasChildrenError(facts.name, node.line)
        facts.attributes = sorted(node.attrs, key=attribute_sort_key)
        facts.namespaces = sorted(node.namespaces, key=namespace_sort_key)
    elif kind is NodeKind.TEXT:
        facts.text = True
        facts.nonempty = not is_blank(node.text)
    elif kind in (NodeKind.CDATA, NodeKind.ENTITY_REF):
        facts.text = True
        facts.nonempty = True
    elif kind is NodeKind.COMMENT:
        facts.comment = True
        facts.element = True
        facts.nonempty = not is_blank(node.text)
    elif kind is NodeKind.PI:
        facts.element = True
        facts.name = node.name
    elif kind is NodeKind.DTD:
        facts.dtd = True
    elif kind not in (NodeKind.DOCUMENT, NodeKind.DECL):
        raise UnknownNodeKindError(node)

    if kind in (NodeKind.ELEMENT, NodeKind.DOCUMENT):
        runs = 0
        for child in node.children:
            text_like, element_like, nonempty = own_facts(child)
            if text_like and nonempty:
                facts.nonempty = True
                runs += 1
            if element_like:
                facts.elements = True
        facts.mixed = facts.elements and facts.nonempty
        facts.flow = facts.mixed or (kind is NodeKind.ELEMENT and runs > 1)
    return facts


__all__ = [
    "BOOLEAN_ATTRIBUTES",
    "ELEMENT_LIKE",
    "NodeFacts",
    "TEXT_LIKE",
    "VOID_ELEMENTS",
    "attribute_sort_key",
    "classify",
    "collate_key",
    "is_blank",
    "namespace_sort_key",
    "node_kind",
]
