"""Printers for every kind of node.

Each :class:`Wrapper` holds one node, its layout facts and the wrappers for
its children. ``print(indent, state)`` writes the node into ``state`` and
returns it. Use :meth:`Wrapper.create` rather than the constructors.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, ClassVar, Dict, List, Optional, Type, Union

from rich.cells import cell_len

from .classify import BOOLEAN_ATTRIBUTES, NodeFacts, classify, is_blank, node_kind
from .dom_model import DomAttr, DomNamespace, DomNode, NodeKind
from .errors import UnknownNodeKindError
from .state import Piece, State
from .theme import Category
from .wrap import wrap_words

if TYPE_CHECKING:
    from .dent import Denter

Node = Union[DomNode, DomAttr, DomNamespace]

P = Category.PUNCTUATION
E = Category.ELEMENT
A = Category.ATTRIBUTE
AV = Category.ATTRIBUTE_VALUE
T = Category.TEXT

ESCAPES: Dict[str, str] = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

_TEXT_ESCAPE_RE = re.compile(r"[&<>\xa0]")
_ATTRIBUTE_ESCAPE_RE = re.compile(r"[&<>\"'\xa0]")
_SPACE_RUN_RE = re.compile(r"[^\S\xa0]+")
_QUOTED_RE = re.compile(r"(['\"])([^'\"]+)\1")
_UNQUOTED_VALUE_RE = re.compile(r"[^ \t\r\n\"'=<>`]+")
_DECL_HEAD_RE = re.compile(r"<!(\S+)\s+(%\s+)?([^\s>]+)")


def escape(value: str, html: bool = False, attribute: bool = False) -> str:
    """Escape markup characters; U+00A0 becomes ``&nbsp;`` (HTML) or ``&#xA0;``."""

    nbsp = "&nbsp;" if html else "&#xA0;"
    pattern = _ATTRIBUTE_ESCAPE_RE if attribute else _TEXT_ESCAPE_RE
    return pattern.sub(lambda m: nbsp if m.group(0) == "\xa0" else ESCAPES[m.group(0)], value)


def requote(text: str, quote: str, category: Category) -> List[Piece]:
    """Split ``text`` into pieces with every quoted literal using ``quote``."""

    pieces: List[Piece] = []
    pos = 0
    for match in _QUOTED_RE.finditer(text):
        if match.start() > pos:
            pieces.append(text[pos : match.start()])
        pieces.extend([(P, quote), (category, match.group(2)), (P, quote)])
        pos = match.end()
    if pos < len(text):
        pieces.append(text[pos:])
    return pieces


def exceeds(width: int, margin: int) -> bool:
    return margin > 0 and width > margin


def fits(width: int, margin: int) -> bool:
    return margin <= 0 or width < margin


class Wrapper:
    """Base class for node printers."""

    kind: ClassVar[Optional[NodeKind]] = None

    def __init__(self, denter: "Denter", node: Node, parent: Optional["Wrapper"] = None) -> None:
        self.denter = denter
        self.options = denter.options
        self.node = node
        self.parent = parent
        self.facts = NodeFacts()
        self.children: List[Wrapper] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    @property
    def name(self) -> str:
        return self.facts.name

    @property
    def quote(self) -> str:
        return self.options.quote

    def parent_mixed(self) -> bool:
        """Is this node laid out inline, as part of its parent's flow?"""

        return self.parent is not None and self.parent.facts.flow

    def _state(self, state: Optional[State]) -> State:
        return state if state is not None else self.denter.new_state()

    def print(self, indent: int = 0, state: Optional[State] = None) -> State:
        raise NotImplementedError

    @staticmethod
    def create(denter: "Denter", node: Node, parent: Optional["Wrapper"] = None) -> "Wrapper":
        """Build the wrapper matching ``node``'s kind, with its whole subtree."""

        wrapper_class = WRAPPERS.get(node_kind(node))
        if wrapper_class is None:
            raise UnknownNodeKindError(node)
        return wrapper_class(denter, node, parent)


class NodeWrapper(Wrapper):
    """Wrapper for a :class:`DomNode`: classified, with wrapped children."""

    node: DomNode

    def __init__(self, denter: "Denter", node: DomNode, parent: Optional[Wrapper] = None) -> None:
        super().__init__(denter, node, parent)
        self.facts = classify(node, self.options)
        self.children = [Wrapper.create(denter, child, self) for child in node.children]


class AttributeWrapper(Wrapper):
    kind = NodeKind.ATTRIBUTE
    node: DomAttr

    def __init__(self, denter: "Denter", node: DomAttr, parent: Optional[Wrapper] = None) -> None:
        super().__init__(denter, node, parent)
        name = node.name.lower() if self.options.is_html else node.name
        if node.prefix:
            name = f"{node.prefix}:{name}"
        self.facts = NodeFacts(name=name)

    def escaped_value(self) -> str:
        return escape(self.node.value, self.options.is_html, attribute=True)

    def print(self, indent: int = 0, state: Optional[State] = None) -> State:
        state = self._state(state)
        value = self.escaped_value()
        if self.options.is_html:
            if self.name in BOOLEAN_ATTRIBUTES or not value:
                return state.color(" ", (A, self.name))
            if self.options.fewer_quotes and _UNQUOTED_VALUE_RE.fullmatch(value):
                return state.color(" ", (A, self.name), (P, "="), (AV, value))
        q = self.quote
        return state.color(" ", (A, self.name), (P, "=" + q), (AV, value), (P, q))


class NamespaceWrapper(Wrapper):
    kind = NodeKind.NAMESPACE
    node: DomNamespace

    def __init__(
        self, denter: "Denter", node: DomNamespace, parent: Optional[Wrapper] = None
    ) -> None:
        super().__init__(denter, node, parent)
        name = f"xmlns:{node.prefix}" if node.prefix is not None else "xmlns"
        self.facts = NodeFacts(name=name)

    def print(self, indent: int = 0, state: Optional[State] = None) -> State:
        state = self._state(state)
        q = self.quote
        href = escape(self.node.href, self.options.is_html, attribute=True)
        return state.color(" ", (A, self.name), (P, "=" + q), (AV, href), (P, q))


class CdataWrapper(NodeWrapper):
    kind = NodeKind.CDATA

    def print(self, indent: int = 0, state: Optional[State] = None) -> State:
        state = self._state(state)
        state.color((P, "<!["), (E, "CDATA"), (P, "["))
        state.verbatim(self.node.text)
        return state.color((P, "]]>"))


class RefWrapper(NodeWrapper):
    kind = NodeKind.ENTITY_REF

    def print(self, indent: int = 0, state: Optional[State] = None) -> State:
        state = self._state(state)
        return state.color((P, "&"), self.node.name, (P, ";"))


class TextWrapper(NodeWrapper):
    """Flowing text: whitespace collapsing and word wrapping."""

    kind = NodeKind.TEXT
    comment = False

    @property
    def blank(self) -> bool:
        return not self.comment and not self.facts.nonempty

    def _between_siblings(self) -> bool:
        return self.node.prev_sibling() is not None and self.node.next_sibling() is not None

    def print(self, indent: int = 0, state: Optional[State] = None) -> State:
        state = self._state(state)
        html = self.options.is_html
        parent_mixed = self.parent_mixed()
        if not self.facts.nonempty:
            if (
                self.blank
                and parent_mixed
                and not state.at_line_start
                and self._between_siblings()
            ):
                state.color((T, " "))
            return state

        parent_name = self.parent.name if self.parent is not None else None
        text = self.node.text
        if html and not self.comment and parent_name in RAW_TEXT_ELEMENTS:
            return state.verbatim(text)
        if not self.comment:
            text = escape(text, html)
        if parent_name is not None and parent_name in self.options.ignore:
            return state.verbatim(text)

        text = _SPACE_RUN_RE.sub(" ", text)
        if parent_mixed and not self.comment:
            if state.at_line_start or self.node.prev_sibling() is None:
                text = text.lstrip(" ")
            if self.node.next_sibling() is None:
                text = text.rstrip(" ")
        else:
            text = text.strip(" ")

        margin = self.options.margin
        left = state.right or 0
        right = len(parent_name) + 3 if parent_name is not None else 0
        if self.comment:
            left += 5
            right += 4
        if state.strict or margin <= 0 or left + cell_len(text) + right <= margin:
            if self.comment:
                return state.color(" ", (T, text), " ")
            return state.color((T, text))

        if not parent_mixed:
            state.newline()
            state.indent(indent)
        lines, trail = wrap_words(
            text,
            state.right or 0,
            state.indent_width(indent),
            margin,
            self.options.period_spaces,
        )
        for index, line in enumerate(lines):
            if index:
                state.rstrip()
                state.newline()
                state.indent(indent)
            if line:
                state.color((T, line))
        if trail:
            state.color((T, trail))
        if not parent_mixed:
            state.newline()
            state.indent(indent - 1)
        return state


class CommentWrapper(TextWrapper):
    kind = NodeKind.COMMENT
    comment = True

    def print(self, indent: int = 0, state: Optional[State] = None) -> State:
        state = self._state(state)
        parent_mixed = self.parent_mixed()
        if not parent_mixed:
            state.indent(indent)
        state.color((P, "<!--"))
        super().print(indent + 1, state)
        state.color((P, "-->"))
        if not parent_mixed:
            state.newline()
        return state


class PiWrapper(NodeWrapper):
    """Processing instructions always get a line of their own."""

    kind = NodeKind.PI

    def _follows_content(self) -> bool:
        for sibling in self.node.preceding_siblings():
            if sibling.kind is not NodeKind.TEXT or not is_blank(sibling.text):
                return True
        return False

    def print(self, indent: int = 0, state: Optional[State] = None) -> State:
        state = self._state(state)
        if self.parent_mixed() and self._follows_content():
            state.newline()
        state.indent(indent)
        state.color((P, "<?"), (E, self.name))
        if self.node.text:
            state.out(" ")
            state.color(*requote(self.node.text, self.quote, A))
        state.color((P, "?>"))
        return state.newline()


class DeclWrapper(NodeWrapper):
    """Markup declarations from a DTD internal subset, recolored in place."""

    kind = NodeKind.DECL

    def print(self, indent: int = 0, state: Optional[State] = None) -> State:
        state = self._state(state)
        state.indent(indent)
        raw = self.node.text
        closed = raw.endswith(">")
        body = raw[:-1] if closed else raw
        pieces: List[Piece] = []
        head = _DECL_HEAD_RE.match(body)
        if head:
            pieces += [(P, "<!"), (E, head.group(1)), " "]
            if head.group(2):
                pieces += [(P, "%"), " "]
            pieces.append((A, head.group(3)))
            body = body[head.end() :]
        pieces += requote(body, self.quote, AV)
        if closed:
            pieces.append((P, ">"))
        state.color(*pieces)
        return state.newline()


class DtdWrapper(NodeWrapper):
    kind = NodeKind.DTD

    def _quoted(self, state: State, value: str) -> State:
        return state.detached().color((P, self.quote), (AV, value), (P, self.quote))

    def print(self, indent: int = 0, state: Optional[State] = None) -> State:
        state = self._state(state)
        if self.options.is_html and self.options.no_version and not self.children:
            return state

        state.indent(indent)
        state.color((P, "<!"), (E, "DOCTYPE"), " ", (A, self.node.name))
        width = state.right or 0

        public_id = self.node.public_id
        system_id = self.node.system_id
        ids: List[State] = []
        keyword: Optional[State] = None
        if public_id is not None:
            keyword = state.detached().color(" ", (A, "PUBLIC"))
            ids.append(self._quoted(state, public_id))
        elif system_id is not None:
            keyword = state.detached().color(" ", (A, "SYSTEM"))
        if system_id is not None:
            ids.append(self._quoted(state, system_id))
        if keyword is not None:
            width += keyword.total + sum(1 + external.total for external in ids)
        if not self.children:
            width += 1

        if keyword is not None:
            state.out(keyword)
            if state.strict or fits(width, self.options.margin):
                for external in ids:
                    state.out(" ")
                    state.out(external)
            else:
                for external in ids:
                    state.newline()
                    state.indent(indent + 1)
                    state.out(external)

        if self.children:
            state.color(" ", (P, "["))
            state.newline()
            for child in self.children:
                child.print(indent + 1, state)
            state.indent(indent)
            state.color((P, "]"))
        state.color((P, ">"))
        return state.newline()


class ElementWrapper(NodeWrapper):
    kind = NodeKind.ELEMENT

    def __init__(self, denter: "Denter", node: DomNode, parent: Optional[Wrapper] = None) -> None:
        super().__init__(denter, node, parent)
        self.attributes: List[Wrapper] = [
            AttributeWrapper(denter, attr, self) for attr in self.facts.attributes
        ]
        self.namespaces: List[Wrapper] = [
            NamespaceWrapper(denter, ns, self) for ns in self.facts.namespaces
        ]

    def _start_tag(self, state: State, parent_mixed: bool) -> None:
        attrs = [
            wrapper.print(0, state.detached())
            for wrapper in self.attributes + self.namespaces
        ]
        width = (state.right or 0) + sum(attr.total for attr in attrs)
        width += 1 if self.children else 2
        if exceeds(width, self.options.margin) and not parent_mixed and not state.strict:
            # One per line, lined up under the first.
            first = state.right or 0
            for index, attr in enumerate(attrs):
                if index and state.spaces > 0:
                    state.newline()
                    state.spaces_string(first)
                state.out(attr)
        else:
            for attr in attrs:
                state.out(attr)

    def _render(self, child: Wrapper, indent: int, state: State) -> State:
        trial = state.trial()
        child.print(indent, trial)
        return trial

    def _print_mixed(self, indent: int, state: State, parent_mixed: bool) -> None:
        margin = self.options.margin
        strict = state.strict

        # Everything on one line?
        right = state.right or 0
        trials: List[State] = []
        wrapped = False
        for child in self.children:
            trial = State(-1, state.colorizer, right=right)
            child.print(indent, trial)
            trials.append(trial)
            right = trial.right or 0
            if trial.lines:
                wrapped = True
                break
        if not wrapped and fits(right + len(self.name) + 3, margin):
            for trial in trials:
                state.out(trial)
            return

        if not parent_mixed and not strict:
            state.newline()
            state.indent(indent + 1)
        for index, child in enumerate(self.children):
            rendered = self._render(child, indent + 1, state)
            if index and not strict:
                if rendered.lines:
                    overflow = exceeds((state.right or 0) + (rendered.first_line_len or 0), margin)
                else:
                    overflow = exceeds(rendered.right or 0, margin)
                if overflow:
                    state.rstrip()
                    state.newline()
                    state.indent(indent + 1)
                    if isinstance(child, TextWrapper) and child.blank:
                        continue
                    rendered = self._render(child, indent + 1, state)
            state.out(rendered)
        if not parent_mixed and not strict:
            state.rstrip()
            state.newline()
            state.indent(indent)

    def print(self, indent: int = 0, state: Optional[State] = None) -> State:
        state = self._state(state)
        facts = self.facts
        parent_mixed = self.parent_mixed()
        strict = state.strict

        if not parent_mixed:
            state.indent(indent)
        state.color((P, "<"), (E, self.name))
        self._start_tag(state, parent_mixed)

        if not facts.nonempty and not facts.elements:
            if facts.void:
                state.color((P, ">"))
            elif self.options.is_html:
                # Non-void HTML elements always need the end tag.
                state.color((P, "></"), (E, self.name), (P, ">"))
            else:
                state.color((P, "/>"))
        else:
            state.color((P, ">"))
            if facts.flow:
                self._print_mixed(indent, state, parent_mixed)
            else:
                if facts.elements and not strict:
                    state.newline()
                for child in self.children:
                    child.print(indent + 1, state)
                if facts.elements and not facts.nonempty and not strict:
                    state.indent(indent)
            state.color((P, "</"), (E, self.name), (P, ">"))

        if not parent_mixed and not strict:
            state.newline()
        return state


class DocumentWrapper(NodeWrapper):
    kind = NodeKind.DOCUMENT

    def __init__(self, denter: "Denter", node: DomNode, parent: Optional[Wrapper] = None) -> None:
        super().__init__(denter, node, parent)
        self.children = _doctype_before_root(self.children)

    def print(self, indent: int = 0, state: Optional[State] = None) -> State:
        state = self._state(state)
        if not self.options.no_version and not self.options.is_html:
            q = self.quote
            state.color(
                (P, "<?"),
                (E, "xml"),
                " ",
                (A, "version"),
                (P, "=" + q),
                (AV, self.node.version),
                (P, q + "?>"),
            )
            state.newline()
        for child in self.children:
            child.print(indent, state)
        return state


def _doctype_before_root(children: List[Wrapper]) -> List[Wrapper]:
    root = next(
        (index for index, child in enumerate(children) if child.node.kind is NodeKind.ELEMENT),
        None,
    )
    if root is None:
        return children
    late = [child for child in children[root:] if child.facts.dtd]
    rest = [child for child in children[root:] if not child.facts.dtd]
    return children[:root] + late + rest


WRAPPERS: Dict[NodeKind, Type[Wrapper]] = {
    wrapper.kind: wrapper
    for wrapper in (
        AttributeWrapper,
        CdataWrapper,
        CommentWrapper,
        DeclWrapper,
        DocumentWrapper,
        DtdWrapper,
        ElementWrapper,
        NamespaceWrapper,
        PiWrapper,
        RefWrapper,
        TextWrapper,
    )
}


__all__ = [
    "AttributeWrapper",
    "CdataWrapper",
    "CommentWrapper",
    "DeclWrapper",
    "DocumentWrapper",
    "DtdWrapper",
    "ElementWrapper",
    "NamespaceWrapper",
    "PiWrapper",
    "RefWrapper",
    "TextWrapper",
    "WRAPPERS",
    "Wrapper",
    "escape",
    "requote",
]
