"""Build :class:`~dentml.dom_model.DomNode` trees from parser output.

XML goes through lxml, HTML through BeautifulSoup's ``html.parser``
builder. Both adapters keep comments, processing instructions, DOCTYPEs
and source line numbers.
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    PageElement,
    ProcessingInstruction,
    Tag,
)
from lxml import etree

from .dom_model import DomAttr, DomNamespace, DomNode, NodeKind, document
from .errors import InvalidInputError, UnknownNodeKindError

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

Source = Union[str, bytes]

# Pieces of an internal DTD subset: comments, PIs, markup declarations and
# parameter entity references.
_SUBSET_ITEM_RE = re.compile(
    r"<!--(?P<comment>.*?)-->"
    r"|<\?(?P<pi>.*?)\?>"
    r"|(?P<decl><!(?:[^>\"']|\"[^\"]*\"|'[^']*')*>)"
    r"|(?P<peref>%[\w.:-]+;)",
    re.S,
)
# A DOCTYPE as written in the source, subset included. Markup inside the
# subset may contain ">" but never an unquoted "]".
_SOURCE_DOCTYPE_RE = re.compile(
    r"<!DOCTYPE\s+(?P<body>[^\[>]*"
    r"(?:\[(?:<!--.*?-->|\"[^\"]*\"|'[^']*'|[^\]\"'])*\])?\s*)>",
    re.S,
)
_DOCTYPE_TEXT_RE = re.compile(
    r"""
    \s*(?:DOCTYPE\s+)?
    (?P<name>[^\s\[>]+)
    (?:
        \s+PUBLIC\s+(?P<pq>["'])(?P<public>.*?)(?P=pq)
        (?:\s+(?P<sq>["'])(?P<system>.*?)(?P=sq))?
      |
        \s+SYSTEM\s+(?P<sq2>["'])(?P<system2>.*?)(?P=sq2)
    )?
    \s*(?:\[(?P<subset>.*)\])?\s*$
    """,
    re.I | re.S | re.X,
)


def _pi(content: str, line: Optional[int] = None) -> DomNode:
    parts = content.strip().split(None, 1)
    target = parts[0] if parts else ""
    data = parts[1] if len(parts) > 1 else ""
    return DomNode(NodeKind.PI, name=target, text=data, line=line)


def split_subset(subset: str, dtd: DomNode) -> DomNode:
    """Append the declarations of an internal subset to ``dtd``."""

    for match in _SUBSET_ITEM_RE.finditer(subset):
        if match.group("comment") is not None:
            dtd.append(DomNode(NodeKind.COMMENT, text=match.group("comment")))
        elif match.group("pi") is not None:
            dtd.append(_pi(match.group("pi")))
        else:
            dtd.append(DomNode(NodeKind.DECL, text=match.group(0)))
    return dtd


# XML (lxml)


def _xml_parser(encoding: Optional[str] = None) -> etree.XMLParser:
    return etree.XMLParser(
        encoding=encoding,
        resolve_entities=False,
        strip_cdata=False,
        remove_blank_text=False,
    )


def parse_xml(src: Source) -> DomNode:
    """Parse XML text or bytes.

    ``str`` input is re-encoded as UTF-8, overriding any encoding named in
    the XML declaration. Syntax errors propagate as
    :class:`lxml.etree.XMLSyntaxError`.
    """

    if isinstance(src, str):
        tree = etree.fromstring(src.encode("utf-8"), _xml_parser("utf-8")).getroottree()
        return from_lxml(tree, src)
    tree = etree.fromstring(src, _xml_parser()).getroottree()
    return from_lxml(tree, _decode(src, tree.docinfo.encoding))


def _decode(src: bytes, encoding: Optional[str]) -> str:
    try:
        return src.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        # Markup delimiters are ASCII in every encoding libxml2 accepts here.
        return src.decode("latin-1")


def _attribute_prefix(uri: str, nsmap: Dict[Optional[str], str]) -> Optional[str]:
    if uri == XML_NAMESPACE:
        return "xml"
    for prefix, href in nsmap.items():
        if prefix is not None and href == uri:
            return prefix
    return None


def _from_lxml_element(el: etree._Element, parent_nsmap: Dict[Optional[str], str]) -> DomNode:
    node = DomNode(
        NodeKind.ELEMENT,
        name=etree.QName(el).localname,
        prefix=el.prefix,
        line=el.sourceline,
    )
    nsmap = el.nsmap
    for prefix, href in nsmap.items():
        if parent_nsmap.get(prefix) != href:
            node.namespaces.append(DomNamespace(prefix, href))
    for key, value in el.attrib.items():
        if key.startswith("{"):
            uri, local = key[1:].split("}", 1)
            node.attrs.append(DomAttr(local, value, _attribute_prefix(uri, nsmap)))
        else:
            node.attrs.append(DomAttr(key, value))

    if el.text:
        node.append(DomNode(NodeKind.TEXT, text=el.text))
    for child in el:
        node.append(_from_lxml_node(child, nsmap))
        if child.tail:
            node.append(DomNode(NodeKind.TEXT, text=child.tail))
    return node


def _from_lxml_node(item: etree._Element, parent_nsmap: Dict[Optional[str], str]) -> DomNode:
    # Comments, PIs and entities are _Element subclasses; test them first.
    if isinstance(item, etree._Comment):
        return DomNode(NodeKind.COMMENT, text=item.text or "", line=item.sourceline)
    if isinstance(item, etree._ProcessingInstruction):
        return DomNode(NodeKind.PI, name=item.target, text=item.text or "", line=item.sourceline)
    if isinstance(item, etree._Entity):
        return DomNode(NodeKind.ENTITY_REF, name=item.name, line=item.sourceline)
    if isinstance(item, etree._Element):
        return _from_lxml_element(item, parent_nsmap)
    raise UnknownNodeKindError(item)


def _entity_decl(entity) -> str:
    if entity.system_url:
        return f'<!ENTITY {entity.name} SYSTEM "{entity.system_url}">'
    value = entity.orig or entity.content or ""
    quote = "'" if "'" not in value else '"'
    return f"<!ENTITY {entity.name} {quote}{value}{quote}>"


def _lxml_doctype(tree: etree._ElementTree, source: Optional[str]) -> Optional[DomNode]:
    """Rebuild the DOCTYPE, preferring its source text when there is one.

    Without source text only the name, the ids and the general entity
    declarations of the internal subset survive.
    """

    internal = tree.docinfo.internalDTD
    if internal is None:
        return None
    if source is not None:
        match = _SOURCE_DOCTYPE_RE.search(source)
        if match is not None:
            line = source.count("\n", 0, match.start()) + 1
            return parse_doctype(match.group("body"), line)
    dtd = DomNode(
        NodeKind.DTD,
        name=internal.name or "",
        public_id=internal.external_id or None,
        system_id=internal.system_url or None,
    )
    for entity in internal.iterentities():
        dtd.append(DomNode(NodeKind.DECL, text=_entity_decl(entity)))
    return dtd


def from_lxml(
    tree: Union[etree._ElementTree, etree._Element], source: Optional[str] = None
) -> DomNode:
    """Convert an lxml tree (or any element of one) into a document node.

    ``source`` is the text the tree was parsed from, if known; its DOCTYPE
    is kept as written.
    """

    if isinstance(tree, etree._Element):
        tree = tree.getroottree()
    root = tree.getroot()
    doc = document(version=tree.docinfo.xml_version or "1.0")
    dtd = _lxml_doctype(tree, source)
    if dtd is not None:
        doc.append(dtd)
    for sibling in reversed(list(root.itersiblings(preceding=True))):
        doc.append(_from_lxml_node(sibling, {}))
    doc.append(_from_lxml_element(root, {}))
    for sibling in root.itersiblings():
        doc.append(_from_lxml_node(sibling, {}))
    return doc


# HTML (BeautifulSoup)


def parse_html(src: Source) -> DomNode:
    return from_soup(BeautifulSoup(src, "html.parser", multi_valued_attributes=None))


def parse_doctype(text: str, line: Optional[int] = None) -> DomNode:
    """Split the inside of ``<!DOCTYPE ...>`` into name, ids and subset."""

    match = _DOCTYPE_TEXT_RE.match(text)
    if match is None:
        return DomNode(NodeKind.DTD, name=text.strip(), line=line)
    dtd = DomNode(
        NodeKind.DTD,
        name=match.group("name"),
        public_id=match.group("public"),
        system_id=match.group("system") or match.group("system2"),
        line=line,
    )
    if match.group("subset"):
        split_subset(match.group("subset"), dtd)
    return dtd


def _from_soup_node(item: PageElement) -> DomNode:
    line = getattr(item, "sourceline", None)
    # The special strings are NavigableString subclasses; test them first.
    if isinstance(item, Comment):
        return DomNode(NodeKind.COMMENT, text=str(item), line=line)
    if isinstance(item, CData):
        return DomNode(NodeKind.CDATA, text=str(item), line=line)
    if isinstance(item, ProcessingInstruction):
        return _pi(str(item).rstrip("?"), line)
    if isinstance(item, Doctype):
        return parse_doctype(str(item), line)
    if isinstance(item, Declaration):
        return DomNode(NodeKind.DECL, text=f"<!{item}>", line=line)
    if isinstance(item, NavigableString):
        return DomNode(NodeKind.TEXT, text=str(item), line=line)
    if isinstance(item, Tag):
        node = DomNode(NodeKind.ELEMENT, name=item.name, prefix=item.prefix, line=line)
        for key, value in item.attrs.items():
            node.attrs.append(DomAttr(key, "" if value is None else str(value)))
        for child in item.contents:
            node.append(_from_soup_node(child))
        return node
    raise UnknownNodeKindError(item)


def from_soup(soup: BeautifulSoup) -> DomNode:
    doc = document()
    for child in soup.contents:
        doc.append(_from_soup_node(child))
    return doc


def load_document(src: object, html: bool = False) -> DomNode:
    """Turn any supported input into a document node.

    Accepts text, bytes, an existing document node, an lxml tree or element,
    or a BeautifulSoup object. Anything else raises
    :class:`InvalidInputError`.
    """

    if isinstance(src, DomNode):
        if src.kind is not NodeKind.DOCUMENT:
            raise InvalidInputError(src)
        return src
    if isinstance(src, (str, bytes, bytearray)):
        data = bytes(src) if isinstance(src, bytearray) else src
        return parse_html(data) if html else parse_xml(data)
    if isinstance(src, BeautifulSoup):
        return from_soup(src)
    if isinstance(src, (etree._ElementTree, etree._Element)):
        return from_lxml(src)
    raise InvalidInputError(src)


__all__ = [
    "XML_NAMESPACE",
    "from_lxml",
    "from_soup",
    "load_document",
    "parse_doctype",
    "parse_html",
    "parse_xml",
    "split_subset",
]
