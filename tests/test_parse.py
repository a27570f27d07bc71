import pytest
from bs4 import BeautifulSoup
from lxml import etree

from dentml.dom_model import DomNode, NodeKind, document
from dentml.errors import InvalidInputError
from dentml.parse import load_document, parse_doctype, parse_html, parse_xml, split_subset


def test_xml_namespaces_are_local_to_declaring_element() -> None:
    doc = parse_xml(
        '<a xmlns="urn:a" xmlns:x="urn:x"><x:b x:c="1" xml:lang="en" plain="2"/></a>'
    )
    root = doc.root()
    child = root.children[0]

    assert {(ns.prefix, ns.href) for ns in root.namespaces} == {(None, "urn:a"), ("x", "urn:x")}
    assert child.prefix == "x"
    assert child.qualified_name == "x:b"
    assert child.namespaces == []
    assert {(attr.prefix, attr.name, attr.value) for attr in child.attrs} == {
        ("x", "c", "1"),
        ("xml", "lang", "en"),
        (None, "plain", "2"),
    }


def test_xml_keeps_text_tails_and_line_numbers() -> None:
    root = parse_xml("<a>one<b/>two\n<c/></a>").root()

    assert [child.kind for child in root.children] == [
        NodeKind.TEXT,
        NodeKind.ELEMENT,
        NodeKind.TEXT,
        NodeKind.ELEMENT,
    ]
    assert root.children[2].text == "two\n"
    assert root.children[3].line == 2
    assert root.children[1].parent is root


def test_xml_top_level_nodes_keep_order() -> None:
    doc = parse_xml("<?a x?><!-- c --><root/><?b?>")

    kinds = [(child.kind, child.name) for child in doc.children]
    assert kinds == [
        (NodeKind.PI, "a"),
        (NodeKind.COMMENT, ""),
        (NodeKind.ELEMENT, "root"),
        (NodeKind.PI, "b"),
    ]
    assert doc.children[0].text == "x"


def test_xml_entity_references_survive() -> None:
    doc = parse_xml('<!DOCTYPE r [<!ENTITY e "value">]><r>a &e; b</r>')

    dtd = doc.doctype()
    assert dtd is not None
    assert dtd.name == "r"
    assert [child.kind for child in dtd.children] == [NodeKind.DECL]
    ref = doc.root().children[1]
    assert ref.kind is NodeKind.ENTITY_REF
    assert ref.name == "e"


def test_xml_version_and_syntax_errors() -> None:
    assert parse_xml(b"<?xml version='1.0' encoding='ISO-8859-1'?><a>\xe9</a>").root().children[0].text == "\xe9"
    with pytest.raises(etree.XMLSyntaxError):
        parse_xml("<a><b></a>")


def test_parse_doctype_variants() -> None:
    public = parse_doctype('html PUBLIC "-//W3C//DTD HTML 4.01//EN" "http://www.w3.org/TR/html4/strict.dtd"')
    assert public.name == "html"
    assert public.public_id == "-//W3C//DTD HTML 4.01//EN"
    assert public.system_id == "http://www.w3.org/TR/html4/strict.dtd"

    public_only = parse_doctype("html PUBLIC '-//W3C//DTD HTML 4.01//EN'")
    assert public_only.public_id == "-//W3C//DTD HTML 4.01//EN"
    assert public_only.system_id is None

    system = parse_doctype("foo SYSTEM 'foo.dtd'")
    assert system.public_id is None
    assert system.system_id == "foo.dtd"

    plain = parse_doctype("html")
    assert (plain.name, plain.public_id, plain.system_id) == ("html", None, None)


def test_split_subset_pieces() -> None:
    dtd = split_subset(
        "<!-- note --><!ELEMENT a (#PCDATA)><?pi data?>%ext;<!ATTLIST a b CDATA '>'>",
        DomNode(NodeKind.DTD, name="a"),
    )

    assert [child.kind for child in dtd.children] == [
        NodeKind.COMMENT,
        NodeKind.DECL,
        NodeKind.PI,
        NodeKind.DECL,
        NodeKind.DECL,
    ]
    assert dtd.children[3].text == "%ext;"
    assert dtd.children[4].text == "<!ATTLIST a b CDATA '>'>"


def test_html_special_nodes() -> None:
    doc = parse_html("<!DOCTYPE html><!-- hi --><?php echo 1 ?><p>x</p>")

    assert [child.kind for child in doc.children] == [
        NodeKind.DTD,
        NodeKind.COMMENT,
        NodeKind.PI,
        NodeKind.ELEMENT,
    ]
    pi = doc.children[2]
    assert (pi.name, pi.text) == ("php", "echo 1")


def test_html_attribute_values_are_strings() -> None:
    root = parse_html('<p class="a b" hidden>x</p>').root()

    assert {(attr.name, attr.value) for attr in root.attrs} == {("class", "a b"), ("hidden", "")}


def test_load_document_dispatch() -> None:
    doc = document()
    assert load_document(doc) is doc
    assert load_document(bytearray(b"<a/>")).root().name == "a"
    assert load_document("<A/>", html=True).root().name == "a"
    assert load_document(BeautifulSoup("<b></b>", "html.parser")).root().name == "b"
    assert load_document(etree.fromstring("<c/>")).root().name == "c"

    with pytest.raises(InvalidInputError):
        load_document(42)
    with pytest.raises(InvalidInputError):
        load_document(DomNode(NodeKind.TEXT, text="x"))


def test_doctype_is_taken_from_source_text() -> None:
    doc = parse_xml(b"<?xml version='1.0'?>\n<!DOCTYPE foo [\n<!ENTITY js 'x'> <!-- note -->\n]>\n<p>&js;</p>")

    dtd = doc.doctype()
    assert dtd.name == "foo"
    assert dtd.line == 2
    assert [child.kind for child in dtd.children] == [NodeKind.DECL, NodeKind.COMMENT]
    assert doc.root().name == "p"


def test_doctype_from_tree_keeps_ids_and_entities() -> None:
    parser = etree.XMLParser(resolve_entities=False)
    tree = etree.fromstring(
        b"<!DOCTYPE r SYSTEM 'r.dtd' [<!ENTITY e 'v'><!ENTITY f SYSTEM 'f.xml'>]><r/>", parser
    ).getroottree()

    dtd = load_document(tree).doctype()
    assert (dtd.name, dtd.public_id, dtd.system_id) == ("r", None, "r.dtd")
    assert [child.text for child in dtd.children] == [
        "<!ENTITY e 'v'>",
        '<!ENTITY f SYSTEM "f.xml">',
    ]
