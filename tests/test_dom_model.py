import pytest

from dentml.dom_model import element, text


def test_siblings_follow_append_order() -> None:
    first, second, third = text("a"), element("b"), text("c")
    parent = element("p", first, second, third)

    assert first.prev_sibling() is None
    assert first.next_sibling() is second
    assert third.prev_sibling() is second
    assert third.next_sibling() is None
    assert [id(node) for node in third.preceding_siblings()] == [id(second), id(first)]
    assert parent.children[1].next_sibling() is third


def test_siblings_survive_direct_list_edits() -> None:
    first, second = text("a"), element("b")
    parent = element("p", first, second)
    inserted = text("x")
    inserted.parent = parent
    parent.children.insert(0, inserted)

    assert first.prev_sibling() is inserted
    assert second.prev_sibling() is first
    assert inserted.next_sibling() is first


def test_wide_parents_answer_sibling_queries() -> None:
    children = [text(str(index)) for index in range(5000)]
    element("p", *children)

    assert all(
        child.next_sibling() is following for child, following in zip(children, children[1:])
    )


def test_detached_node_has_no_siblings() -> None:
    orphan = text("x")

    assert orphan.prev_sibling() is None
    assert orphan.next_sibling() is None


def test_node_missing_from_parent_raises() -> None:
    parent = element("p", text("a"))
    stray = text("b")
    stray.parent = parent

    with pytest.raises(ValueError):
        stray.next_sibling()
