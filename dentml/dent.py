"""Public entry points: :class:`Denter`, :func:`dent` and :func:`dent_file`."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from .dom_model import DomAttr, DomNamespace, DomNode, NodeKind
from .errors import InvalidInputError
from .io_utils import read_input
from .options import DentOptions
from .parse import load_document
from .state import State
from .theme import Colorizer
from .wrappers import Wrapper

HTML_SUFFIXES = (".html", ".htm")


class Denter:
    """Formats nodes with one fixed set of options."""

    def __init__(
        self,
        options: Optional[DentOptions] = None,
        colorizer: Optional[Colorizer] = None,
    ) -> None:
        self.options = options if options is not None else DentOptions()
        if colorizer is None:
            colorizer = Colorizer(self.options.theme) if self.options.colors else Colorizer.plain()
        self.colorizer = colorizer

    def new_state(self, right: Optional[int] = 0) -> State:
        return State(self.options.spaces, self.colorizer, right=right)

    def wrap(self, node: Union[DomNode, DomAttr, DomNamespace]) -> Wrapper:
        return Wrapper.create(self, node)

    def _finish(self, text: str) -> str:
        if self.options.spaces < 0:
            return text
        return text.rstrip("\n") + "\n"

    def print_node(self, node: Union[DomNode, DomAttr, DomNamespace]) -> str:
        state = self.wrap(node).print(0, self.new_state())
        return self._finish(state.text)

    def print_document(self, doc: DomNode) -> str:
        if not isinstance(doc, DomNode) or doc.kind is not NodeKind.DOCUMENT:
            raise InvalidInputError(doc)
        return self.print_node(doc)


def resolve_options(options: Optional[DentOptions] = None, **overrides: Any) -> DentOptions:
    options = options if options is not None else DentOptions()
    return options.merged(**overrides) if overrides else options


def dent(
    src: object,
    options: Optional[DentOptions] = None,
    *,
    colorizer: Optional[Colorizer] = None,
    **overrides: Any,
) -> str:
    """Re-indent XML or HTML.

    ``src`` may be text, bytes, a parsed :class:`DomNode` document, an lxml
    tree or a BeautifulSoup object. Keyword arguments override fields of
    ``options`` and accept either spelling (``double_quote`` or
    ``doubleQuote``). ``colorizer`` replaces the one built from
    ``options.colors``.
    """

    options = resolve_options(options, **overrides)
    doc = load_document(src, html=options.is_html)
    return Denter(options, colorizer).print_document(doc)


def is_html_path(path: Union[str, Path]) -> bool:
    return str(path).lower().endswith(HTML_SUFFIXES)


def dent_file(
    path: Union[str, Path],
    options: Optional[DentOptions] = None,
    *,
    colorizer: Optional[Colorizer] = None,
    **overrides: Any,
) -> str:
    """Re-indent a file; ``-`` reads stdin.

    When ``html`` is unset it is guessed from the file name.
    """

    options = resolve_options(options, **overrides)
    if options.html is None:
        options = options.merged(html=is_html_path(path))
    return dent(read_input(path), options, colorizer=colorizer)


__all__ = ["Denter", "dent", "dent_file", "is_html_path", "resolve_options"]
