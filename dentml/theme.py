"""Token categories and the colorizer that decorates them."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from rich.color import ColorSystem
from rich.style import Style

from .options import Theme


class Category(str, Enum):
    PUNCTUATION = "punctuation"
    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    ATTRIBUTE_VALUE = "attribute_value"
    TEXT = "text"


COLOR_SYSTEMS: Dict[str, ColorSystem] = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
    "windows": ColorSystem.WINDOWS,
}


class Colorizer:
    """Map ``(category, text)`` to decorated text.

    A colorizer built without a theme is the identity, which is what every
    width measurement relies on. Escape codes never wrap a newline: each line
    is styled separately.
    """

    def __init__(
        self,
        theme: Optional[Theme] = None,
        color_system: Optional[ColorSystem] = ColorSystem.TRUECOLOR,
    ) -> None:
        self.color_system = color_system
        self._styles: Dict[Category, Style] = {}
        if theme is not None and color_system is not None:
            self._styles = {
                category: Style(color=getattr(theme, category.value))
                for category in Category
            }

    @classmethod
    def plain(cls) -> "Colorizer":
        return cls(None)

    @property
    def enabled(self) -> bool:
        return bool(self._styles)

    def __call__(self, category: Category, text: str) -> str:
        if not self._styles or not text:
            return text
        style = self._styles[category]
        return "\n".join(
            style.render(line, color_system=self.color_system) if line else line
            for line in text.split("\n")
        )


__all__ = ["COLOR_SYSTEMS", "Category", "Colorizer"]
