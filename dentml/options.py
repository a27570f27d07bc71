"""Pydantic models for formatter options."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from rich.color import Color, ColorParseError


class Theme(BaseModel):
    """Colors used for each category of emitted token.

    Any color ``rich`` understands is accepted (``"blue"``, ``"#80b3ff"``,
    ``"rgb(10,20,30)"``), as well as a ``[r, g, b]`` list.
    """

    punctuation: str = Field(
        "#808080", alias="PUNCTUATION", description="Punctuation like '<' and '>'."
    )
    element: str = Field("#5f87d7", alias="ELEMENT", description="Element names.")
    attribute: str = Field("#5faf5f", alias="ATTRIBUTE", description="Attribute names.")
    attribute_value: str = Field(
        "#d7af5f", alias="ATTRIBUTE_VALUE", description="Attribute values."
    )
    text: str = Field("default", alias="TEXT", description="Running text.")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _parse_color(cls, value: Any) -> str:
        if isinstance(value, (list, tuple)):
            if len(value) != 3:
                raise ValueError("RGB colors need exactly three components")
            value = "rgb({},{},{})".format(*value)
        if not isinstance(value, str):
            raise ValueError(f"color must be a string or [r, g, b], got {value!r}")
        try:
            Color.parse(value)
        except ColorParseError as exc:
            raise ValueError(str(exc)) from exc
        return value


class DentOptions(BaseModel):
    """Everything the formatter needs to know for one run."""

    html: Optional[bool] = Field(
        None,
        description="Use HTML rules instead of XML rules. None means XML, "
        "or guess from the file name when formatting a file.",
    )
    double_quote: bool = Field(
        False, alias="doubleQuote", description="Use double quotes instead of single."
    )
    fewer_quotes: bool = Field(
        False,
        alias="fewerQuotes",
        description="In HTML, only quote attribute values that require it.",
    )
    ignore: List[str] = Field(
        default_factory=list,
        description="Don't alter whitespace for the text inside these elements.",
    )
    margin: int = Field(78, description="Line length for word wrapping; <= 0 disables.")
    spaces: int = Field(
        2,
        description="Spaces to indent each level; negative strips all "
        "insignificant whitespace.",
    )
    no_version: bool = Field(
        False, alias="noVersion", description="Don't output the XML version header."
    )
    period_spaces: int = Field(
        2,
        alias="periodSpaces",
        description="Number of spaces after a sentence-ending period when wrapping.",
    )
    colors: bool = Field(False, description="Colorize output with the theme.")
    theme: Theme = Field(default_factory=Theme, description="Colors to use for printing.")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @property
    def quote(self) -> str:
        return '"' if self.double_quote else "'"

    @property
    def is_html(self) -> bool:
        return bool(self.html)

    def merged(self, **overrides: Any) -> "DentOptions":
        """Return a validated copy with ``overrides`` (field names or aliases) applied."""

        data: Dict[str, Any] = self.model_dump()
        for key, value in overrides.items():
            data[field_name(key)] = value
        return DentOptions.model_validate(data)


def field_name(key: str) -> str:
    """Map a camelCase alias (``doubleQuote``) to its field name (``double_quote``)."""

    for name, info in DentOptions.model_fields.items():
        if key == name or key == info.alias:
            return name
    return key


__all__ = ["DentOptions", "Theme", "field_name"]
