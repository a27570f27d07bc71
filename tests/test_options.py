import pytest
from pydantic import ValidationError

from dentml.options import DentOptions, Theme, field_name


def test_defaults() -> None:
    options = DentOptions()

    assert options.margin == 78
    assert options.spaces == 2
    assert options.period_spaces == 2
    assert options.html is None
    assert not options.is_html
    assert options.quote == "'"
    assert options.ignore == []
    assert not options.colors


def test_aliases_and_field_names_both_work() -> None:
    by_alias = DentOptions.model_validate({"doubleQuote": True, "noVersion": True, "fewerQuotes": True})
    by_name = DentOptions(double_quote=True, no_version=True, fewer_quotes=True)

    assert by_alias == by_name
    assert by_alias.quote == '"'


def test_merged_returns_validated_copy() -> None:
    options = DentOptions(margin=60)
    merged = options.merged(periodSpaces=1, spaces=4)

    assert merged.margin == 60
    assert merged.period_spaces == 1
    assert merged.spaces == 4
    assert options.spaces == 2
    with pytest.raises(ValidationError):
        options.merged(margin="wide")


def test_options_are_frozen() -> None:
    options = DentOptions()

    with pytest.raises(ValidationError):
        options.margin = 10


def test_field_name_maps_aliases() -> None:
    assert field_name("fewerQuotes") == "fewer_quotes"
    assert field_name("margin") == "margin"
    assert field_name("unknown") == "unknown"


def test_theme_accepts_rich_colors_and_rgb_lists() -> None:
    theme = Theme.model_validate({"ELEMENT": "red", "attribute": [1, 2, 3], "TEXT": "#ffffff"})

    assert theme.element == "red"
    assert theme.attribute == "rgb(1,2,3)"
    assert theme.text == "#ffffff"
    assert theme.punctuation == "#808080"


@pytest.mark.parametrize("color", ["not-a-color", [1, 2], 7])
def test_theme_rejects_bad_colors(color) -> None:
    with pytest.raises(ValidationError):
        Theme(element=color)


def test_theme_nested_in_options() -> None:
    options = DentOptions.model_validate({"theme": {"PUNCTUATION": "blue"}})

    assert options.theme.punctuation == "blue"
    assert options.theme.element == Theme().element
