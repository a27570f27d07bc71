from dentml.options import Theme
from dentml.state import State
from dentml.theme import Category, Colorizer


def test_out_tracks_column_and_total() -> None:
    state = State()
    state.out("<foo>")
    state.out("bar")

    assert state.text == "<foo>bar"
    assert state.right == 8
    assert state.total == 8
    assert state.lines == 0
    assert state.first_line_len is None


def test_newline_records_first_line_relative_to_start() -> None:
    state = State(right=4)
    state.out("abc")
    state.newline()
    state.out("de")

    assert state.first_line_len == 3
    assert state.lines == 1
    assert state.right == 2
    assert state.text == "abc\nde"


def test_trial_merge_takes_column_and_first_line() -> None:
    state = State()
    state.out("<p>")
    trial = state.trial()
    trial.out("hello")
    trial.newline()
    trial.out("  world")

    state.out(trial)

    assert state.text == "<p>hello\n  world"
    assert state.right == 7
    assert state.lines == 1
    assert state.first_line_len == 8


def test_detached_state_adds_its_width() -> None:
    state = State()
    state.out("ab")
    measure = state.detached()
    measure.out("xyz")

    assert measure.right is None
    assert measure.total == 3

    state.out(measure)
    assert state.right == 5
    assert state.text == "abxyz"


def test_strict_state_ignores_newlines_and_indent() -> None:
    state = State(-1)
    state.indent(3)
    state.newline()
    state.out("x")

    assert state.strict
    assert state.text == "x"
    assert state.lines == 0


def test_verbatim_keeps_newlines_even_when_strict() -> None:
    state = State(-1)
    state.verbatim("a\nbc")

    assert state.text == "a\nbc"
    assert state.lines == 1
    assert state.right == 2


def test_indent_uses_spaces_per_stop() -> None:
    assert State(4).indent(2).text == " " * 8
    assert State(0).indent(5).text == ""
    assert State().indent(0).text == ""


def test_color_measures_plain_width() -> None:
    state = State(colorizer=Colorizer(Theme()))
    state.color((Category.PUNCTUATION, "<"), (Category.ELEMENT, "foo"), " ")

    assert "\x1b[" in state.text
    assert state.right == 5
    assert state.total == 5


def test_wide_characters_count_as_two_cells() -> None:
    state = State()
    state.out("日本")

    assert state.right == 4


def test_rstrip_drops_trailing_spaces_of_current_line() -> None:
    state = State(colorizer=Colorizer(Theme()))
    state.out("ab").newline()
    state.color((Category.TEXT, "cd "), (Category.TEXT, " "))
    state.rstrip()

    assert state.total == 5
    assert state.right == 2
    assert state.text.endswith(Colorizer(Theme())(Category.TEXT, "cd"))

    state.out(" ").newline().rstrip()
    assert state.text.endswith("\n")


def test_line_start_tracks_indentation_only() -> None:
    state = State()
    assert state.at_line_start

    state.indent(1)
    assert state.at_line_start

    state.out("x")
    assert not state.at_line_start

    state.newline()
    trial = state.trial()
    trial.indent(2)
    assert trial.at_line_start
    assert not State(right=4).at_line_start
