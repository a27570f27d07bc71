from dentml.wrap import chunks, wrap_words


def test_chunks_pad_sentence_ends() -> None:
    assert chunks("One. Two three.", 2) == ["One.  ", "Two ", "three."]
    assert chunks("One. Two", 1) == ["One. ", "Two"]


def test_chunks_leave_abbreviation_like_words_alone() -> None:
    assert chunks("e.g. this", 2) == ["e.g. ", "this"]


def test_wrap_words_packs_greedily() -> None:
    lines, trail = wrap_words("aaaaa bbbbb ccccc ddddd eeeee", 0, 2, 15)

    assert lines == ["aaaaa bbbbb", "ccccc ddddd", "eeeee"]
    assert trail == ""


def test_wrap_words_respects_starting_column() -> None:
    lines, _ = wrap_words("aaaaa bbbbb", 10, 2, 15)

    assert lines == ["aaaaa", "bbbbb"]


def test_wrap_words_never_moves_first_word() -> None:
    lines, _ = wrap_words("extraordinarily short", 10, 2, 15)

    assert lines == ["extraordinarily", "short"]


def test_wrap_words_keeps_trailing_space() -> None:
    lines, trail = wrap_words("one two ", 0, 0, 78)

    assert lines == ["one two"]
    assert trail == " "


def test_wrap_words_margin_zero_never_breaks() -> None:
    text = " ".join(["word"] * 40)
    lines, _ = wrap_words(text, 0, 0, 0)

    assert lines == [text]
