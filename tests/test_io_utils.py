import io
import sys
from pathlib import Path

from dentml.io_utils import STDIN, backup_file, read_input, warn, write_text


def test_write_text_creates_parents(tmp_path: Path) -> None:
    target = write_text(tmp_path / "out" / "doc.xml", "<a/>\n")

    assert target.read_text(encoding="utf-8") == "<a/>\n"


def test_backup_file_adds_missing_dot(tmp_path: Path) -> None:
    source = tmp_path / "doc.xml"
    source.write_text("<a/>", encoding="utf-8")

    first = backup_file(source, "bak")
    second = backup_file(source, ".orig")

    assert first == tmp_path / "doc.xml.bak"
    assert second == tmp_path / "doc.xml.orig"
    assert first.read_text(encoding="utf-8") == "<a/>"
    assert source.exists()


def test_read_input_from_file_and_stdin(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "doc.xml"
    path.write_bytes(b"<a/>")
    assert read_input(path) == b"<a/>"

    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"<b/>")))
    assert read_input(STDIN) == b"<b/>"


def test_warn_writes_to_stderr(capsys) -> None:
    warn("careful")

    captured = capsys.readouterr()
    assert captured.err == "careful\n"
    assert captured.out == ""
