"""Filesystem and stream helpers shared by the library and the CLI."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]

STDIN = "-"


def warn(msg: str) -> None:
    print(msg, file=sys.stderr)


def read_input(path: PathLike) -> bytes:
    """Read a whole file as bytes, or stdin when ``path`` is ``-``."""

    if str(path) == STDIN:
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def write_text(path: PathLike, content: str, *, encoding: str = "utf-8") -> Path:
    """Write text content to a file, creating parent directories as needed."""

    file_path = Path(path)
    if file_path.parent != Path(""):
        file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(content, encoding=encoding)
    return file_path


def backup_file(path: PathLike, extension: str) -> Path:
    """Copy ``path`` to ``path + extension`` and return the copy's path.

    A leading ``.`` is added to ``extension`` if it is missing.
    """

    if not extension.startswith("."):
        extension = "." + extension
    source = Path(path)
    target = source.with_name(source.name + extension)
    shutil.copy2(source, target)
    return target


__all__ = ["PathLike", "STDIN", "backup_file", "read_input", "warn", "write_text"]
