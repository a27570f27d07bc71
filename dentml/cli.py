"""Command-line interface for dentml."""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, Iterable, List, Optional

import yaml
from lxml import etree
from pydantic import ValidationError
from rich.color import ColorSystem
from rich.console import Console

from .config import DEFAULT_CONFIG, merge_options, read_config
from .dent import dent_file
from .errors import DentError
from .io_utils import STDIN, backup_file, warn, write_text
from .options import DentOptions
from .theme import COLOR_SYSTEMS, Colorizer

# Command-line destinations that map straight onto DentOptions fields.
OPTION_DESTS = (
    "colors",
    "ignore",
    "double_quote",
    "margin",
    "spaces",
    "no_version",
    "html",
    "period_spaces",
    "fewer_quotes",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dentml",
        description="Re-indent and word-wrap XML or HTML files.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="dentml 0.1.0",
        help="Show the dentml version and exit.",
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="file",
        help=f"Files to indent; '{STDIN}' or nothing reads stdin.",
    )
    parser.add_argument(
        "-C",
        "--colors",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Colorize output [when stdout is a terminal].",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        action="append",
        metavar="NAME",
        help="Don't re-wrap text inside elements with this name (repeatable).",
    )
    parser.add_argument("-o", "--output", help="Output file name [stdout].")
    parser.add_argument(
        "-b",
        "--backup",
        metavar="EXT",
        help="Indent files in place, copying each original to file.EXT first.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help=f"Config file to read [{DEFAULT_CONFIG}].",
    )
    parser.add_argument(
        "-d",
        "--doubleQuote",
        dest="double_quote",
        action="store_true",
        default=None,
        help="Use double quotes for attributes.",
    )
    parser.add_argument("-m", "--margin", type=int, help="Right margin in spaces [78].")
    parser.add_argument("-s", "--spaces", type=int, help="Number of spaces to indent [2].")
    parser.add_argument(
        "-n",
        "--noVersion",
        dest="no_version",
        action="store_true",
        default=None,
        help="Don't output the XML version prefix.",
    )
    parser.add_argument(
        "--html",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Parse and generate HTML instead of XML [from the file name].",
    )
    parser.add_argument(
        "--periodSpaces",
        dest="period_spaces",
        type=int,
        help="Spaces after a sentence-ending period when wrapping [2].",
    )
    parser.add_argument(
        "-Q",
        "--fewerQuotes",
        dest="fewer_quotes",
        action="store_true",
        default=None,
        help="In HTML, only quote attribute values that need it.",
    )
    return parser


def _load_options(args: argparse.Namespace, console: Console) -> DentOptions:
    try:
        config = read_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise SystemExit(f"Cannot read config {args.config or DEFAULT_CONFIG}: {exc}") from exc

    overrides: Dict[str, Any] = {dest: getattr(args, dest) for dest in OPTION_DESTS}
    if args.colors is None and "colors" not in config:
        to_terminal = not args.output and not args.backup
        overrides["colors"] = to_terminal and console.is_terminal
    try:
        return merge_options(config, overrides)
    except ValidationError as exc:
        raise SystemExit(f"Invalid options: {exc}") from exc


def _colorizer(options: DentOptions, console: Console) -> Colorizer:
    if not options.colors:
        return Colorizer.plain()
    system = COLOR_SYSTEMS.get(console.color_system or "", ColorSystem.TRUECOLOR)
    return Colorizer(options.theme, system)


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    files: List[str] = args.files or [STDIN]
    if args.output and args.backup:
        parser.error("--output and --backup cannot be used together")
    if args.backup and STDIN in files:
        parser.error("--backup needs file names, not stdin")

    console = Console(file=sys.stdout)
    options = _load_options(args, console)
    colorizer = _colorizer(options, console)

    results: List[str] = []
    errors: List[str] = []
    for name in files:
        try:
            result = dent_file(name, options, colorizer=colorizer)
        except (OSError, DentError, etree.LxmlError) as exc:
            errors.append(f"{name}: {exc}")
            continue
        if args.backup:
            backup_file(name, args.backup)
            write_text(name, result)
        else:
            results.append(result)

    if results:
        if args.output:
            write_text(args.output, "".join(results))
        else:
            sys.stdout.write("".join(results))

    if errors:
        for message in errors:
            warn(message)
        raise SystemExit(1)


__all__ = ["build_parser", "main"]


if __name__ == "__main__":
    main()
