"""Command-line front door for pathwalk.

Parses a search pattern and traversal flags, walks the matching entries and
prints one line per entry. Flag defaults come from the persisted config.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from . import config
from .entries import EntryAttributes, TraversalMode, WalkControl
from .enumerator import ScandirEnumerator
from .errors import DirectoryUnavailableError, MalformedPathError
from .path_spec import DIRECTORY_SEPARATORS, PathSpec, preferred_separator
from .walker import walk

SIZE_COLUMN_WIDTH = 12
FOLDER_SIZE_LABEL = "<dir>"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def display_text(text: str) -> str:
    """Escape bytes that are not valid in the file system encoding.

    On POSIX an undecodable file name arrives with surrogate escapes, which
    no text stream will encode. They are shown as ``\\xNN`` instead.
    """
    return os.fsencode(text).decode(sys.getfilesystemencoding(), "backslashreplace")


def format_entry(spec: PathSpec, attributes: EntryAttributes, show_sizes: bool) -> str:
    """Render one output row; folders get a trailing separator."""
    text = display_text(spec.raw)
    if attributes.is_folder and not text.endswith(DIRECTORY_SEPARATORS):
        text += preferred_separator(spec.directory)
    if not show_sizes:
        return text
    size_label = FOLDER_SIZE_LABEL if attributes.is_folder else str(attributes.size_bytes)
    return f"{size_label:>{SIZE_COLUMN_WIDTH}} {text}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pathwalk",
        description="List files and folders matching a wildcard pattern, optionally recursing into subfolders.",
    )
    parser.add_argument("pattern", nargs="?", default="*", help="Search pattern, e.g. 'src/*.py'. Defaults to '*'.")
    depth = parser.add_mutually_exclusive_group()
    depth.add_argument("-r", "--recursive", dest="recursive", action="store_true", default=None, help="Descend into subfolders.")
    depth.add_argument("--shallow", dest="recursive", action="store_false", help="List one level only.")
    kind = parser.add_mutually_exclusive_group()
    kind.add_argument("--files-only", action="store_true", help="Print files only.")
    kind.add_argument("--folders-only", action="store_true", help="Print folders only.")
    parser.add_argument("--sizes", action="store_true", default=None, help="Prefix each row with its size in bytes.")
    parser.add_argument("--case-sensitive", action="store_true", default=None, help="Match names case-sensitively.")
    parser.add_argument("--max-entries", type=_positive_int, default=None, help="Stop after printing this many rows.")
    parser.add_argument("--save-defaults", action="store_true", help="Persist --recursive/--sizes/--case-sensitive as defaults.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped folders and enumeration details.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and print matching entries.

    A pattern that is malformed or whose top-level directory can't be listed
    exits with a message.
    """
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    recursive = config.load_recursive_default() if args.recursive is None else args.recursive
    show_sizes = config.load_show_sizes() if args.sizes is None else args.sizes
    case_sensitive = config.load_case_sensitive() if args.case_sensitive is None else args.case_sensitive

    try:
        pattern = PathSpec.parse(args.pattern, allow_wildcards=True)
    except MalformedPathError as exc:
        raise SystemExit(str(exc)) from exc

    if args.save_defaults:
        config.save_recursive_default(recursive)
        config.save_show_sizes(show_sizes)
        config.save_case_sensitive(case_sensitive)

    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(errors="backslashreplace")

    mode = TraversalMode.RECURSIVE_ALL_LEVELS if recursive else TraversalMode.SHALLOW_ONE_LEVEL
    printed = 0

    def print_entry(spec: PathSpec, attributes: EntryAttributes) -> WalkControl:
        nonlocal printed
        if args.files_only and attributes.is_folder:
            return WalkControl.CONTINUE
        if args.folders_only and not attributes.is_folder:
            return WalkControl.CONTINUE
        sys.stdout.write(format_entry(spec, attributes, show_sizes) + "\n")
        printed += 1
        if args.max_entries is not None and printed >= args.max_entries:
            return WalkControl.STOP
        return WalkControl.CONTINUE

    try:
        walk(pattern, print_entry, mode, ScandirEnumerator(case_sensitive=case_sensitive))
    except DirectoryUnavailableError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
