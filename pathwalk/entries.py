"""Datatypes shared by the directory cursor and the tree walker."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from .path_spec import PathSpec


@dataclass(frozen=True)
class EntryAttributes:
    """Per-entry metadata reported by the directory enumerator.

    ``size_bytes`` is only meaningful for files; folders report ``0``.
    """

    is_folder: bool
    size_bytes: int = 0
    modified_ns: int | None = None


@dataclass(frozen=True)
class WalkEntry:
    """One visited entry, as recorded by ``collect_entries``."""

    spec: PathSpec
    attributes: EntryAttributes


@unique
class TraversalMode(str, Enum):
    SHALLOW_ONE_LEVEL = "shallow"
    RECURSIVE_ALL_LEVELS = "recursive"


@unique
class WalkControl(str, Enum):
    """Visitor return value; ``None`` is treated as ``CONTINUE``."""

    CONTINUE = "continue"
    STOP = "stop"


__all__ = [
    "EntryAttributes",
    "WalkEntry",
    "TraversalMode",
    "WalkControl",
]
