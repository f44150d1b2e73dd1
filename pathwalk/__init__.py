"""Public package surface for pathwalk.

Path-specification parsing (``PathSpec``), one-level directory enumeration
(``DirectoryCursor``) and depth-first traversal (``walk``). ``main`` is the
CLI entrypoint, imported lazily to keep package imports lightweight.
"""

from __future__ import annotations

from .cursor import DirectoryCursor
from .entries import EntryAttributes, TraversalMode, WalkControl, WalkEntry
from .enumerator import DirectoryEnumerator, RawEntry, RawListing, ScandirEnumerator
from .errors import (
    CursorExhaustedError,
    DirectoryUnavailableError,
    MalformedPathError,
    PathWalkError,
    UnavailableReason,
)
from .path_spec import PathSpec
from .walker import WalkSummary, collect_entries, walk


def main(*args, **kwargs):
    """Lazily import CLI entrypoint."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "PathSpec",
    "DirectoryCursor",
    "EntryAttributes",
    "TraversalMode",
    "WalkControl",
    "WalkEntry",
    "WalkSummary",
    "walk",
    "collect_entries",
    "DirectoryEnumerator",
    "RawEntry",
    "RawListing",
    "ScandirEnumerator",
    "PathWalkError",
    "MalformedPathError",
    "DirectoryUnavailableError",
    "CursorExhaustedError",
    "UnavailableReason",
    "main",
]
