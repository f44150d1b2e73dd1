"""Depth-first directory traversal driven by a visitor callback.

Each level is enumerated twice: once with the caller's pattern to visit
matching entries, and once with ``*`` to find subdirectories to descend into.
A file pattern such as ``*.py`` must not hide a folder named ``docs`` from the
recursion, so the two passes stay separate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .cursor import DirectoryCursor
from .entries import EntryAttributes, TraversalMode, WalkControl, WalkEntry
from .enumerator import MATCH_EVERYTHING, DirectoryEnumerator
from .errors import DirectoryUnavailableError
from .path_spec import PathSpec, preferred_separator

logger = logging.getLogger(__name__)

Visitor = Callable[[PathSpec, EntryAttributes], "WalkControl | None"]


@dataclass
class WalkSummary:
    """Report returned after a walk finishes or is stopped."""

    entries_visited: int = 0
    stopped: bool = False
    skipped: list[DirectoryUnavailableError] = field(default_factory=list)


def child_pattern(pattern: PathSpec, child_name: str) -> PathSpec:
    """Return ``pattern``'s file part applied one directory deeper, inside ``child_name``."""
    volume, directory, file = pattern.split()
    separator = preferred_separator(directory)
    return PathSpec.from_parts(volume, directory + child_name + separator, file)


def discovery_pattern(pattern: PathSpec) -> PathSpec:
    """Return the wildcard-all pattern used to find subdirectories of ``pattern``."""
    return PathSpec.from_parts(pattern.volume, pattern.directory, MATCH_EVERYTHING)


class _Walk:
    def __init__(self, visitor: Visitor, mode: TraversalMode, enumerator: DirectoryEnumerator | None) -> None:
        self.visitor = visitor
        self.recursive = TraversalMode(mode) is TraversalMode.RECURSIVE_ALL_LEVELS
        self.enumerator = enumerator
        self.summary = WalkSummary()

    def run(self, pattern: PathSpec, top_level: bool) -> bool:
        """Walk one level (and below). Returns ``False`` once the visitor stops."""
        try:
            cursor = DirectoryCursor(pattern, self.enumerator)
        except DirectoryUnavailableError as exc:
            if top_level:
                raise
            self._skip(pattern, exc)
            return True

        with cursor:
            try:
                for spec, attributes in cursor:
                    self.summary.entries_visited += 1
                    if self.visitor(spec, attributes) == WalkControl.STOP:
                        self.summary.stopped = True
                        return False
            except DirectoryUnavailableError as exc:
                # Broke partway through; entries already visited stay visited.
                if top_level:
                    raise
                self._skip(pattern, exc)
                return True

        if not self.recursive:
            return True
        return self._descend(pattern)

    def _descend(self, pattern: PathSpec) -> bool:
        discovery = discovery_pattern(pattern)
        try:
            cursor = DirectoryCursor(discovery, self.enumerator)
        except DirectoryUnavailableError as exc:
            self._skip(discovery, exc)
            return True

        with cursor:
            try:
                for spec, attributes in cursor:
                    if not attributes.is_folder:
                        continue
                    if not self.run(child_pattern(pattern, spec.file), top_level=False):
                        return False
            except DirectoryUnavailableError as exc:
                self._skip(discovery, exc)
        return True

    def _skip(self, pattern: PathSpec, exc: DirectoryUnavailableError) -> None:
        logger.warning(f"Skipping subtree {pattern}: {exc}")
        self.summary.skipped.append(exc)


def walk(
    pattern: PathSpec | str,
    visitor: Visitor,
    mode: TraversalMode = TraversalMode.SHALLOW_ONE_LEVEL,
    enumerator: DirectoryEnumerator | None = None,
) -> WalkSummary:
    """Call ``visitor(spec, attributes)`` for every entry matching ``pattern``.

    With ``RECURSIVE_ALL_LEVELS`` the same file pattern is applied in every
    subdirectory, depth first, after the current level's entries are visited.
    Entries come in the enumerator's order.

    A top-level ``DirectoryUnavailableError`` propagates. Below the top level,
    unavailable directories are logged, recorded in ``summary.skipped`` and
    their subtree is skipped. A visitor returning ``WalkControl.STOP`` ends the
    walk immediately, releasing every open directory handle.
    """
    if not isinstance(pattern, PathSpec):
        pattern = PathSpec(pattern)
    state = _Walk(visitor, mode, enumerator)
    state.run(pattern, top_level=True)
    return state.summary


def collect_entries(
    pattern: PathSpec | str,
    mode: TraversalMode = TraversalMode.SHALLOW_ONE_LEVEL,
    enumerator: DirectoryEnumerator | None = None,
) -> list[WalkEntry]:
    """Return every entry ``walk`` would visit, in visitation order."""
    entries: list[WalkEntry] = []

    def record(spec: PathSpec, attributes: EntryAttributes) -> None:
        entries.append(WalkEntry(spec=spec, attributes=attributes))

    walk(pattern, record, mode, enumerator)
    return entries


__all__ = [
    "Visitor",
    "WalkSummary",
    "child_pattern",
    "discovery_pattern",
    "walk",
    "collect_entries",
]
