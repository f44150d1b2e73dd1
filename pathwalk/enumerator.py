"""OS directory enumeration backends.

A ``DirectoryEnumerator`` opens one directory and yields ``RawEntry`` rows for
the children whose names match a wildcard pattern. ``DirectoryCursor`` builds on
this seam; tests swap in fake backends to script entry order and failures.
"""

from __future__ import annotations

import fnmatch
import os
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass


MATCH_EVERYTHING = "*"
# DOS-style "all files" pattern; matches names without a dot too.
DOS_MATCH_EVERYTHING = "*.*"


@dataclass(frozen=True)
class RawEntry:
    """One child row as the OS reports it, before any filtering."""

    name: str
    is_folder: bool
    size_bytes: int = 0
    modified_ns: int | None = None


class RawListing(ABC):
    """Open enumeration handle; iterating yields matching ``RawEntry`` rows."""

    @abstractmethod
    def __next__(self) -> RawEntry:
        """Return the next row or raise ``StopIteration``."""

    @abstractmethod
    def close(self) -> None:
        """Release the OS handle. Must be safe to call more than once."""

    def __iter__(self) -> Iterator[RawEntry]:
        return self


class DirectoryEnumerator(ABC):
    """Contract for listing one directory level.

    ``open`` raises ``OSError`` when the directory cannot be enumerated.
    """

    @abstractmethod
    def open(self, directory: str, name_pattern: str) -> RawListing:
        """Open ``directory`` and return a listing filtered by ``name_pattern``."""


def name_matches(name: str, pattern: str, case_sensitive: bool = False) -> bool:
    """Return whether ``name`` matches wildcard ``pattern``.

    Only ``*`` and ``?`` are wildcards. Brackets are ordinary name characters.
    """
    if pattern in (MATCH_EVERYTHING, DOS_MATCH_EVERYTHING):
        return True
    # "[[]" is fnmatch's spelling of a literal "["; a lone "]" is already literal.
    pattern = pattern.replace("[", "[[]")
    if case_sensitive:
        return fnmatch.fnmatchcase(name, pattern)
    return fnmatch.fnmatchcase(name.casefold(), pattern.casefold())


class _ScandirListing(RawListing):
    def __init__(self, handle, name_pattern: str, case_sensitive: bool) -> None:
        self._handle = handle
        self._name_pattern = name_pattern
        self._case_sensitive = case_sensitive

    def __next__(self) -> RawEntry:
        if self._handle is None:
            raise StopIteration
        for child in self._handle:
            if not name_matches(child.name, self._name_pattern, self._case_sensitive):
                continue
            try:
                is_dir = child.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False

            size_bytes = 0
            modified_ns: int | None = None
            try:
                stat = child.stat(follow_symlinks=False)
                modified_ns = int(stat.st_mtime_ns)
                if not is_dir:
                    size_bytes = int(stat.st_size)
            except OSError:
                pass
            return RawEntry(
                name=child.name,
                is_folder=is_dir,
                size_bytes=size_bytes,
                modified_ns=modified_ns,
            )
        self.close()
        raise StopIteration

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None


class ScandirEnumerator(DirectoryEnumerator):
    """Default backend built on ``os.scandir``.

    Matching is case-insensitive unless ``case_sensitive`` is set. Symlinks
    are classified without following them.
    """

    def __init__(self, case_sensitive: bool = False) -> None:
        self.case_sensitive = case_sensitive

    def open(self, directory: str, name_pattern: str) -> RawListing:
        handle = os.scandir(directory)
        return _ScandirListing(handle, name_pattern, self.case_sensitive)


__all__ = [
    "MATCH_EVERYTHING",
    "RawEntry",
    "RawListing",
    "DirectoryEnumerator",
    "ScandirEnumerator",
    "name_matches",
]
