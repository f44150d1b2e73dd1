"""One-level directory enumeration as a stream of ``(PathSpec, EntryAttributes)``.

A cursor is positioned on its first entry as soon as it opens, so the usual
loop is either ``for spec, attributes in cursor`` or the explicit form::

    with DirectoryCursor(PathSpec("src\\*.py")) as cursor:
        while cursor.exists():
            spec, attributes = cursor.current()
            cursor.advance()

The ``.`` and ``..`` pseudo-entries are never produced.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .entries import EntryAttributes
from .enumerator import MATCH_EVERYTHING, DirectoryEnumerator, RawEntry, RawListing, ScandirEnumerator
from .errors import CursorExhaustedError, DirectoryUnavailableError, MalformedPathError
from .path_spec import PathSpec

logger = logging.getLogger(__name__)

SPECIAL_FOLDER_NAMES = frozenset({".", ".."})

_default_enumerator: DirectoryEnumerator | None = None


def default_enumerator() -> DirectoryEnumerator:
    """Return the shared case-insensitive ``os.scandir`` backend."""
    global _default_enumerator
    if _default_enumerator is None:
        _default_enumerator = ScandirEnumerator()
    return _default_enumerator


def is_special_entry(raw: RawEntry) -> bool:
    return raw.is_folder and raw.name in SPECIAL_FOLDER_NAMES


def search_target(pattern: PathSpec) -> tuple[str, str]:
    """Return ``(directory_to_scan, name_pattern)`` for a search pattern.

    Folder-shaped patterns enumerate the folder's contents. An empty volume
    and directory means the current working directory.
    """
    directory = PathSpec(pattern.volume + pattern.directory).native() or "."
    name_pattern = pattern.file or MATCH_EVERYTHING
    return directory, name_pattern


class DirectoryCursor:
    """Single-pass cursor over the entries of one directory matching a pattern.

    Opening raises ``DirectoryUnavailableError`` when the directory can't be
    listed. The OS handle is released when the cursor is exhausted, closed, or
    used as a context manager and left.
    """

    def __init__(self, pattern: PathSpec | str, enumerator: DirectoryEnumerator | None = None) -> None:
        if not isinstance(pattern, PathSpec):
            pattern = PathSpec(pattern)
        self.pattern = pattern
        self._volume = pattern.volume
        self._directory = pattern.directory
        self._current: tuple[PathSpec, EntryAttributes] | None = None
        self._handed_out = False

        directory, name_pattern = search_target(pattern)
        self._scan_directory = directory
        backend = enumerator if enumerator is not None else default_enumerator()
        try:
            self._listing: RawListing | None = backend.open(directory, name_pattern)
        except OSError as exc:
            error = DirectoryUnavailableError.from_os_error(directory, exc)
            logger.debug(f"Cannot open {directory!r}: {error.reason.value}")
            raise error from exc
        logger.debug(f"Opened {directory!r} for {name_pattern!r}")
        self.advance()

    @classmethod
    def open(cls, pattern: PathSpec | str, enumerator: DirectoryEnumerator | None = None) -> DirectoryCursor:
        return cls(pattern, enumerator)

    def exists(self) -> bool:
        """True while the cursor is positioned on an entry."""
        return self._current is not None

    __bool__ = exists

    @property
    def exhausted(self) -> bool:
        return self._current is None and self._listing is None

    def current(self) -> tuple[PathSpec, EntryAttributes]:
        if self._current is None:
            raise CursorExhaustedError(f"cursor over {self._scan_directory!r} has no current entry")
        return self._current

    @property
    def spec(self) -> PathSpec:
        return self.current()[0]

    @property
    def attributes(self) -> EntryAttributes:
        return self.current()[1]

    def advance(self) -> bool:
        """Move to the next entry. Returns ``False`` (and closes) at the end."""
        self._handed_out = False
        while self._listing is not None:
            raw = self._next_raw(self._listing)
            if raw is None:
                break
            if is_special_entry(raw):
                continue
            entry = self._entry_for(raw)
            if entry is None:
                continue
            self._current = entry
            return True
        self._current = None
        self.close()
        return False

    def _next_raw(self, listing: RawListing) -> RawEntry | None:
        try:
            return next(listing)
        except StopIteration:
            return None
        except OSError as exc:
            self.close()
            raise DirectoryUnavailableError.from_os_error(self._scan_directory, exc) from exc

    def _entry_for(self, raw: RawEntry) -> tuple[PathSpec, EntryAttributes] | None:
        try:
            spec = PathSpec.from_parts(self._volume, self._directory, raw.name, allow_wildcards=False)
        except MalformedPathError as exc:
            logger.warning(f"Skipping entry that cannot be represented: {exc}")
            return None
        # A name like "x\y" on POSIX would re-split into another directory.
        if spec.file != raw.name:
            logger.warning(f"Skipping entry that cannot be represented: {raw.name!r}")
            return None
        attributes = EntryAttributes(
            is_folder=raw.is_folder,
            size_bytes=0 if raw.is_folder else raw.size_bytes,
            modified_ns=raw.modified_ns,
        )
        return spec, attributes

    def close(self) -> None:
        """Release the enumeration handle. Safe to call repeatedly."""
        self._current = None
        if self._listing is not None:
            listing = self._listing
            self._listing = None
            listing.close()
            logger.debug(f"Closed {self._scan_directory!r}")

    def __enter__(self) -> DirectoryCursor:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __iter__(self) -> Iterator[tuple[PathSpec, EntryAttributes]]:
        return self

    def __next__(self) -> tuple[PathSpec, EntryAttributes]:
        # Advance lazily so an entry is handed out before a later read can fail.
        if self._handed_out:
            self.advance()
        if self._current is None:
            raise StopIteration
        self._handed_out = True
        return self._current

    def __del__(self) -> None:
        listing = getattr(self, "_listing", None)
        if listing is not None:
            listing.close()


__all__ = [
    "SPECIAL_FOLDER_NAMES",
    "DirectoryCursor",
    "default_enumerator",
    "is_special_entry",
    "search_target",
]
