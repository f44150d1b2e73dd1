"""Error hierarchy for path parsing, enumeration and traversal.

``MalformedPathError`` is raised for structurally invalid path strings.
``DirectoryUnavailableError`` wraps the ``OSError`` behind a failed directory
open and classifies it into an ``UnavailableReason``.
"""

from __future__ import annotations

import errno
from enum import Enum, unique


# Windows error codes for unreachable shares: ERROR_BAD_NETPATH,
# ERROR_BAD_NET_NAME, ERROR_NO_NETWORK.
_NETWORK_WINERRORS = frozenset({53, 67, 1222})

_NETWORK_ERRNOS = frozenset(
    code
    for code in (
        getattr(errno, "ENETUNREACH", None),
        getattr(errno, "ENETDOWN", None),
        getattr(errno, "EHOSTUNREACH", None),
        getattr(errno, "EHOSTDOWN", None),
        getattr(errno, "ESTALE", None),
    )
    if code is not None
)


@unique
class UnavailableReason(str, Enum):
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    NETWORK_UNREACHABLE = "network_unreachable"
    OTHER = "other"

    @classmethod
    def from_os_error(cls, exc: OSError) -> UnavailableReason:
        """Best-effort classification of ``exc``; never contractual."""
        winerror = getattr(exc, "winerror", None)
        if winerror in _NETWORK_WINERRORS or exc.errno in _NETWORK_ERRNOS:
            return cls.NETWORK_UNREACHABLE
        if isinstance(exc, (FileNotFoundError, NotADirectoryError)):
            return cls.NOT_FOUND
        if isinstance(exc, PermissionError):
            return cls.PERMISSION_DENIED
        if exc.errno in (errno.ENOENT, errno.ENOTDIR):
            return cls.NOT_FOUND
        if exc.errno in (errno.EACCES, errno.EPERM):
            return cls.PERMISSION_DENIED
        return cls.OTHER


class PathWalkError(Exception):
    """Base class for every error raised by pathwalk."""


class MalformedPathError(PathWalkError, ValueError):
    """A path string violates PathSpec's structural rules."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"malformed path {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class DirectoryUnavailableError(PathWalkError):
    """A directory could not be enumerated."""

    def __init__(self, path: str, reason: UnavailableReason, detail: str = "") -> None:
        message = f"directory unavailable ({reason.value}): {path!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.path = path
        self.reason = reason

    @property
    def network_unreachable(self) -> bool:
        """True when the target looked like an unreachable network share."""
        return self.reason is UnavailableReason.NETWORK_UNREACHABLE

    @classmethod
    def from_os_error(cls, path: str, exc: OSError) -> DirectoryUnavailableError:
        return cls(path, UnavailableReason.from_os_error(exc), exc.strerror or str(exc))


class CursorExhaustedError(PathWalkError, RuntimeError):
    """``current()`` was called on a cursor that is not positioned on an entry."""


__all__ = [
    "UnavailableReason",
    "PathWalkError",
    "MalformedPathError",
    "DirectoryUnavailableError",
    "CursorExhaustedError",
]
