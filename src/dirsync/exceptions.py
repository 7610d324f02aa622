"""Exceptions for dirsync."""

from __future__ import annotations


class DirSyncError(Exception):
    """Base class for every error raised by dirsync."""


class SourceValidationError(DirSyncError):
    """Raised when the source root is missing or is not a directory."""


class WalkError(DirSyncError):
    """Raised when either tree cannot be traversed completely.

    A partial view of a tree could produce wrong deletions, so any
    traversal failure aborts the whole run.  The original ``OSError`` is
    available as ``__cause__``.
    """

    def __init__(self, side: str, root: str, cause: BaseException) -> None:
        self.side = side
        self.root = root
        super().__init__(f"error walking {side} folder: {cause}")


class SyncActionError(DirSyncError):
    """Raised when creating, copying, or deleting a single path fails."""

    def __init__(self, action: str, path: str, cause: BaseException) -> None:
        self.action = action
        self.path = path
        super().__init__(f"failed to {action} {path}: {cause}")
