"""Data structures describing what a sync did (or would do)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ActionKind(str, Enum):
    """Kind of sync action: ``MKDIR``, ``ADD``, ``UPDATE``, ``DELETE``, or ``SKIP``."""
    MKDIR = "mkdir"
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    SKIP = "skip"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass
class SyncAction:
    """A single action taken on one path.

    Attributes:
        path: Tree-relative path (forward slashes).
        action: :class:`ActionKind` value.
    """
    path: str
    action: ActionKind


@dataclass
class SyncWarning:
    """A source path that was deliberately left unsynced.

    Attributes:
        path: Tree-relative path (forward slashes).
        error: Human-readable reason.
    """
    path: str
    error: str


@dataclass
class SyncReport:
    """Result of ``sync_dirs`` or ``sync_dirs_dry_run``.

    Attributes:
        mkdir: Directories created at the destination.
        add: Files copied because the destination had none.
        update: Files overwritten because they were stale or of the wrong type.
        delete: Destination-only paths removed (top-level paths only; the
            contents of a removed directory are not listed).
        skip: Files left untouched because they were already up to date.
        warnings: Source paths not mirrored because excluded destination
            content is in the way.
    """
    mkdir: list[str] = field(default_factory=list)
    add: list[str] = field(default_factory=list)
    update: list[str] = field(default_factory=list)
    delete: list[str] = field(default_factory=list)
    skip: list[str] = field(default_factory=list)
    warnings: list[SyncWarning] = field(default_factory=list)

    @property
    def in_sync(self) -> bool:
        """``True`` if nothing had to change."""
        return not self.mkdir and not self.add and not self.update and not self.delete

    @property
    def total(self) -> int:
        """Number of mkdir + add + update + delete actions."""
        return len(self.mkdir) + len(self.add) + len(self.update) + len(self.delete)

    def record(self, action: SyncAction) -> None:
        """Append *action*'s path to the matching list."""
        getattr(self, action.action.value).append(action.path)

    def actions(self) -> list[SyncAction]:
        """Return every changing action as a flat list sorted by path."""
        result: list[SyncAction] = []
        for p in self.mkdir:
            result.append(SyncAction(path=p, action=ActionKind.MKDIR))
        for p in self.add:
            result.append(SyncAction(path=p, action=ActionKind.ADD))
        for p in self.update:
            result.append(SyncAction(path=p, action=ActionKind.UPDATE))
        for p in self.delete:
            result.append(SyncAction(path=p, action=ActionKind.DELETE))
        result.sort(key=lambda a: a.path)
        return result
