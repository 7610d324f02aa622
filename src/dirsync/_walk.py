"""Local directory traversal shared by the inventory builder and the walker."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from ._exclude import ExcludeFilter


@dataclass(frozen=True)
class EntryInfo:
    """Metadata for one tree entry, taken without following symlinks.

    Attributes:
        size: Size in bytes.
        mtime_ns: Modification time in integer nanoseconds.
        mode: Raw ``st_mode`` from ``lstat``.
    """
    size: int
    mtime_ns: int
    mode: int

    @classmethod
    def from_stat(cls, st: os.stat_result) -> EntryInfo:
        return cls(size=st.st_size, mtime_ns=st.st_mtime_ns, mode=st.st_mode)

    @property
    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.mode)

    @property
    def is_file(self) -> bool:
        return stat.S_ISREG(self.mode)

    @property
    def is_link(self) -> bool:
        return stat.S_ISLNK(self.mode)


@dataclass(frozen=True)
class WalkEntry:
    """One entry yielded by :func:`walk_tree`."""
    rel: str        # tree-relative path (forward slashes)
    path: str       # absolute or root-joined path on disk
    info: EntryInfo
    excluded: bool = False


def _list_dir(path: str) -> list[os.DirEntry]:
    """Return the entries of *path* sorted by name."""
    with os.scandir(path) as it:
        return sorted(it, key=lambda e: e.name)


def walk_tree(root: str, *, exclude: ExcludeFilter | None = None) -> Iterator[WalkEntry]:
    """Yield every entry under *root*, parents before children.

    Siblings come in lexical order of name.  The root itself is not
    yielded.  Symlinks are yielded but never descended into, even when
    they point at a directory.  Entries matched by *exclude* are yielded
    with ``excluded=True`` and, if directories, not descended into.

    ``OSError`` from listing or stat-ing propagates unchanged; callers
    decide how to report it.
    """
    return _walk(root, "", exclude)


def _walk(abs_dir: str, rel_dir: str, exclude: ExcludeFilter | None) -> Iterator[WalkEntry]:
    for entry in _list_dir(abs_dir):
        rel = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
        info = EntryInfo.from_stat(entry.stat(follow_symlinks=False))
        excluded = exclude is not None and exclude.is_excluded(rel, is_dir=info.is_dir)
        yield WalkEntry(rel=rel, path=entry.path, info=info, excluded=excluded)
        if info.is_dir and not excluded:
            yield from _walk(entry.path, rel, exclude)


def ancestors(rel: str) -> list[str]:
    """Return the proper ancestors of tree-relative *rel*, shallowest first.

    ``ancestors("a/b/c")`` is ``["a", "a/b"]``.
    """
    parts = rel.split("/")
    return ["/".join(parts[:i]) for i in range(1, len(parts))]
