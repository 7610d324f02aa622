"""Mirror a source directory tree into a destination directory tree.

``sync_dirs`` builds an inventory of the destination, walks the source
once deciding mkdir/add/update/skip for every entry, and finally (when
asked) deletes whatever the walk never matched.  ``sync_dirs_dry_run``
computes the same report without touching the disk.

A file is stale when its size or modification time differs from the
destination copy.  Content is never hashed.
"""

from __future__ import annotations

import errno
import os
import shutil
import stat
from typing import TYPE_CHECKING, Callable

from ._types import ActionKind, SyncAction, SyncReport, SyncWarning
from ._walk import EntryInfo, ancestors, walk_tree
from .exceptions import SyncActionError, WalkError
from .inventory import Inventory, build_inventory

if TYPE_CHECKING:
    from ._exclude import ExcludeFilter


_DIR_MODE = 0o755


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

def needs_update(src: EntryInfo, dst: EntryInfo) -> bool:
    """Return True if *dst* is a stale copy of *src*.

    Any size or mtime difference counts, including a newer destination.
    """
    return src.size != dst.size or src.mtime_ns != dst.mtime_ns


def copy_file(src_path: str, dst_path: str) -> None:
    """Copy *src_path* to *dst_path*, keeping its mtime and permission bits.

    Missing parent directories of *dst_path* are created.  An existing
    *dst_path* is truncated.  Errors propagate as ``OSError``.
    """
    with open(src_path, "rb") as fsrc:
        st = os.fstat(fsrc.fileno())
        parent = os.path.dirname(dst_path)
        if parent:
            os.makedirs(parent, mode=_DIR_MODE, exist_ok=True)
        with open(dst_path, "wb") as fdst:
            shutil.copyfileobj(fsrc, fdst)
    os.utime(dst_path, ns=(st.st_atime_ns, st.st_mtime_ns))
    os.chmod(dst_path, stat.S_IMODE(st.st_mode))


def _remove(path: str, info: EntryInfo) -> None:
    """Remove a file, symlink, or whole directory tree."""
    if info.is_dir:
        shutil.rmtree(path)
    else:
        os.unlink(path)


def _join(root: str, rel: str) -> str:
    return os.path.join(root, *rel.split("/"))


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------

class _Reconciler:
    """One pass of the source tree against a destination inventory.

    With ``apply=False`` every decision is recorded but nothing on disk
    changes.
    """

    def __init__(
        self,
        src_root: str,
        dst_root: str,
        inventory: Inventory,
        *,
        apply: bool,
        exclude: ExcludeFilter | None = None,
        progress: Callable[[SyncAction], None] | None = None,
    ) -> None:
        self._src_root = src_root
        self._dst_root = dst_root
        self._inventory = inventory
        self._apply = apply
        self._exclude = exclude
        self._progress = progress
        self.report = SyncReport()
        self._blocked: set[str] = set()

    def _done(self, rel: str, kind: ActionKind) -> None:
        action = SyncAction(path=rel, action=kind)
        self.report.record(action)
        if self._progress is not None and kind is not ActionKind.SKIP:
            self._progress(action)

    def _source_entries(self):
        """Iterate the source tree, turning traversal failures into :class:`WalkError`.

        Only the traversal itself is guarded; errors raised while handling
        an entry propagate unchanged.
        """
        entries = walk_tree(self._src_root, exclude=self._exclude)
        while True:
            try:
                entry = next(entries)
            except StopIteration:
                return
            except OSError as exc:
                raise WalkError("source", self._src_root, exc) from exc
            yield entry

    def _warn(self, rel: str, error: str) -> None:
        self.report.warnings.append(SyncWarning(path=rel, error=error))
        self._blocked.add(rel)

    def _excluded_at_destination(self, rel: str) -> EntryInfo | None:
        """Return the entry the exclude filter kept out of the inventory at *rel*, if any.

        Only called for paths missing from the inventory, so anything found
        on disk was excluded on the destination side.
        """
        if self._exclude is None:
            return None
        out = _join(self._dst_root, rel)
        try:
            return EntryInfo.from_stat(os.lstat(out))
        except (FileNotFoundError, NotADirectoryError):
            return None
        except OSError as exc:
            raise SyncActionError("inspect", out, exc) from exc

    def walk_source(self) -> None:
        for entry in self._source_entries():
            if entry.excluded or entry.info.is_link:
                continue
            if any(parent in self._blocked for parent in ancestors(entry.rel)):
                continue
            if entry.info.is_dir:
                self._sync_dir(entry.rel)
            elif entry.info.is_file:
                self._sync_file(entry.rel, entry.path, entry.info)
            # sockets, fifos and devices are not mirrored

    def _sync_dir(self, rel: str) -> None:
        existing = self._inventory.pop(rel, None)
        if existing is None and self._excluded_at_destination(rel) is not None:
            self._warn(rel, "excluded entry at destination blocks directory")
            return
        if self._apply:
            out = _join(self._dst_root, rel)
            try:
                if existing is not None and not existing.is_dir:
                    os.unlink(out)
                os.makedirs(out, mode=_DIR_MODE, exist_ok=True)
            except OSError as exc:
                raise SyncActionError("create directory", out, exc) from exc
        if existing is None or not existing.is_dir:
            self._done(rel, ActionKind.MKDIR)

    def _sync_file(self, rel: str, src_path: str, info: EntryInfo) -> None:
        existing = self._inventory.pop(rel, None)
        if existing is None and self._excluded_at_destination(rel) is not None:
            self._warn(rel, "excluded entry at destination blocks file")
            return
        if existing is not None and existing.is_dir and rel in self._inventory.protected:
            self._warn(rel, "destination directory holds excluded entries")
            return
        if existing is None:
            kind = ActionKind.ADD
        elif not existing.is_file or needs_update(info, existing):
            kind = ActionKind.UPDATE
        else:
            self._done(rel, ActionKind.SKIP)
            return

        if existing is not None and existing.is_dir:
            # The whole directory goes away; its entries can't be deleted again.
            prefix = rel + "/"
            for key in [k for k in self._inventory if k.startswith(prefix)]:
                del self._inventory[key]

        if self._apply:
            out = _join(self._dst_root, rel)
            try:
                if existing is not None:
                    _remove(out, existing)
                copy_file(src_path, out)
            except OSError as exc:
                raise SyncActionError("copy", out, exc) from exc
        self._done(rel, kind)

    def delete_leftovers(self) -> None:
        """Remove every destination-only path still in the inventory."""
        removed: set[str] = set()
        for rel in sorted(self._inventory):
            if any(parent in removed for parent in ancestors(rel)):
                continue
            info = self._inventory[rel]
            if info.is_dir and rel in self._inventory.protected:
                # Holds excluded entries; its unprotected children are handled one by one.
                continue
            if self._apply:
                out = _join(self._dst_root, rel)
                try:
                    _remove(out, info)
                except OSError as exc:
                    raise SyncActionError("delete", out, exc) from exc
            removed.add(rel)
            self._done(rel, ActionKind.DELETE)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def sync_dirs(
    src_dir: str | os.PathLike[str],
    dst_dir: str | os.PathLike[str],
    delete_missing: bool = False,
    *,
    exclude: ExcludeFilter | None = None,
    progress: Callable[[SyncAction], None] | None = None,
) -> SyncReport:
    """Make *dst_dir* mirror *src_dir*.

    *dst_dir* and its ancestors are created if missing.  Files absent from
    or stale at the destination are copied; symlinks in the source are
    ignored.  With *delete_missing*, paths that exist only at the
    destination are removed.

    *progress*, if given, is called with a :class:`SyncAction` after each
    change is made.

    Every failure is fatal: traversal problems raise :class:`WalkError`,
    failed mkdir/copy/delete raise :class:`SyncActionError`.  Changes
    made before the failure are not rolled back.
    """
    src_dir = os.fspath(src_dir)
    dst_dir = os.fspath(dst_dir)
    try:
        os.makedirs(dst_dir, mode=_DIR_MODE, exist_ok=True)
    except OSError as exc:
        raise SyncActionError("create destination directory", dst_dir, exc) from exc

    inventory = build_inventory(dst_dir, exclude=exclude)
    run = _Reconciler(src_dir, dst_dir, inventory, apply=True,
                      exclude=exclude, progress=progress)
    run.walk_source()
    if delete_missing:
        run.delete_leftovers()
    return run.report


def sync_dirs_dry_run(
    src_dir: str | os.PathLike[str],
    dst_dir: str | os.PathLike[str],
    delete_missing: bool = False,
    *,
    exclude: ExcludeFilter | None = None,
) -> SyncReport:
    """Compute what ``sync_dirs`` would do without writing anything.

    Raises the same errors ``sync_dirs`` would, including
    :class:`SyncActionError` when *dst_dir* exists but is not a directory.
    """
    src_dir = os.fspath(src_dir)
    dst_dir = os.fspath(dst_dir)
    if os.path.isdir(dst_dir):
        inventory = build_inventory(dst_dir, exclude=exclude)
    elif os.path.lexists(dst_dir):
        exc = FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), dst_dir)
        raise SyncActionError("create destination directory", dst_dir, exc) from exc
    else:
        inventory = Inventory()
    run = _Reconciler(src_dir, dst_dir, inventory, apply=False, exclude=exclude)
    run.walk_source()
    if delete_missing:
        run.delete_leftovers()
    return run.report
