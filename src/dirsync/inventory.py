"""Destination inventory: everything that already exists at the destination."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._walk import EntryInfo, ancestors, walk_tree
from .exceptions import WalkError

if TYPE_CHECKING:
    from ._exclude import ExcludeFilter


class Inventory(dict[str, EntryInfo]):
    """``{tree_relative_path: EntryInfo}`` for one destination tree.

    Entries are popped as the source walk matches them; whatever is left
    afterwards exists only at the destination.  ``protected`` names the
    directories that hold excluded entries: the deletion pass must not
    remove them recursively.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.protected: set[str] = set()


def build_inventory(dst_root: str, *, exclude: ExcludeFilter | None = None) -> Inventory:
    """Record every entry under *dst_root*, keyed by tree-relative path.

    *dst_root* must already exist and is not itself recorded.  Excluded
    entries are left out, and their ancestor directories are marked as
    protected.

    Raises :class:`WalkError` if any part of the tree cannot be read; an
    incomplete inventory would lead to wrong delete decisions.
    """
    inventory = Inventory()
    try:
        for entry in walk_tree(dst_root, exclude=exclude):
            if entry.excluded:
                inventory.protected.update(ancestors(entry.rel))
                continue
            inventory[entry.rel] = entry.info
    except OSError as exc:
        raise WalkError("destination", dst_root, exc) from exc
    return inventory
