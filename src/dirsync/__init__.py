from ._exclude import ExcludeFilter
from ._types import ActionKind, SyncAction, SyncReport, SyncWarning
from ._walk import EntryInfo
from .exceptions import DirSyncError, SourceValidationError, SyncActionError, WalkError
from .inventory import Inventory, build_inventory
from .sync import copy_file, needs_update, sync_dirs, sync_dirs_dry_run
from .validators import validate_src_dir

__all__ = [
    "sync_dirs", "sync_dirs_dry_run", "build_inventory", "copy_file", "needs_update",
    "validate_src_dir",
    "ExcludeFilter", "EntryInfo", "Inventory",
    "ActionKind", "SyncAction", "SyncReport", "SyncWarning",
    "DirSyncError", "SourceValidationError", "SyncActionError", "WalkError",
]
