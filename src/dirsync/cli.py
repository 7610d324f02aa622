"""dirsync CLI: mirror one directory tree into another."""

from __future__ import annotations

import click

from ._exclude import ExcludeFilter
from ._types import ActionKind, SyncAction, SyncReport
from .exceptions import DirSyncError, SourceValidationError
from .sync import sync_dirs, sync_dirs_dry_run
from .validators import validate_src_dir


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_PREFIX = {
    ActionKind.MKDIR: "+",
    ActionKind.ADD: "+",
    ActionKind.UPDATE: "~",
    ActionKind.DELETE: "-",
}


def _format_action(action: SyncAction) -> str:
    """Render one action as ``+ path``, ``~ path``, ``- path`` (dirs get a trailing /)."""
    suffix = "/" if action.action is ActionKind.MKDIR else ""
    return f"{_PREFIX[action.action]} {action.path}{suffix}"


def _progress_cb(verbose: bool):
    """Return a progress callback if verbose mode is on, else None."""
    if not verbose:
        return None
    def _on_action(action):
        click.echo(_format_action(action), err=True)
    return _on_action


def _print_warnings(report: SyncReport) -> None:
    for w in report.warnings:
        click.echo(f"WARNING: {w.path}: {w.error}", err=True)


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------

@click.command()
@click.option("-src", "--src", "src", envvar="DIRSYNC_SRC", required=True,
              help="Source folder path (or set DIRSYNC_SRC).")
@click.option("-dst", "--dst", "dst", envvar="DIRSYNC_DST", required=True,
              help="Destination folder path (or set DIRSYNC_DST).")
@click.option("-delete-missing", "--delete-missing", "delete_missing",
              is_flag=True, default=False,
              help="Delete files in destination that don't exist in source.")
@click.option("-n", "--dry-run", "dry_run", is_flag=True, default=False,
              help="Show what would change without writing.")
@click.option("--exclude", multiple=True,
              help="Exclude paths matching pattern (gitignore syntax, repeatable).")
@click.option("--exclude-from", "exclude_from",
              type=click.Path(exists=True, dir_okay=False),
              help="Read exclude patterns from file.")
@click.option("-v", "--verbose", is_flag=True,
              help="Print each action on stderr as it happens.")
def main(src, dst, delete_missing, dry_run, exclude, exclude_from, verbose):
    """Mirror the contents of a source folder into a destination folder.

    Copies files that are missing from the destination or differ in size
    or modification time.  Symbolic links in the source are skipped.
    With -delete-missing, paths that exist only in the destination are
    removed.

    \b
    Example:
      dirsync -src ./photos -dst /mnt/backup/photos -delete-missing
    """
    excl = ExcludeFilter(patterns=exclude, exclude_from=exclude_from)
    if not excl.active:
        excl = None

    try:
        validate_src_dir(src)
    except SourceValidationError as exc:
        raise click.ClickException(f"Error validating source directory: {exc}")

    try:
        if dry_run:
            report = sync_dirs_dry_run(src, dst, delete_missing, exclude=excl)
            for action in report.actions():
                click.echo(_format_action(action))
            _print_warnings(report)
            return
        report = sync_dirs(src, dst, delete_missing, exclude=excl,
                           progress=_progress_cb(verbose))
    except DirSyncError as exc:
        raise click.ClickException(f"Error syncing directories: {exc}")

    _print_warnings(report)
    click.echo("Directory sync complete", err=True)
