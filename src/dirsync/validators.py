"""Checks run on user-supplied paths before a sync starts."""

from __future__ import annotations

import os
import stat

from .exceptions import SourceValidationError


def validate_src_dir(path: str | os.PathLike[str]) -> None:
    """Raise :class:`SourceValidationError` unless *path* is an existing directory."""
    try:
        st = os.stat(path)
    except FileNotFoundError as exc:
        raise SourceValidationError(f"path does not exist: {exc}") from exc
    except OSError as exc:
        raise SourceValidationError(f"getting stats for path: {exc}") from exc
    if not stat.S_ISDIR(st.st_mode):
        raise SourceValidationError("path is not a directory")
