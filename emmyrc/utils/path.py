"""Filesystem helpers used across :mod:`emmyrc`."""

from __future__ import annotations

import os
from pathlib import Path


def normalise_workspace_root(value: os.PathLike[str] | str | None) -> Path:
    """Return an absolute workspace path with ``~`` expanded.

    Symbolic links are left in place so resolved configuration paths keep the
    spelling the user chose for the workspace.
    """
    if value is None:
        return Path.cwd()
    expanded = Path(os.fspath(value)).expanduser()
    return Path(os.path.abspath(expanded))
