"""Anchor expanded path entries to a concrete base directory."""

from __future__ import annotations

import os
import typing as typ

from .environment import default_environment
from .flavour import current_flavour

if typ.TYPE_CHECKING:
    from .environment import Environment
    from .flavour import PathFlavour

HOME_PREFIX: typ.Final[str] = "~"
WORKSPACE_PREFIX: typ.Final[str] = "./"


class HomeDirectoryNotFoundError(LookupError):
    """Raised when a ``~`` entry cannot be anchored to a home directory."""

    def __init__(self) -> None:
        """Initialise the error with a descriptive message."""
        super().__init__("Home directory not found")


def anchor_path(
    text: str,
    workspace_root: str | os.PathLike[str],
    *,
    environment: Environment | None = None,
    flavour: PathFlavour | None = None,
) -> str:
    """Return ``text`` anchored to the home directory or ``workspace_root``.

    The first matching rule wins:

    1. ``~...`` joins the remainder onto the home directory.
    2. ``./...`` joins the remainder onto ``workspace_root``.
    3. Absolute paths are returned unchanged.
    4. Anything else is joined onto ``workspace_root``.

    The result is not normalised.

    Raises
    ------
    HomeDirectoryNotFoundError
        If ``text`` starts with ``~`` and no home directory is available.
    """
    active = flavour or current_flavour()
    root = os.fspath(workspace_root)
    if text.startswith(HOME_PREFIX):
        home = (environment or default_environment()).home()
        if home is None:
            raise HomeDirectoryNotFoundError
        remainder = text.removeprefix(HOME_PREFIX)
        return active.join(home, active.strip_leading_separators(remainder))
    if text.startswith(WORKSPACE_PREFIX):
        remainder = text.removeprefix(WORKSPACE_PREFIX)
        return active.join(root, active.strip_leading_separators(remainder))
    if active.is_absolute(text):
        return text
    return active.join(root, text)
