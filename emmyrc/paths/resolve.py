"""Resolve configuration path entries into normalised absolute paths."""

from __future__ import annotations

import logging
import os
import typing as typ

from .anchor import HomeDirectoryNotFoundError, anchor_path
from .normalise import normalise_path
from .placeholders import (
    replace_env_vars,
    replace_placeholders,
    strip_dollar_signs,
)

if typ.TYPE_CHECKING:
    from collections import abc as cabc

    from .environment import Environment
    from .flavour import PathFlavour

__all__ = ["resolve_path", "resolve_paths"]

LOGGER = logging.getLogger(__name__)


def _workspace_text(workspace_root: str | os.PathLike[str]) -> str | None:
    """Return ``workspace_root`` as text, or ``None`` if it is not valid UTF-8."""
    text = os.fspath(workspace_root)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return text


def resolve_path(
    raw: str,
    workspace_root: str | os.PathLike[str],
    *,
    environment: Environment | None = None,
    flavour: PathFlavour | None = None,
) -> str:
    """Expand, anchor and normalise a single configuration path entry.

    Failures never propagate: when the workspace root is not valid UTF-8 the
    variable-expanded entry is returned as is, and when a ``~`` entry has no
    home directory to anchor to the placeholder-expanded entry is returned.
    Both cases are logged as errors.

    Examples
    --------
    >>> from emmyrc.paths.environment import MappingEnvironment
    >>> from emmyrc.paths.flavour import POSIX_FLAVOUR
    >>> resolve_path(
    ...     "{workspaceFolder}/src/../lib",
    ...     "/ws",
    ...     environment=MappingEnvironment(),
    ...     flavour=POSIX_FLAVOUR,
    ... )
    '/ws/lib'

    """
    expanded = strip_dollar_signs(replace_env_vars(raw, environment))
    workspace_text = _workspace_text(workspace_root)
    if workspace_text is None:
        LOGGER.error("Workspace path is not valid UTF-8: %r", workspace_root)
        return expanded
    expanded = replace_placeholders(expanded, workspace_text, environment)
    try:
        candidate = anchor_path(
            expanded,
            workspace_text,
            environment=environment,
            flavour=flavour,
        )
    except HomeDirectoryNotFoundError as exc:
        LOGGER.error("%s; leaving %r unanchored", exc, expanded)
        return expanded
    return normalise_path(candidate, flavour)


def resolve_paths(
    entries: cabc.Iterable[str],
    workspace_root: str | os.PathLike[str],
    *,
    environment: Environment | None = None,
    flavour: PathFlavour | None = None,
) -> tuple[str, ...]:
    """Resolve ``entries`` and drop repeats, keeping first occurrences in order."""
    seen: set[str] = set()
    resolved: list[str] = []
    for entry in entries:
        path = resolve_path(
            entry,
            workspace_root,
            environment=environment,
            flavour=flavour,
        )
        if path in seen:
            continue
        seen.add(path)
        resolved.append(path)
    return tuple(resolved)
