"""Placeholder expansion and lexical resolution of configuration paths."""

from __future__ import annotations

from .anchor import HomeDirectoryNotFoundError, anchor_path
from .environment import (
    Environment,
    MappingEnvironment,
    OsEnvironment,
    default_environment,
)
from .flavour import (
    POSIX_FLAVOUR,
    WINDOWS_FLAVOUR,
    ComponentKind,
    PathComponent,
    PathFlavour,
    current_flavour,
)
from .normalise import normalise_path
from .placeholders import (
    expand_placeholders,
    replace_env_vars,
    replace_placeholders,
    strip_dollar_signs,
)
from .resolve import resolve_path, resolve_paths

__all__ = [
    "POSIX_FLAVOUR",
    "WINDOWS_FLAVOUR",
    "ComponentKind",
    "Environment",
    "HomeDirectoryNotFoundError",
    "MappingEnvironment",
    "OsEnvironment",
    "PathComponent",
    "PathFlavour",
    "anchor_path",
    "current_flavour",
    "default_environment",
    "expand_placeholders",
    "normalise_path",
    "replace_env_vars",
    "replace_placeholders",
    "resolve_path",
    "resolve_paths",
    "strip_dollar_signs",
]
