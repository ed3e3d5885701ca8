"""Environment variable and placeholder substitution for path entries.

Three forms are recognised inside a configuration path:

``$NAME``
    Replaced with the environment variable ``NAME``. Unset variables expand to
    an empty string and are reported with a warning.
``{workspaceFolder}``
    Replaced with the workspace root.
``{env:NAME}``
    Replaced with the environment variable ``NAME`` or an empty string.

Any other ``{...}`` token is left as written.
"""

from __future__ import annotations

import logging
import re
import typing as typ

from .environment import default_environment

if typ.TYPE_CHECKING:
    from .environment import Environment

__all__ = [
    "WORKSPACE_FOLDER_PLACEHOLDER",
    "expand_placeholders",
    "replace_env_vars",
    "replace_placeholders",
    "strip_dollar_signs",
]

LOGGER = logging.getLogger(__name__)

WORKSPACE_FOLDER_PLACEHOLDER: typ.Final[str] = "workspaceFolder"
ENV_PLACEHOLDER_PREFIX: typ.Final[str] = "env:"

ENV_VAR_PATTERN = r"\$(\w+)"
PLACEHOLDER_PATTERN = r"\{([^}]+)\}"


def _compile(pattern: str, purpose: str) -> re.Pattern[str] | None:
    """Compile ``pattern`` or log why it could not be compiled."""
    try:
        return re.compile(pattern)
    except re.error as exc:
        LOGGER.error("Failed to compile pattern for %s: %s", purpose, exc)
        return None


def replace_env_vars(text: str, environment: Environment | None = None) -> str:
    """Replace every ``$NAME`` reference in ``text``."""
    pattern = _compile(ENV_VAR_PATTERN, "environment variable replacement")
    if pattern is None:
        return text
    source = environment or default_environment()

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        value = source.get(name)
        if value is None:
            LOGGER.warning("Environment variable %s is not set", name)
            return ""
        return value

    return pattern.sub(_substitute, text)


def strip_dollar_signs(text: str) -> str:
    """Remove every ``$`` left after variable substitution.

    Older configurations spell the workspace token ``${workspaceFolder}``;
    dropping the ``$`` turns it into the ``{workspaceFolder}`` placeholder.
    Literal ``$`` characters in file names are removed as well.
    """
    return text.replace("$", "")


def replace_placeholders(
    text: str,
    workspace_folder: str,
    environment: Environment | None = None,
) -> str:
    """Replace ``{workspaceFolder}`` and ``{env:NAME}`` placeholders."""
    pattern = _compile(PLACEHOLDER_PATTERN, "placeholder replacement")
    if pattern is None:
        return text
    source = environment or default_environment()

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key == WORKSPACE_FOLDER_PLACEHOLDER:
            return workspace_folder
        if key.startswith(ENV_PLACEHOLDER_PREFIX):
            return source.get(key.removeprefix(ENV_PLACEHOLDER_PREFIX)) or ""
        return match.group(0)

    return pattern.sub(_substitute, text)


def expand_placeholders(
    text: str,
    workspace_folder: str,
    environment: Environment | None = None,
) -> str:
    """Apply variable expansion, ``$`` stripping and placeholders in order.

    Text inserted by a placeholder is not scanned again for ``$NAME``.
    """
    expanded = strip_dollar_signs(replace_env_vars(text, environment))
    return replace_placeholders(expanded, workspace_folder, environment)
