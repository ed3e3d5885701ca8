"""Command-line interface for the :mod:`emmyrc` toolkit."""

from __future__ import annotations

import os
import sys
import typing as typ
from contextlib import contextmanager
from pathlib import Path

import msgspec
from cyclopts import App, Parameter

from . import config
from .paths import resolve_paths
from .utils import normalise_workspace_root

WORKSPACE_ROOT_ENV_VAR = "EMMYRC_WORKSPACE_ROOT"
WORKSPACE_ROOT_REQUIRED_MESSAGE = "--workspace-root requires a value"
_WORKSPACE_PARAMETER = Parameter(
    name="workspace-root",
    env_var=WORKSPACE_ROOT_ENV_VAR,
    help="Path to the workspace root that relative entries anchor to.",
)
WorkspaceRootOption = typ.Annotated[Path, _WORKSPACE_PARAMETER]

# Commands that read ``.emmyrc``; ``main`` loads it once before dispatch.
_CONFIGURED_COMMANDS: typ.Final[frozenset[str]] = frozenset({"resolve"})

app = App(
    name="emmyrc",
    help="Resolve the path settings of an .emmyrc configuration.",
    result_action="return_value",
)


def _validate_workspace_value(value: str) -> str:
    """Ensure ``value`` is usable as a workspace path."""
    if not value or value.startswith("-"):
        raise SystemExit(WORKSPACE_ROOT_REQUIRED_MESSAGE)
    return value


def _parse_workspace_flag(tokens: typ.Sequence[str], index: int) -> tuple[str, int]:
    """Parse ``--workspace-root <path>`` form starting at ``index``."""
    try:
        candidate = tokens[index + 1]
    except IndexError as err:
        raise SystemExit(WORKSPACE_ROOT_REQUIRED_MESSAGE) from err
    workspace = _validate_workspace_value(candidate)
    return workspace, index + 2


def _parse_workspace_equals(argument: str, index: int) -> tuple[str, int]:
    """Parse ``--workspace-root=<path>`` form for ``argument``."""
    candidate = argument.partition("=")[2]
    workspace = _validate_workspace_value(candidate)
    return workspace, index + 1


def _extract_workspace_override(
    tokens: typ.Sequence[str],
) -> tuple[str | None, list[str]]:
    """Split ``--workspace-root`` from CLI tokens.

    Both ``--workspace-root <path>`` and ``--workspace-root=<path>`` are
    accepted anywhere on the command line; the last occurrence wins.
    """
    workspace: str | None = None
    remainder: list[str] = []
    index = 0
    while index < len(tokens):
        current_argument = tokens[index]
        if current_argument == "--workspace-root":
            workspace, index = _parse_workspace_flag(tokens, index)
            continue
        if current_argument.startswith("--workspace-root="):
            workspace, index = _parse_workspace_equals(current_argument, index)
            continue
        remainder.append(current_argument)
        index += 1
    return workspace, remainder


@contextmanager
def _workspace_env(value: Path) -> typ.Iterator[None]:
    """Temporarily set :data:`WORKSPACE_ROOT_ENV_VAR` to ``value``."""
    previous = os.environ.get(WORKSPACE_ROOT_ENV_VAR)
    os.environ[WORKSPACE_ROOT_ENV_VAR] = str(value)
    try:
        yield
    finally:
        if previous is None:
            os.environ.pop(WORKSPACE_ROOT_ENV_VAR, None)
        else:
            os.environ[WORKSPACE_ROOT_ENV_VAR] = previous


def _dispatch_and_print(tokens: typ.Sequence[str]) -> int:
    """Execute the Cyclopts app and print command results."""
    try:
        result = app(tokens)
    except SystemExit as err:
        code = err.code
        if code is None:
            return 0
        if isinstance(code, int):
            return code
        print(code, file=sys.stderr)
        return 1
    if isinstance(result, int):
        return result
    if result is not None:
        print(result)
    return 0


def main(argv: typ.Sequence[str] | None = None) -> int:
    """Entry point for ``python -m emmyrc.cli``."""
    try:
        if argv is None:
            argv = sys.argv[1:]
        workspace_override, remaining = _extract_workspace_override(list(argv))
        if not remaining:
            _dispatch_and_print(remaining)  # Print usage message
            return 2
        workspace_root = normalise_workspace_root(
            workspace_override or os.environ.get(WORKSPACE_ROOT_ENV_VAR)
        )
        if remaining[0] not in _CONFIGURED_COMMANDS:
            with _workspace_env(workspace_root):
                return _dispatch_and_print(remaining)
        try:
            configuration = config.load_configuration(workspace_root)
        except config.ConfigurationError as exc:
            print(f"Configuration error: {exc}", file=sys.stderr)
            return 1
        with (
            _workspace_env(workspace_root),
            config.use_configuration(configuration),
        ):
            return _dispatch_and_print(remaining)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130
    except Exception as exc:  # noqa: BLE001 - fallback guard for CLI entry point
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return 1


def _resolve_configuration(workspace_root: Path) -> config.Emmyrc:
    """Return the active configuration, loading it on demand."""
    try:
        return config.current_configuration()
    except config.ConfigurationNotLoadedError:
        return config.load_configuration(workspace_root)


@app.command
def resolve(
    workspace_root: WorkspaceRootOption | None = None,
) -> str:
    """Print the resolved path settings of the workspace configuration as JSON."""
    resolved = normalise_workspace_root(workspace_root)
    configuration = _resolve_configuration(resolved)
    encoded = msgspec.json.encode(configuration.path_settings())
    return msgspec.json.format(encoded, indent=2).decode("utf-8")


@app.command
def expand(
    *entries: str,
    workspace_root: WorkspaceRootOption | None = None,
) -> str:
    """Print each resolved entry on its own line, dropping repeats."""
    resolved = normalise_workspace_root(workspace_root)
    return "\n".join(resolve_paths(entries, resolved))


if __name__ == "__main__":  # pragma: no cover - convenience entry point
    raise SystemExit(main())
