"""Configuration loading for the :mod:`emmyrc` toolkit.

Only the path-valued parts of ``.emmyrc`` are modelled. The other sections a
language server reads (completion, diagnostics, hints and so on) are accepted
and ignored so that complete configuration files load unchanged.
"""

from __future__ import annotations

import contextlib
import contextvars
import logging
import typing as typ
from collections import abc as cabc

import msgspec
from cyclopts.config import Json, Toml
from cyclopts.exceptions import CycloptsError

from emmyrc.paths import resolve_paths
from emmyrc.utils import normalise_workspace_root

if typ.TYPE_CHECKING:
    import os
    from pathlib import Path

    from emmyrc.paths import Environment

CONFIG_FILENAME = ".emmyrc.json"
TOML_CONFIG_FILENAME = ".emmyrc.toml"
ROOT_NOT_OBJECT_MSG = "Configuration root must be an object."

LOGGER = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when the :mod:`emmyrc` configuration is invalid."""


class ConfigurationNotLoadedError(ConfigurationError):
    """Raised when code accesses the configuration before it is loaded."""


class MissingConfigurationError(ConfigurationError):
    """Raised when the configuration file cannot be located."""


class WorkspaceConfig(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """Path settings from the ``workspace`` section."""

    workspace_roots: tuple[str, ...] = ()
    library: tuple[str, ...] = ()
    ignore_dir: tuple[str, ...] = ()
    ignore_globs: tuple[str, ...] = ()


class ResourceConfig(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """Path settings from the ``resource`` section."""

    paths: tuple[str, ...] = ()


class Emmyrc(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    """Strongly-typed view of the path settings in ``.emmyrc``."""

    schema: str | None = msgspec.field(default=None, name="$schema")
    workspace: WorkspaceConfig = msgspec.field(default_factory=WorkspaceConfig)
    resource: ResourceConfig = msgspec.field(default_factory=ResourceConfig)

    @classmethod
    def from_mapping(cls, mapping: cabc.Mapping[str, typ.Any]) -> Emmyrc:
        """Create an :class:`Emmyrc` from a parsed configuration mapping."""
        try:
            return msgspec.convert(dict(mapping), type=cls)
        except msgspec.ValidationError as exc:
            message = f"Invalid configuration: {exc}"
            raise ConfigurationError(message) from exc

    def pre_process(
        self,
        workspace_root: str | os.PathLike[str],
        *,
        environment: Environment | None = None,
    ) -> Emmyrc:
        """Return a copy with every path list resolved and de-duplicated.

        Workspace roots, libraries, ignored directories and resource paths are
        expanded, anchored to ``workspace_root`` and normalised. Ignore globs
        are patterns rather than paths and are kept as written.
        """

        def _resolve(entries: tuple[str, ...]) -> tuple[str, ...]:
            return resolve_paths(entries, workspace_root, environment=environment)

        workspace = msgspec.structs.replace(
            self.workspace,
            workspace_roots=_resolve(self.workspace.workspace_roots),
            library=_resolve(self.workspace.library),
            ignore_dir=_resolve(self.workspace.ignore_dir),
        )
        resource = msgspec.structs.replace(
            self.resource, paths=_resolve(self.resource.paths)
        )
        return msgspec.structs.replace(self, workspace=workspace, resource=resource)

    def path_settings(self) -> dict[str, list[str]]:
        """Return the four path lists keyed by their configuration names."""
        return {
            "workspaceRoots": list(self.workspace.workspace_roots),
            "library": list(self.workspace.library),
            "ignoreDir": list(self.workspace.ignore_dir),
            "resourcePaths": list(self.resource.paths),
        }


class EmmyrcJson(Json):
    """JSON loader that rejects documents whose root is not an object.

    Cyclopts substitutes an empty mapping for falsy documents, so ``[]`` and
    ``null`` are checked before that happens.
    """

    def _load_config(self, path: Path) -> dict[str, typ.Any]:
        document = super()._load_config(path)
        if not isinstance(document, dict):
            raise CycloptsError(msg=ROOT_NOT_OBJECT_MSG)
        return document


_active_config: contextvars.ContextVar[Emmyrc] = contextvars.ContextVar(
    "emmyrc_active_config"
)


def build_loader(workspace_root: str | os.PathLike[str]) -> Json | Toml:
    """Return a Cyclopts loader for the configuration in ``workspace_root``.

    ``.emmyrc.json`` is preferred; ``.emmyrc.toml`` is used when it is the
    only configuration file present.
    """
    resolved = normalise_workspace_root(workspace_root)
    options: dict[str, typ.Any] = {
        "must_exist": True,
        "search_parents": False,
        "allow_unknown": True,
        "use_commands_as_keys": True,
    }
    json_path = resolved / CONFIG_FILENAME
    toml_path = resolved / TOML_CONFIG_FILENAME
    if not json_path.exists() and toml_path.exists():
        return Toml(path=toml_path, **options)
    return EmmyrcJson(path=json_path, encoding="utf-8", **options)


def load_from_loader(loader: Json | Toml) -> Emmyrc:
    """Load and validate configuration using ``loader``."""
    try:
        raw = loader.config
    except FileNotFoundError as exc:
        missing_path = exc.filename or str(loader.path)
        message = f"Configuration file not found: {missing_path}"
        raise MissingConfigurationError(message) from exc
    except (CycloptsError, ValueError) as exc:
        message = f"Failed to parse {loader.path}: {exc}"
        raise ConfigurationError(message) from exc
    if not isinstance(raw, cabc.Mapping):
        raise ConfigurationError(ROOT_NOT_OBJECT_MSG)
    LOGGER.debug("Loaded configuration from %s", loader.path)
    return Emmyrc.from_mapping(raw)


def load_configuration(
    workspace_root: str | os.PathLike[str],
    *,
    environment: Environment | None = None,
) -> Emmyrc:
    """Load configuration for ``workspace_root`` and resolve its paths."""
    resolved = normalise_workspace_root(workspace_root)
    configuration = load_from_loader(build_loader(resolved))
    return configuration.pre_process(resolved, environment=environment)


@contextlib.contextmanager
def use_configuration(configuration: Emmyrc) -> typ.Iterator[None]:
    """Set ``configuration`` as the active configuration for the current context."""
    token = _active_config.set(configuration)
    try:
        yield
    finally:
        _active_config.reset(token)


def current_configuration() -> Emmyrc:
    """Return the active configuration or raise if none has been set."""
    try:
        return _active_config.get()
    except LookupError as exc:
        message = "Configuration has not been loaded yet."
        raise ConfigurationNotLoadedError(message) from exc
