"""Read-only access to environment variables and the home directory.

Path resolution reads process state only through :class:`Environment` so tests
can substitute a deterministic source.
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    from collections import abc as cabc


class Environment(typ.Protocol):
    """Source of environment variables and the user's home directory."""

    def get(self, name: str) -> str | None:
        """Return the value of ``name`` or ``None`` when it is unset."""
        ...

    def home(self) -> str | None:
        """Return the home directory or ``None`` when it cannot be determined."""
        ...


class OsEnvironment:
    """Environment backed by :data:`os.environ` and :meth:`Path.home`."""

    def get(self, name: str) -> str | None:
        """Return the process environment value for ``name``."""
        return os.environ.get(name)

    def home(self) -> str | None:
        """Return the current user's home directory."""
        try:
            return str(Path.home())
        except RuntimeError:
            return None


@dc.dataclass(frozen=True, slots=True)
class MappingEnvironment:
    """Environment served from a fixed mapping."""

    variables: cabc.Mapping[str, str] = dc.field(default_factory=dict)
    home_dir: str | None = None

    def get(self, name: str) -> str | None:
        """Return ``name`` from :attr:`variables`."""
        return self.variables.get(name)

    def home(self) -> str | None:
        """Return :attr:`home_dir`."""
        return self.home_dir


def default_environment() -> Environment:
    """Return the environment of the running process."""
    return OsEnvironment()
