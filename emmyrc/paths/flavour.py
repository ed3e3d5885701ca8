"""Platform-specific path classification used by the lexical normaliser.

Only this module knows how a platform spells drives, roots and separators.
The normaliser consumes the component stream produced here and stays
platform-agnostic.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import ntpath
import os
import posixpath
import typing as typ

if typ.TYPE_CHECKING:
    from collections import abc as cabc


class ComponentKind(enum.Enum):
    """Classification of a single path component."""

    PREFIX = "prefix"
    ROOT = "root"
    CURRENT = "current"
    PARENT = "parent"
    NORMAL = "normal"


class PathComponent(typ.NamedTuple):
    """A classified component and the text it was spelled with."""

    kind: ComponentKind
    text: str


@dc.dataclass(frozen=True, slots=True)
class PathFlavour:
    """Describe how a platform decomposes, joins and renders paths."""

    name: str
    separator: str
    alt_separators: tuple[str, ...] = ()
    drives: bool = False

    @property
    def separators(self) -> tuple[str, ...]:
        """Return every character accepted as a separator."""
        return (self.separator, *self.alt_separators)

    def split_prefix(self, path: str) -> tuple[str, str]:
        """Split ``path`` into its drive/share prefix and the remainder."""
        if not self.drives:
            return "", path
        return ntpath.splitdrive(path)

    def is_share(self, prefix: str) -> bool:
        """Return ``True`` when ``prefix`` names a UNC share.

        Shares are implicitly rooted: ``\\\\server\\share`` and
        ``\\\\server\\share\\`` name the same directory.
        """
        leading = prefix[:2]
        return len(leading) == 2 and all(c in self.separators for c in leading)

    def has_root(self, path: str) -> bool:
        """Return ``True`` when ``path`` has a root after any prefix."""
        prefix, remainder = self.split_prefix(path)
        return self.is_share(prefix) or remainder.startswith(self.separators)

    def is_absolute(self, path: str) -> bool:
        """Return ``True`` when ``path`` does not depend on a base directory.

        On Windows both a prefix and a root are required; ``\\temp`` and
        ``C:temp`` are still relative to the current drive or directory.
        """
        if not self.has_root(path):
            return False
        if not self.drives:
            return True
        prefix, _ = self.split_prefix(path)
        return bool(prefix)

    def join(self, base: str, tail: str) -> str:
        """Join ``tail`` onto ``base`` using the platform's join rules."""
        module = ntpath if self.drives else posixpath
        return module.join(base, tail)

    def strip_leading_separators(self, path: str) -> str:
        """Return ``path`` without any leading separator characters."""
        return path.lstrip("".join(self.separators))

    def components(self, path: str) -> cabc.Iterator[PathComponent]:
        """Yield the classified components of ``path`` in order.

        Repeated separators collapse, and a trailing separator contributes
        nothing.
        """
        prefix, remainder = self.split_prefix(path)
        if prefix:
            yield PathComponent(ComponentKind.PREFIX, prefix)
        if self.is_share(prefix) or remainder.startswith(self.separators):
            yield PathComponent(ComponentKind.ROOT, self.separator)
        for part in self._split_parts(remainder):
            if not part:
                continue
            if part == ".":
                yield PathComponent(ComponentKind.CURRENT, part)
            elif part == "..":
                yield PathComponent(ComponentKind.PARENT, part)
            else:
                yield PathComponent(ComponentKind.NORMAL, part)

    def _split_parts(self, remainder: str) -> list[str]:
        for alternative in self.alt_separators:
            remainder = remainder.replace(alternative, self.separator)
        return remainder.split(self.separator)


POSIX_FLAVOUR: typ.Final[PathFlavour] = PathFlavour(name="posix", separator="/")
WINDOWS_FLAVOUR: typ.Final[PathFlavour] = PathFlavour(
    name="windows", separator="\\", alt_separators=("/",), drives=True
)


def current_flavour() -> PathFlavour:
    """Return the flavour matching the running interpreter's platform."""
    return WINDOWS_FLAVOUR if os.name == "nt" else POSIX_FLAVOUR
