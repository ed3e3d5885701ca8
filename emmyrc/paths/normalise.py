"""Lexical path normalisation.

``.`` and ``..`` components are folded using only the text of the path. The
filesystem is never consulted, so symbolic links are not resolved and the
result may name a location that does not exist.
"""

from __future__ import annotations

import os
import typing as typ

from .flavour import ComponentKind, current_flavour

if typ.TYPE_CHECKING:
    from .flavour import PathFlavour

_PARENT: typ.Final[str] = ".."


def normalise_path(
    path: str | os.PathLike[str], flavour: PathFlavour | None = None
) -> str:
    """Return the lexical normal form of ``path``.

    Parameters
    ----------
    path : str | os.PathLike[str]
        Candidate path, absolute or relative.
    flavour : PathFlavour | None, optional
        Platform rules used to classify components; defaults to the running
        platform.

    Returns
    -------
    str
        ``path`` with ``.`` removed and ``..`` applied. A ``..`` that would
        climb above a root or drive prefix is dropped, while leading ``..``
        components of a relative path are kept. The prefix and root of the
        input are preserved.

    Examples
    --------
    >>> from emmyrc.paths.flavour import POSIX_FLAVOUR
    >>> normalise_path("a/./b/../c", POSIX_FLAVOUR)
    'a/c'
    >>> normalise_path("/a/../../b", POSIX_FLAVOUR)
    '/b'
    >>> normalise_path("../../a", POSIX_FLAVOUR)
    '../../a'

    """
    active = flavour or current_flavour()
    prefix: str | None = None
    has_root = False
    stack: list[str] = []

    for component in active.components(os.fspath(path)):
        if component.kind is ComponentKind.PREFIX:
            prefix = component.text
        elif component.kind is ComponentKind.ROOT:
            has_root = True
        elif component.kind is ComponentKind.CURRENT:
            continue
        elif component.kind is ComponentKind.PARENT:
            if stack and stack[-1] != _PARENT:
                stack.pop()
            elif not has_root and prefix is None:
                stack.append(_PARENT)
        else:
            stack.append(component.text)

    head = (prefix or "") + (active.separator if has_root else "")
    return head + active.separator.join(stack)
