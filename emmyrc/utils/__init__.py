"""Utility helpers for the :mod:`emmyrc` package."""

from __future__ import annotations

from .path import normalise_workspace_root

__all__ = ["normalise_workspace_root"]
