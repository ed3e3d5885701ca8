"""Pytest configuration for the emmyrc test-suite."""

from __future__ import annotations

import os
import typing as typ

import pytest

from emmyrc.paths import MappingEnvironment


@pytest.fixture
def fake_environment() -> MappingEnvironment:
    """Return a deterministic environment with a home directory and variables."""
    return MappingEnvironment(
        variables={"FOO": "bar", "LUA_HOME": "/opt/lua", "EMPTY": ""},
        home_dir="/home/tester",
    )


@pytest.fixture(autouse=True)
def _restore_workspace_env() -> typ.Iterator[None]:
    """Ensure tests do not leak ``EMMYRC_WORKSPACE_ROOT`` between runs."""
    from emmyrc.cli import WORKSPACE_ROOT_ENV_VAR

    original = os.environ.get(WORKSPACE_ROOT_ENV_VAR)
    try:
        yield
    finally:
        if original is None:
            os.environ.pop(WORKSPACE_ROOT_ENV_VAR, None)
        else:
            os.environ[WORKSPACE_ROOT_ENV_VAR] = original
