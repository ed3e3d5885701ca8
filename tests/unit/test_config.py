"""Tests for ``emmyrc.config``."""

from __future__ import annotations

import json
import typing as typ

import pytest
import tomlkit

from emmyrc import config as config_module
from emmyrc.paths import MappingEnvironment

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write_json_config(root: Path, payload: object) -> Path:
    config_path = root / config_module.CONFIG_FILENAME
    config_path.write_text(json.dumps(payload), encoding="utf-8")
    return config_path


def _write_toml_config(root: Path, workspace: dict[str, list[str]]) -> Path:
    document = tomlkit.document()
    table = tomlkit.table()
    for key, values in workspace.items():
        table[key] = values
    document["workspace"] = table
    config_path = root / config_module.TOML_CONFIG_FILENAME
    config_path.write_text(tomlkit.dumps(document), encoding="utf-8")
    return config_path


def test_load_configuration_resolves_path_lists(
    tmp_path: Path, fake_environment: MappingEnvironment
) -> None:
    """Load a representative ``.emmyrc.json`` and resolve its paths."""
    _write_json_config(
        tmp_path,
        {
            "$schema": "https://example.invalid/schema.json",
            "runtime": {"version": "LuaJIT"},
            "workspace": {
                "workspaceRoots": ["./", "{workspaceFolder}", "sub/.."],
                "library": ["$LUA_HOME/lib", "~/.luarocks", "$LUA_HOME/lib/"],
                "ignoreDir": ["build", "./build/../build"],
                "ignoreGlobs": ["**/*_spec.lua"],
                "enableReindex": True,
            },
            "resource": {"paths": ["{env:LUA_HOME}/res", "res"]},
        },
    )

    configuration = config_module.load_configuration(
        tmp_path, environment=fake_environment
    )

    root = str(tmp_path)
    assert configuration.schema == "https://example.invalid/schema.json"
    assert configuration.workspace.workspace_roots == (root,)
    assert configuration.workspace.library == ("/opt/lua/lib", "/home/tester/.luarocks")
    assert configuration.workspace.ignore_dir == (f"{root}/build",)
    assert configuration.workspace.ignore_globs == ("**/*_spec.lua",)
    assert configuration.resource.paths == ("/opt/lua/res", f"{root}/res")


def test_load_configuration_reads_toml(
    tmp_path: Path, fake_environment: MappingEnvironment
) -> None:
    """``.emmyrc.toml`` is used when no JSON configuration exists."""
    _write_toml_config(tmp_path, {"library": ["lib", "./lib"]})

    configuration = config_module.load_configuration(
        tmp_path, environment=fake_environment
    )

    assert configuration.workspace.library == (f"{tmp_path}/lib",)


def test_json_configuration_takes_precedence(tmp_path: Path) -> None:
    """The JSON file wins when both configuration files are present."""
    _write_json_config(tmp_path, {})
    _write_toml_config(tmp_path, {"library": ["lib"]})

    loader = config_module.build_loader(tmp_path)

    assert loader.path == tmp_path / config_module.CONFIG_FILENAME


def test_load_configuration_applies_defaults(tmp_path: Path) -> None:
    """Missing sections fall back to empty path lists."""
    _write_json_config(tmp_path, {})

    configuration = config_module.load_configuration(tmp_path)

    assert configuration.schema is None
    assert configuration.workspace.library == ()
    assert configuration.resource.paths == ()


def test_load_configuration_requires_file(tmp_path: Path) -> None:
    """Raise a descriptive error when no configuration file is present."""
    with pytest.raises(config_module.MissingConfigurationError):
        config_module.load_configuration(tmp_path)


def test_load_configuration_rejects_malformed_json(tmp_path: Path) -> None:
    """Unparseable files surface as configuration errors."""
    (tmp_path / config_module.CONFIG_FILENAME).write_text("{", encoding="utf-8")

    with pytest.raises(config_module.ConfigurationError):
        config_module.load_configuration(tmp_path)


@pytest.mark.parametrize(
    "payload",
    [
        {"workspace": {"library": [1]}},
        {"workspace": {"workspaceRoots": "./"}},
        {"resource": {"paths": [None]}},
        {"workspace": []},
    ],
)
def test_invalid_path_settings_raise(tmp_path: Path, payload: object) -> None:
    """Reject path settings that are not lists of strings."""
    _write_json_config(tmp_path, payload)

    with pytest.raises(config_module.ConfigurationError, match="Invalid"):
        config_module.load_configuration(tmp_path)


def test_pre_process_returns_new_configuration(
    fake_environment: MappingEnvironment,
) -> None:
    """Pre-processing leaves the raw configuration untouched."""
    raw = config_module.Emmyrc.from_mapping(
        {"workspace": {"library": ["lib", "./lib"]}}
    )

    processed = raw.pre_process("/ws", environment=fake_environment)

    assert raw.workspace.library == ("lib", "./lib")
    assert processed.workspace.library == ("/ws/lib",)


def test_path_settings_lists_resolved_fields() -> None:
    """The summary exposes the four path lists by configuration name."""
    configuration = config_module.Emmyrc.from_mapping(
        {
            "workspace": {"workspaceRoots": ["/a"], "ignoreDir": ["/b"]},
            "resource": {"paths": ["/c"]},
        }
    )

    assert configuration.path_settings() == {
        "workspaceRoots": ["/a"],
        "library": [],
        "ignoreDir": ["/b"],
        "resourcePaths": ["/c"],
    }


def test_use_configuration_sets_context() -> None:
    """The configuration context manager exposes the active configuration."""
    configuration = config_module.Emmyrc()

    with pytest.raises(config_module.ConfigurationNotLoadedError):
        config_module.current_configuration()

    with config_module.use_configuration(configuration):
        assert config_module.current_configuration() is configuration

    with pytest.raises(config_module.ConfigurationNotLoadedError):
        config_module.current_configuration()


def test_nested_use_configuration_contexts() -> None:
    """Nested configuration contexts restore the previous configuration."""
    config_a = config_module.Emmyrc()
    config_b = config_module.Emmyrc(schema="b")

    with config_module.use_configuration(config_a):
        assert config_module.current_configuration() is config_a
        with config_module.use_configuration(config_b):
            assert config_module.current_configuration() is config_b
        assert config_module.current_configuration() is config_a


@pytest.mark.parametrize("document", ["[]", "null", "[1, 2]", '"text"'])
def test_load_configuration_rejects_non_object_root(
    tmp_path: Path, document: str
) -> None:
    """JSON documents must have an object at the root, even when empty."""
    (tmp_path / config_module.CONFIG_FILENAME).write_text(document, encoding="utf-8")

    with pytest.raises(config_module.ConfigurationError, match="must be an object"):
        config_module.load_configuration(tmp_path)
