"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and error handling
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from lcovremap.config.loader import (
    GLOBAL_CONFIG_PATH,
    PROJECT_CONFIG_NAME,
    _deep_merge,
    _load_yaml,
    load_config,
)
from lcovremap.core.errors import ConfigError, ErrorCode


@pytest.fixture
def no_global(tmp_path: Path) -> Any:
    """Point the global config at a file that does not exist."""
    with patch("lcovremap.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
        yield


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("sourcemaps:\n  suffix: .js.map\n")

        assert _load_yaml(yaml_file) == {"sourcemaps": {"suffix": ".js.map"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("logging:\n  level:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_merge(self) -> None:
        base = {"sourcemaps": {"suffix": ".map", "parallelism": 4}}
        override = {"sourcemaps": {"suffix": ".js.map"}}
        assert _deep_merge(base, override) == {
            "sourcemaps": {"suffix": ".js.map", "parallelism": 4}
        }

    def test_override_replaces_non_dict(self) -> None:
        base: dict[str, Any] = {"a": {"nested": 1}}
        assert _deep_merge(base, {"a": "simple"}) == {"a": "simple"}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": 1}
        _deep_merge(base, {"b": 2})
        assert base == {"a": 1}


@pytest.mark.usefixtures("no_global")
class TestLoadConfig:
    """Tests for load_config function."""

    def test_returns_default_config_when_no_files(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.logging.level == "WARNING"
        assert config.sourcemaps.suffix == ".map"
        assert config.sourcemaps.inline is False
        assert config.sourcemaps.parallelism == 8

    def test_loads_project_config(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text(
            "logging:\n  level: DEBUG\nsourcemaps:\n  inline: true\n"
        )

        config = load_config(tmp_path)

        assert config.logging.level == "DEBUG"
        assert config.sourcemaps.inline is True

    def test_global_config_merged_under_project(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text("sourcemaps:\n  suffix: .g.map\n  parallelism: 2\n")
        (tmp_path / PROJECT_CONFIG_NAME).write_text("sourcemaps:\n  suffix: .p.map\n")

        with patch("lcovremap.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(tmp_path)

        assert config.sourcemaps.suffix == ".p.map"
        assert config.sourcemaps.parallelism == 2

    def test_explicit_config_file_replaces_project_file(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("sourcemaps:\n  suffix: .p.map\n")
        explicit = tmp_path / "ci.yaml"
        explicit.write_text("sourcemaps:\n  suffix: .ci.map\n")

        config = load_config(tmp_path, config_file=explicit)

        assert config.sourcemaps.suffix == ".ci.map"

    def test_missing_explicit_config_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path, config_file=tmp_path / "nope.yaml")
        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_env_vars_override_yaml(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("logging:\n  level: INFO\n")

        with patch.dict(os.environ, {"LCOVREMAP__LOGGING__LEVEL": "ERROR"}):
            config = load_config(tmp_path)

        assert config.logging.level == "ERROR"

    def test_env_var_nested_sourcemap_setting(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"LCOVREMAP__SOURCEMAPS__PARALLELISM": "16"}):
            config = load_config(tmp_path)

        assert config.sourcemaps.parallelism == 16

    def test_kwargs_override_all(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("logging:\n  level: INFO\n")

        config = load_config(tmp_path, logging={"level": "CRITICAL"})

        assert config.logging.level == "CRITICAL"

    def test_raises_config_error_for_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("sourcemaps:\n  parallelism: 0\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "sourcemaps" in exc_info.value.details["field"]


class TestGlobalConfigPath:
    """Tests for GLOBAL_CONFIG_PATH constant."""

    def test_is_in_user_config(self) -> None:
        assert GLOBAL_CONFIG_PATH.parts[-3:] == (".config", "lcovremap", "config.yaml")
