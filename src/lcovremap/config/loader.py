"""Configuration loading with pydantic-settings.

Layers, highest precedence first:
1. Direct kwargs (CLI options end up here)
2. Environment variables (LCOVREMAP__SECTION__KEY)
3. Project config (<source_dir>/.lcovremap.yaml), or an explicit config file
4. Global config (~/.config/lcovremap/config.yaml)
5. Built-in defaults
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from lcovremap.config.models import LcovRemapConfig
from lcovremap.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/lcovremap/config.yaml").expanduser()
PROJECT_CONFIG_NAME = ".lcovremap.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    """Read one YAML layer. A missing file is an empty layer."""
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _collect_yaml(source_dir: Path, config_file: Path | None) -> dict[str, Any]:
    if config_file is None:
        project = _load_yaml(source_dir / PROJECT_CONFIG_NAME)
    elif config_file.is_file():
        project = _load_yaml(config_file)
    else:
        raise ConfigError.file_not_found(str(config_file))
    return _deep_merge(_load_yaml(GLOBAL_CONFIG_PATH), project)


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source over already-merged YAML layers."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return {name: value for name, value in self._data.items() if value is not None}


def _settings_for(yaml_config: dict[str, Any]) -> type[LcovRemapConfig]:
    """Build a settings class bound to one set of YAML layers.

    A class per call keeps concurrent loads from sharing YAML state.
    """

    class LcovRemapSettings(BaseSettings, LcovRemapConfig):
        model_config = SettingsConfigDict(
            env_prefix="LCOVREMAP__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # First wins: kwargs > env > yaml
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return LcovRemapSettings


def load_config(
    source_dir: Path | None = None,
    *,
    config_file: Path | None = None,
    **kwargs: Any,
) -> LcovRemapConfig:
    """Resolve configuration for a run over ``source_dir``.

    Args:
        source_dir: Directory holding ``.lcovremap.yaml``. Defaults to the
            current working directory.
        config_file: YAML file used instead of the project file. Unlike the
            project file it must exist.
        **kwargs: Section overrides, e.g. ``sourcemaps={"suffix": ".js.map"}``.

    Raises:
        ConfigError: Missing explicit config file, invalid YAML, or a value
            that fails validation.
    """
    yaml_config = _collect_yaml(source_dir or Path.cwd(), config_file)
    try:
        return _settings_for(yaml_config)(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
