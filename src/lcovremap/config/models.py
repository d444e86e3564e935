"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (LCOVREMAP__SECTION__KEY)
3. Project YAML (<source_dir>/.lcovremap.yaml)
4. Global YAML (~/.config/lcovremap/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    LCOVREMAP__<SECTION>__<KEY>=<VALUE>

Examples:
    LCOVREMAP__LOGGING__LEVEL=DEBUG
    LCOVREMAP__SOURCEMAPS__SUFFIX=.js.map
    LCOVREMAP__SOURCEMAPS__PARALLELISM=16
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        LCOVREMAP__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO reports per-run totals, DEBUG every dropped entry.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class SourceMapConfig(BaseModel):
    """Source map lookup configuration.

    Env vars:
        LCOVREMAP__SOURCEMAPS__SUFFIX: Suffix appended to a generated path to find its map
        LCOVREMAP__SOURCEMAPS__INLINE: Read maps embedded in the generated files
        LCOVREMAP__SOURCEMAPS__PARALLELISM: Concurrent map loads / existence checks
    """

    suffix: str = Field(
        default=".map",
        description="Appended to each generated file path to locate its sidecar map.",
    )
    inline: bool = Field(
        default=False,
        description="Read the sourceMappingURL comment of the generated file instead "
        "of a sidecar map. Takes precedence over suffix.",
    )
    parallelism: int = Field(
        default=8,
        description="Max concurrent file reads while loading maps and checking originals.",
    )

    @field_validator("suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        if not v:
            raise ValueError("Suffix must not be empty")
        return v

    @field_validator("parallelism")
    @classmethod
    def validate_parallelism(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Parallelism must be >= 1, got {v}")
        return v


class LcovRemapConfig(BaseModel):
    """Root configuration for lcov-remap.

    All settings can be configured via:
    1. Environment variables: LCOVREMAP__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    sourcemaps: SourceMapConfig = Field(default_factory=SourceMapConfig)
