"""Config module exports."""

from lcovremap.config.loader import load_config
from lcovremap.config.models import (
    LcovRemapConfig,
    LoggingConfig,
    LogOutputConfig,
    SourceMapConfig,
)

__all__ = [
    "load_config",
    "LcovRemapConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "SourceMapConfig",
]
