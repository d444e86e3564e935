"""Core module exports."""

from lcovremap.core.errors import (
    ConfigError,
    CoverageError,
    ErrorCode,
    LcovRemapError,
    SourceMapError,
)
from lcovremap.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    run_context,
    set_run_id,
)
from lcovremap.core.progress import pluralize, spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "CoverageError",
    "ErrorCode",
    "LcovRemapError",
    "SourceMapError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "run_context",
    "set_run_id",
    # Progress
    "pluralize",
    "spinner",
    "status",
]
