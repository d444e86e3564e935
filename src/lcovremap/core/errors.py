"""lcov-remap error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Coverage input
- 4xxx: Source maps
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Coverage (3xxx)
    COVERAGE_PARSE_ERROR = 3001

    # Source maps (4xxx)
    SOURCEMAP_MISSING = 4001
    SOURCEMAP_UNREADABLE = 4002
    SOURCEMAP_DECODE_ERROR = 4003


# Not frozen: raising and re-raising assigns __traceback__ on the instance.
@dataclass(eq=False)
class LcovRemapError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'SOURCEMAP_MISSING')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(LcovRemapError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class CoverageError(LcovRemapError):
    """Malformed LCOV input."""

    @classmethod
    def parse_error(cls, lineno: int, line: str, reason: str) -> "CoverageError":
        return cls(
            code=ErrorCode.COVERAGE_PARSE_ERROR,
            message=f"Malformed LCOV at line {lineno}: {reason}",
            details={"lineno": lineno, "line": line, "reason": reason},
        )


class SourceMapError(LcovRemapError):
    """Source map lookup/loading errors.

    Every instance carries the generated file key from the coverage input in
    ``details["generated_path"]`` so callers can tell which build artifact
    lacks map data.
    """

    @property
    def generated_path(self) -> str:
        return str(self.details["generated_path"])

    @classmethod
    def missing(cls, generated_path: str, map_path: str | None = None) -> "SourceMapError":
        where = f" (looked in {map_path})" if map_path else ""
        return cls(
            code=ErrorCode.SOURCEMAP_MISSING,
            message=f"Missing sourcemap: {generated_path}{where}",
            details={"generated_path": generated_path, "map_path": map_path},
        )

    @classmethod
    def unreadable(cls, generated_path: str, map_path: str, reason: str) -> "SourceMapError":
        return cls(
            code=ErrorCode.SOURCEMAP_UNREADABLE,
            message=f"Cannot read sourcemap {map_path} for {generated_path}: {reason}",
            details={"generated_path": generated_path, "map_path": map_path, "reason": reason},
        )

    @classmethod
    def decode_error(cls, generated_path: str, map_path: str, reason: str) -> "SourceMapError":
        return cls(
            code=ErrorCode.SOURCEMAP_DECODE_ERROR,
            message=f"Invalid sourcemap {map_path} for {generated_path}: {reason}",
            details={"generated_path": generated_path, "map_path": map_path, "reason": reason},
        )
