"""Source map value types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sourcemap.objects import SourceMapIndex


class Bias(Enum):
    """Which mapping to pick when none sits exactly at the requested column."""

    GREATEST_LOWER_BOUND = "glb"  # nearest mapping at or before
    LEAST_UPPER_BOUND = "lub"  # nearest mapping at or after


@dataclass(frozen=True, slots=True)
class OriginalPosition:
    """A resolved position in an original source file.

    ``source`` is never empty: lookups that land on a mapping without a
    source produce no position at all.
    """

    source: str
    line: int  # 1-based
    column: int  # 0-based
    name: str | None = None


@dataclass(frozen=True, slots=True)
class SourceMapHandle:
    """A decoded source map tied to the generated file it describes."""

    generated_path: str  # as written in the coverage input
    map_path: str  # file the map was read from
    index: SourceMapIndex
    source_root: str | None = None  # None when absent or empty
