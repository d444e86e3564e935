"""Source map loading and position resolution."""

from lcovremap.sourcemaps.loader import (
    DEFAULT_SUFFIX,
    SourceMapResolver,
    default_sourcemap_resolver,
    inline_sourcemap_resolver,
    load_source_map,
)
from lcovremap.sourcemaps.models import Bias, OriginalPosition, SourceMapHandle
from lcovremap.sourcemaps.resolver import PositionResolver

__all__ = [
    "DEFAULT_SUFFIX",
    "Bias",
    "OriginalPosition",
    "PositionResolver",
    "SourceMapHandle",
    "SourceMapResolver",
    "default_sourcemap_resolver",
    "inline_sourcemap_resolver",
    "load_source_map",
]
