"""Remapping pipeline: remap per generated file, aggregate, assemble."""

from lcovremap.remap.driver import (
    DEFAULT_PARALLELISM,
    RunData,
    get_data,
    load_source_maps,
    run,
)
from lcovremap.remap.output import assemble, filter_existing, normalize_path
from lcovremap.remap.remapper import remap

__all__ = [
    "DEFAULT_PARALLELISM",
    "RunData",
    "assemble",
    "filter_existing",
    "get_data",
    "load_source_maps",
    "normalize_path",
    "remap",
    "run",
]
