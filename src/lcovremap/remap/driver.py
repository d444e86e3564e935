"""Aggregation driver: coverage + source maps -> one OutputTable.

Map loading fans out over worker threads (bounded by ``parallelism``) and
fans back in before any remapping starts. Remapping and merging then run
sequentially in coverage-input order, which fixes the order of the
serialized output.
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path

from lcovremap.core.logging import get_logger
from lcovremap.coverage.models import GeneratedFileTable, OutputTable
from lcovremap.coverage.parser import load_coverage
from lcovremap.remap.remapper import remap
from lcovremap.sourcemaps.loader import SourceMapResolver, load_source_map
from lcovremap.sourcemaps.models import SourceMapHandle
from lcovremap.sourcemaps.resolver import PositionResolver

log = get_logger("remap.driver")

DEFAULT_PARALLELISM = 8


@dataclass(slots=True)
class RunData:
    """Parsed coverage plus the source map of every generated file in it."""

    coverage: GeneratedFileTable
    sourcemaps: dict[str, SourceMapHandle]


async def load_source_maps(
    coverage: GeneratedFileTable,
    sourcemaps: SourceMapResolver,
    *,
    parallelism: int = DEFAULT_PARALLELISM,
) -> dict[str, SourceMapHandle]:
    """Load one map per generated file, concurrently.

    Returns:
        Handles keyed like ``coverage``, in the same order.

    Raises:
        SourceMapError: For the first generated file whose map cannot be
            loaded; the whole run is abandoned.
    """
    sem = asyncio.Semaphore(parallelism)

    async def load(generated_path: str) -> SourceMapHandle:
        async with sem:
            return await asyncio.to_thread(
                load_source_map, generated_path, sourcemaps(generated_path)
            )

    keys = list(coverage)
    handles = await asyncio.gather(*(load(key) for key in keys))
    return dict(zip(keys, handles, strict=True))


async def get_data(
    lcov: str | Path,
    sourcemaps: SourceMapResolver,
    *,
    parallelism: int = DEFAULT_PARALLELISM,
) -> RunData:
    """Parse the coverage input and load every source map it needs."""
    coverage = await asyncio.to_thread(load_coverage, lcov)
    handles = await load_source_maps(coverage, sourcemaps, parallelism=parallelism)
    return RunData(coverage=coverage, sourcemaps=handles)


async def run(
    lcov: str | Path,
    sourcemaps: SourceMapResolver,
    source_dir: Path,
    *,
    parallelism: int = DEFAULT_PARALLELISM,
) -> OutputTable:
    """Remap all coverage in ``lcov`` onto original files.

    Args:
        lcov: LCOV file path, or raw LCOV text.
        sourcemaps: Generated path -> map file path.
        source_dir: Base directory original paths are expressed against.
        parallelism: Max concurrent map loads.

    Returns:
        Records keyed by original path. Generated files resolving into the
        same original file have their entries concatenated.
    """
    data = await get_data(lcov, sourcemaps, parallelism=parallelism)

    output = OutputTable()
    for generated_path, record in data.coverage.items():
        resolver = PositionResolver(data.sourcemaps[generated_path])
        output.merge(remap(record, resolver, source_dir))

    log.info("remap_finished", generated=len(data.coverage), originals=len(output))
    return output
