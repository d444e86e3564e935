"""Programmatic entry points.

``get_lcov`` returns the remapped LCOV text, ``write_lcov`` writes it to a
file. These are the only places where the source directory falls back to
the current working directory; everything below them takes it explicitly.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from lcovremap.core.logging import get_logger, run_context
from lcovremap.remap.driver import DEFAULT_PARALLELISM, run
from lcovremap.remap.output import assemble
from lcovremap.sourcemaps.loader import SourceMapResolver, default_sourcemap_resolver

log = get_logger("ops")


async def get_lcov(
    lcov: str | Path,
    sourcemaps: SourceMapResolver | None = None,
    source_dir: str | Path | None = None,
    *,
    parallelism: int = DEFAULT_PARALLELISM,
) -> str:
    """Remap ``lcov`` onto original sources and return LCOV text.

    Args:
        lcov: LCOV file path, or raw LCOV text.
        sourcemaps: Generated path -> map path. Defaults to a ``.map``
            sidecar next to each generated file.
        source_dir: Base directory for original paths. Defaults to the
            current working directory.
        parallelism: Max concurrent file reads.

    Raises:
        SourceMapError: When any generated file lacks a usable map.
        CoverageError: On malformed LCOV.
        OSError: When the LCOV file itself cannot be read.
    """
    resolver = sourcemaps or default_sourcemap_resolver()
    base = Path(source_dir) if source_dir is not None else Path.cwd()

    with run_context():
        table = await run(lcov, resolver, base, parallelism=parallelism)
        return await assemble(table, base, parallelism=parallelism)


async def write_lcov(
    lcov: str | Path,
    sourcemaps: SourceMapResolver | None,
    source_dir: str | Path | None,
    output_file: str | Path,
    *,
    parallelism: int = DEFAULT_PARALLELISM,
) -> int:
    """Remap ``lcov`` and write the result to ``output_file``.

    Nothing is written when the run fails.

    Returns:
        Number of records written.
    """
    data = await get_lcov(lcov, sourcemaps, source_dir, parallelism=parallelism)

    output = Path(output_file)
    await asyncio.to_thread(output.write_text, data, encoding="utf-8")

    records = sum(1 for line in data.splitlines() if line == "end_of_record")
    log.info("lcov_written", path=str(output), records=records)
    return records
