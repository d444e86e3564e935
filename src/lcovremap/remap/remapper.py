"""Remap one generated file's coverage onto original files.

Every function, line and branch entry is resolved independently. Entries
that resolve are appended to the record of the original file they land in;
two generated entries landing on the same original line stay two entries.
Entries that do not resolve are dropped.
"""

from pathlib import Path

from lcovremap.core.logging import get_logger
from lcovremap.coverage.models import (
    BranchHit,
    CoverageRecord,
    FunctionHit,
    LineHit,
    OutputTable,
)
from lcovremap.sourcemaps.models import OriginalPosition
from lcovremap.sourcemaps.resolver import PositionResolver

log = get_logger("remap.remapper")


def remap(
    generated: CoverageRecord,
    resolver: PositionResolver,
    source_dir: Path,
) -> OutputTable:
    """Remap ``generated`` through ``resolver`` into a fresh OutputTable.

    Args:
        generated: Parsed coverage of one generated file.
        resolver: Resolver over that file's source map.
        source_dir: Base directory original paths are expressed against.

    Returns:
        Records keyed by original path, in first-resolution order.
    """
    table = OutputTable()
    dropped = 0

    def record_for(position: OriginalPosition) -> CoverageRecord:
        return table.record_for(resolver.original_path(position, source_dir))

    for func in generated.functions:
        position = resolver.resolve(func.line)
        if position is None:
            dropped += 1
            continue
        record_for(position).add_function(
            FunctionHit(line=position.line, name=func.name, hits=func.hits)
        )

    for line in generated.lines:
        position = resolver.resolve(line.line)
        if position is None:
            dropped += 1
            continue
        record_for(position).add_line(LineHit(line=position.line, hits=line.hits))

    for branch in generated.branches:
        position = resolver.resolve(branch.line)
        if position is None:
            dropped += 1
            continue
        record_for(position).add_branch(
            BranchHit(
                line=position.line,
                block=branch.block,
                branch=branch.branch,
                taken=branch.taken,
            )
        )

    if dropped:
        log.debug("entries_dropped", generated=generated.path, dropped=dropped)
    log.debug("remap_done", generated=generated.path, originals=table.paths())
    return table
