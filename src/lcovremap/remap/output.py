"""Output assembly: normalize paths, keep existing files, serialize.

Bundlers often record sources under virtual schemes such as
``webpack:///src/app.ts``. Those prefixes are stripped so the path can be
checked against the real source tree. Records whose file does not exist
under the source directory (vendored or generated helpers) are left out of
the report without error.
"""

import asyncio
import re
from pathlib import Path

from lcovremap.core.logging import get_logger
from lcovremap.coverage.models import CoverageRecord, OutputTable
from lcovremap.coverage.writer import format_records
from lcovremap.remap.driver import DEFAULT_PARALLELISM

log = get_logger("remap.output")

_VIRTUAL_SCHEME = re.compile(r"^(?:\./)?([a-z]*?)://(.*)", re.IGNORECASE | re.DOTALL)


def normalize_path(path: str) -> str:
    """Strip a ``<scheme>://`` prefix.

    For any scheme other than ``file`` a leading ``/`` left after the scheme
    is dropped too, making the path relative to the source directory.
    Already-normalized paths come back unchanged.
    """
    match = _VIRTUAL_SCHEME.match(path)
    if match is None:
        return path
    scheme, rest = match.group(1), match.group(2)
    if scheme != "file" and rest.startswith("/"):
        rest = rest[1:]
    return rest


async def filter_existing(
    table: OutputTable,
    source_dir: Path,
    *,
    parallelism: int = DEFAULT_PARALLELISM,
) -> list[tuple[str, CoverageRecord]]:
    """Pair each record with its normalized path, dropping missing files.

    The table is not modified; order follows the table.
    """
    sem = asyncio.Semaphore(parallelism)

    def check(path: str) -> bool:
        try:
            return (source_dir / path).exists()
        except OSError as e:
            log.debug("existence_check_failed", path=path, error=str(e))
            return False

    async def exists(path: str) -> bool:
        async with sem:
            return await asyncio.to_thread(check, path)

    candidates = [(normalize_path(record.path), record) for record in table]
    found = await asyncio.gather(*(exists(path) for path, _ in candidates))

    kept: list[tuple[str, CoverageRecord]] = []
    for (path, record), present in zip(candidates, found, strict=True):
        if present:
            kept.append((path, record))
        else:
            log.debug("original_missing", path=path, source_dir=str(source_dir))
    return kept


async def assemble(
    table: OutputTable,
    source_dir: Path,
    *,
    parallelism: int = DEFAULT_PARALLELISM,
) -> str:
    """Serialize the records of ``table`` whose original file exists."""
    kept = await filter_existing(table, source_dir, parallelism=parallelism)
    log.info("assembled", records=len(kept), dropped=len(table) - len(kept))
    return format_records(kept)
